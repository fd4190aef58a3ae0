"""
General mixed graph over named nodes.

Edges may be directed (-->), bidirected (<->), undirected (---) or carry
circle marks (o->, o-o, --o), and a node pair may hold a directed or
undirected edge together with a bidirected one.

We store a dense endpoint-mark matrix `graph` where graph[i, j] is the mark
at node i on the edge between i and j (see Endpoint for the codes):

    i --> j :  graph[i, j] = TAIL,  graph[j, i] = ARROW
    i <-> j :  graph[i, j] = ARROW, graph[j, i] = ARROW
    i o-> j :  graph[i, j] = CIRCLE, graph[j, i] = ARROW

The two cells of a pair are always read and written together through
PairState. Alongside it, `dpath` is the reflexive transitive closure of the
directed edges: dpath[i, j] is True iff i is an ancestor of j.
"""

import logging
from collections import deque
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import numpy as np

from .edge import (
    Edge, directed_edge, bidirected_edge, undirected_edge,
    partially_oriented_edge, nondirected_edge, is_directed_edge,
)
from .encoding import PairState
from .endpoint import Endpoint, NULL, ARROW, TAIL, CIRCLE, PLAIN_MARKS
from .exceptions import (
    DuplicateNodeError, EdgeConstructionError, GraphIntegrityError, NodeNotFoundError,
)
from .node import Node
from . import reachability

logger = logging.getLogger(__name__)

Triple = Tuple[Node, Node, Node]


class Graph:
    """
    Mixed graph with O(1) ancestor lookups.

    Not thread-safe: a host sharing one instance between threads must
    serialise every call against it.
    """

    def __init__(self, nodes: Optional[Iterable[Node]] = None):
        self.nodes: List[Node] = []
        self.node_map: Dict[str, int] = {}
        self.graph = np.zeros((0, 0), dtype=int)
        self.dpath = np.zeros((0, 0), dtype=bool)
        self.attributes: Dict[str, Any] = {}

        self.pattern = False
        self.pag = False

        # stored and handed back unchanged; nothing here classifies triples
        self.ambiguous_triples: List[Triple] = []
        self.underline_triples: List[Triple] = []
        self.dotted_underline_triples: List[Triple] = []

        if nodes is not None:
            self.add_nodes(nodes)

    @property
    def num_vars(self) -> int:
        return len(self.nodes)

    # =========================================================================
    # Index helpers
    # =========================================================================

    def _index(self, node: Node) -> int:
        idx = self.node_map.get(node.name)
        if idx is None:
            raise NodeNotFoundError(node.name)
        if self.nodes[idx] != node:
            raise GraphIntegrityError(
                f"Index map sends '{node.name}' to {idx}, which holds '{self.nodes[idx].name}'"
            )
        return idx

    def _rebuild_node_map(self):
        self.node_map = {node.name: idx for idx, node in enumerate(self.nodes)}

    def _pair(self, i: int, j: int) -> PairState:
        return PairState.decode(self.graph[i, j], self.graph[j, i])

    def _write_pair(self, i: int, j: int, state: PairState):
        m_ij, m_ji = state.encode()
        self.graph[i, j] = m_ij
        self.graph[j, i] = m_ji

    def _occupied(self, i: int) -> List[int]:
        """Indices j sharing at least one edge with i."""
        return [j for j in range(self.num_vars) if self.graph[i, j] != NULL]

    def _pair_edges(self, i: int, j: int) -> List[Edge]:
        node_i = self.nodes[i]
        node_j = self.nodes[j]
        return [Edge(node_i, node_j, a, b) for a, b in self._pair(i, j).edges]

    # =========================================================================
    # Reachability matrix
    # =========================================================================

    def _adjust_dpath(self, i: int, j: int):
        """
        Record a directed edge i --> j: every ancestor of i becomes an
        ancestor of every descendant of j. Both sets include the endpoints
        themselves since dpath is reflexive.
        """
        ancestors_of_i = self.dpath[:, i].copy()
        descendants_of_j = self.dpath[j, :].copy()
        self.dpath[np.ix_(ancestors_of_i, descendants_of_j)] = True

    def reconstitute_dpath(self, edges: Optional[Iterable[Edge]] = None):
        """Rebuild dpath from scratch out of the directed edges given (default: all)."""
        if edges is None:
            edges = self.get_graph_edges()
        self.dpath = np.eye(self.num_vars, dtype=bool)
        for edge in edges:
            if is_directed_edge(edge):
                self._adjust_dpath(self._index(edge.node1), self._index(edge.node2))
        logger.debug("Rebuilt reachability matrix over %d nodes", self.num_vars)

    # =========================================================================
    # Nodes
    # =========================================================================

    def add_node(self, node: Node) -> bool:
        """
        Append node. Returns False (and changes nothing) if a node with the
        same name is already present.
        """
        if node.name in self.node_map:
            logger.debug("Node %s already in graph", node.name)
            return False
        n = self.num_vars
        self.nodes.append(node)
        self.node_map[node.name] = n

        self.graph = np.pad(self.graph, ((0, 1), (0, 1)), constant_values=NULL)
        self.dpath = np.pad(self.dpath, ((0, 1), (0, 1)), constant_values=False)
        self.dpath[n, n] = True
        return True

    def add_nodes(self, nodes: Iterable[Node]) -> int:
        """Add each node in turn; returns how many were new."""
        return sum(1 for node in nodes if self.add_node(node))

    def remove_node(self, node: Node) -> bool:
        """
        Delete node together with every edge touching it. Nodes after it
        move down one index; the reachability matrix is rebuilt since paths
        through the node are gone.
        """
        if not self.contains_node(node):
            return False
        i = self._index(node)
        n = self.num_vars

        self.graph = np.delete(np.delete(self.graph, i, axis=0), i, axis=1)
        del self.nodes[i]
        self._rebuild_node_map()

        if self.graph.shape != (n - 1, n - 1) or len(self.node_map) != n - 1:
            raise GraphIntegrityError(
                f"Removing index {i} left a {self.graph.shape} matrix for {len(self.node_map)} nodes"
            )
        self.reconstitute_dpath()
        logger.debug("Removed node %s (index %d)", node.name, i)
        return True

    def remove_nodes(self, nodes: Iterable[Node]) -> int:
        return sum(1 for node in list(nodes) if self.remove_node(node))

    def rename_node(self, node: Node, name: str):
        """
        Rename a node held by this graph, keeping the index map in sync.

        The node object itself is renamed, so its hash changes: sets and dict
        keys built beforehand from the node or from its edges no longer find
        it. Lists holding the node, the stored triples included, see the new
        name.
        """
        i = self._index(node)
        if name == node.name:
            return
        if name in self.node_map:
            raise DuplicateNodeError(name)
        held = self.nodes[i]
        del self.node_map[held.name]
        held._name = name
        self.node_map[name] = i

    def contains_node(self, node: Node) -> bool:
        idx = self.node_map.get(node.name)
        return idx is not None and self.nodes[idx] == node

    def get_node(self, name: str) -> Optional[Node]:
        idx = self.node_map.get(name)
        return None if idx is None else self.nodes[idx]

    def get_nodes(self) -> List[Node]:
        return list(self.nodes)

    def get_node_names(self) -> List[str]:
        return [node.name for node in self.nodes]

    def get_num_nodes(self) -> int:
        return self.num_vars

    def clear(self):
        self.nodes = []
        self.node_map = {}
        self.graph = np.zeros((0, 0), dtype=int)
        self.dpath = np.zeros((0, 0), dtype=bool)

    # =========================================================================
    # Edge mutations
    # =========================================================================

    def add_edge(self, edge: Edge) -> bool:
        """
        Add edge if the pair it joins can take it. Returns False and leaves
        the graph untouched when the pair already holds a conflicting
        configuration (see PairState.with_edge) or the edge is a self-loop.
        """
        i = self._index(edge.node1)
        j = self._index(edge.node2)
        if i == j:
            logger.debug("Rejected self-loop %s", edge)
            return False

        new_state = self._pair(i, j).with_edge(edge.endpoint1, edge.endpoint2)
        if new_state is None:
            logger.debug("Rejected %s: pair already holds %s", edge, self._pair_edges(i, j))
            return False
        self._write_pair(i, j, new_state)

        if edge.endpoint1 == TAIL and edge.endpoint2 == ARROW:
            self._adjust_dpath(i, j)
        return True

    def add_directed_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(directed_edge(node1, node2))

    def add_bidirected_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(bidirected_edge(node1, node2))

    def add_undirected_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(undirected_edge(node1, node2))

    def add_nondirected_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(nondirected_edge(node1, node2))

    def add_partially_oriented_edge(self, node1: Node, node2: Node) -> bool:
        return self.add_edge(partially_oriented_edge(node1, node2))

    def remove_edge(self, edge: Edge) -> bool:
        """
        Remove exactly this logical edge. If the pair also holds a second
        edge, that edge is left in place.
        """
        i = self._index(edge.node1)
        j = self._index(edge.node2)
        new_state = self._pair(i, j).without_edge(edge.endpoint1, edge.endpoint2)
        if new_state is None:
            return False
        self._write_pair(i, j, new_state)
        if is_directed_edge(edge):
            self.reconstitute_dpath()
        return True

    def remove_edges(self, edges: Iterable[Edge]) -> int:
        return sum(1 for edge in list(edges) if self.remove_edge(edge))

    def remove_connecting_edges(self, node1: Node, node2: Node) -> List[Edge]:
        """Clear the pair outright and return whatever edges it held."""
        i = self._index(node1)
        j = self._index(node2)
        removed = self._pair_edges(i, j)
        if not removed:
            return removed
        self.graph[i, j] = NULL
        self.graph[j, i] = NULL
        if any(is_directed_edge(edge) for edge in removed):
            self.reconstitute_dpath()
        return removed

    def remove_connecting_edge(self, node1: Node, node2: Node) -> bool:
        return bool(self.remove_connecting_edges(node1, node2))

    def set_endpoint(self, node1: Node, node2: Node, endpoint: Endpoint) -> bool:
        """
        Change the mark at node2 on the single edge between node1 and node2.
        Returns False if the pair holds no edge or two edges, or if the
        re-marked edge cannot be stored; the graph is then unchanged.
        """
        edges = self.get_connecting_edges(node1, node2)
        if len(edges) != 1:
            return False
        old = edges[0]
        new = Edge(node1, node2, old.get_proximal_endpoint(node1), endpoint)
        self.remove_edge(old)
        if self.add_edge(new):
            return True
        self.add_edge(old)
        return False

    def _check_plain(self, endpoint: Endpoint):
        if endpoint not in PLAIN_MARKS:
            raise EdgeConstructionError(f"Cannot mark every edge with {endpoint!r}")

    def fully_connect(self, endpoint: Endpoint):
        """Replace all edges by an endpoint-endpoint edge between every pair."""
        self._check_plain(endpoint)
        self.graph[:, :] = NULL
        for i in range(self.num_vars):
            for j in range(i + 1, self.num_vars):
                self.add_edge(Edge(self.nodes[i], self.nodes[j], endpoint, endpoint))
        self.reconstitute_dpath()

    def reorient_all_with(self, endpoint: Endpoint):
        """Keep the adjacencies, give every remaining edge this mark at both ends."""
        self._check_plain(endpoint)
        adjacent = [
            (self.nodes[i], self.nodes[j])
            for i in range(self.num_vars)
            for j in self._occupied(i)
            if i < j
        ]
        self.graph[:, :] = NULL
        for node1, node2 in adjacent:
            self.add_edge(Edge(node1, node2, endpoint, endpoint))
        self.reconstitute_dpath()

    # =========================================================================
    # Edge queries
    # =========================================================================

    def contains_edge(self, edge: Edge) -> bool:
        if not (self.contains_node(edge.node1) and self.contains_node(edge.node2)):
            return False
        i = self._index(edge.node1)
        j = self._index(edge.node2)
        return self._pair(i, j).contains(edge.endpoint1, edge.endpoint2)

    def get_connecting_edges(self, node1: Node, node2: Node) -> List[Edge]:
        return self._pair_edges(self._index(node1), self._index(node2))

    def get_edge(self, node1: Node, node2: Node) -> Optional[Edge]:
        """
        The edge between node1 and node2, None if they are not adjacent. For
        a pair holding two edges, the non-bidirected one is returned.
        """
        edges = self.get_connecting_edges(node1, node2)
        return edges[0] if edges else None

    def get_directed_edge(self, node1: Node, node2: Node) -> Optional[Edge]:
        """The edge node1 --> node2 if present."""
        wanted = directed_edge(node1, node2)
        return wanted if self.contains_edge(wanted) else None

    def get_node_edges(self, node: Node) -> List[Edge]:
        i = self._index(node)
        edges = []
        for j in self._occupied(i):
            edges.extend(self._pair_edges(i, j))
        return edges

    def get_graph_edges(self) -> List[Edge]:
        edges = []
        for i in range(self.num_vars):
            for j in self._occupied(i):
                if j > i:
                    edges.extend(self._pair_edges(i, j))
        return edges

    def get_num_edges(self) -> int:
        return len(self.get_graph_edges())

    def get_num_connected_edges(self, node: Node) -> int:
        return len(self.get_node_edges(node))

    def get_endpoint(self, node1: Node, node2: Node) -> Optional[Endpoint]:
        """
        Mark at node2 on the edge(s) between node1 and node2. None if they
        are not adjacent, or if two edges disagree on the mark at node2.
        """
        marks = set(self._pair(self._index(node1), self._index(node2)).marks_at_j())
        if len(marks) != 1:
            return None
        return marks.pop()

    # =========================================================================
    # Adjacency and degree
    # =========================================================================

    def is_adjacent_to(self, node1: Node, node2: Node) -> bool:
        return self.graph[self._index(node1), self._index(node2)] != NULL

    def get_adjacent_nodes(self, node: Node) -> List[Node]:
        return [self.nodes[j] for j in self._occupied(self._index(node))]

    def _marks_at(self, i: int) -> List[Endpoint]:
        """Every mark at node i, one per logical edge touching it."""
        marks = []
        for j in self._occupied(i):
            marks.extend(self._pair(i, j).marks_at_i())
        return marks

    def get_in_degree(self, node: Node) -> int:
        """Number of arrowheads at node."""
        return sum(1 for mark in self._marks_at(self._index(node)) if mark == ARROW)

    def get_out_degree(self, node: Node) -> int:
        """Number of tails at node."""
        return sum(1 for mark in self._marks_at(self._index(node)) if mark == TAIL)

    def get_degree(self, node: Node) -> int:
        """Number of logical edges touching node."""
        return len(self._marks_at(self._index(node)))

    def get_nodes_into(self, node: Node, endpoint: Endpoint) -> List[Node]:
        """Nodes joined to node by an edge carrying endpoint at node."""
        i = self._index(node)
        return [
            self.nodes[j] for j in self._occupied(i)
            if endpoint in self._pair(i, j).marks_at_i()
        ]

    def get_nodes_out_of(self, node: Node, endpoint: Endpoint) -> List[Node]:
        """Nodes joined to node by an edge carrying endpoint at the other node."""
        i = self._index(node)
        return [
            self.nodes[j] for j in self._occupied(i)
            if endpoint in self._pair(i, j).marks_at_j()
        ]

    # =========================================================================
    # Parents, children, ancestry
    # =========================================================================

    def _is_parent_index(self, i: int, j: int) -> bool:
        """True iff i --> j."""
        return self._pair(i, j).contains(TAIL, ARROW)

    def get_parents(self, node: Node) -> List[Node]:
        j = self._index(node)
        return [self.nodes[i] for i in self._occupied(j) if self._is_parent_index(i, j)]

    def get_children(self, node: Node) -> List[Node]:
        i = self._index(node)
        return [self.nodes[j] for j in self._occupied(i) if self._is_parent_index(i, j)]

    def is_parent_of(self, node1: Node, node2: Node) -> bool:
        return self._is_parent_index(self._index(node1), self._index(node2))

    def is_child_of(self, node1: Node, node2: Node) -> bool:
        return self.is_parent_of(node2, node1)

    def is_directed_from_to(self, node1: Node, node2: Node) -> bool:
        return self.is_parent_of(node1, node2)

    def is_undirected_from_to(self, node1: Node, node2: Node) -> bool:
        return self._pair(self._index(node1), self._index(node2)).contains(TAIL, TAIL)

    def _collect(self, node: Node, step, found: Set[Node], ordered: List[Node]):
        """Depth-first walk along step from node, appending nodes in preorder."""
        stack = deque([node])
        while stack:
            current = stack.pop()
            if current in found:
                continue
            found.add(current)
            ordered.append(current)
            # reversed so the first neighbour is expanded first
            stack.extend(reversed(step(current)))

    def get_ancestors(self, nodes: Iterable[Node]) -> List[Node]:
        """The given nodes and all their ancestors, in discovery order."""
        found: Set[Node] = set()
        ordered: List[Node] = []
        for node in nodes:
            self._collect(node, self.get_parents, found, ordered)
        return ordered

    def get_descendants(self, nodes: Iterable[Node]) -> List[Node]:
        """The given nodes and all their descendants, in discovery order."""
        found: Set[Node] = set()
        ordered: List[Node] = []
        for node in nodes:
            self._collect(node, self.get_children, found, ordered)
        return ordered

    def is_ancestor_of(self, node1: Node, node2: Node) -> bool:
        """True iff node1 == node2 or a directed path runs node1 --> ... --> node2."""
        return bool(self.dpath[self._index(node1), self._index(node2)])

    def is_descendant_of(self, node1: Node, node2: Node) -> bool:
        return self.is_ancestor_of(node2, node1)

    def is_proper_ancestor_of(self, node1: Node, node2: Node) -> bool:
        return node1 != node2 and self.is_ancestor_of(node1, node2)

    def is_proper_descendant_of(self, node1: Node, node2: Node) -> bool:
        return node1 != node2 and self.is_descendant_of(node1, node2)

    def possible_ancestor(self, node1: Node, node2: Node) -> bool:
        """True iff node1 == node2 or a semi-directed path runs from node1 to node2."""
        return node1 == node2 or self.exists_semi_directed_path_from_to(node1, node2)

    def is_exogenous(self, node: Node) -> bool:
        return self.get_in_degree(node) == 0

    # =========================================================================
    # Colliders
    # =========================================================================

    def is_def_collider(self, node1: Node, node2: Node, node3: Node) -> bool:
        """node1 *-> node2 <-* node3"""
        return (
            self.get_endpoint(node1, node2) == ARROW
            and self.get_endpoint(node3, node2) == ARROW
        )

    def is_def_noncollider(self, node1: Node, node2: Node, node3: Node) -> bool:
        """
        node2 is a definite non-collider on node1 *-* node2 *-* node3 if an
        edge points away from node2, or if both marks at node2 are circles
        and node1, node3 are not adjacent.
        """
        edge12 = self.get_edge(node1, node2)
        edge23 = self.get_edge(node2, node3)
        if edge12 is None or edge23 is None:
            return False
        if self.get_endpoint(node1, node2) == TAIL or self.get_endpoint(node3, node2) == TAIL:
            return True
        return (
            self.get_endpoint(node1, node2) == CIRCLE
            and self.get_endpoint(node3, node2) == CIRCLE
            and not self.is_adjacent_to(node1, node3)
        )

    # =========================================================================
    # Path queries (see reachability)
    # =========================================================================

    def exists_directed_path_from_to(self, node1: Node, node2: Node) -> bool:
        return reachability.exists_directed_path_from_to_breadth_first(node1, node2, self)

    def exists_semi_directed_path_from_to(self, node1: Node, node2: Node) -> bool:
        return reachability.exists_semi_directed_path(node1, node2, self)

    def exists_undirected_path_from_to(self, node1: Node, node2: Node) -> bool:
        return reachability.exists_undirected_path(node1, node2, self)

    def exists_directed_cycle(self) -> bool:
        return reachability.exists_directed_cycle(self)

    def exists_trek(self, node1: Node, node2: Node) -> bool:
        return reachability.exists_trek(node1, node2, self)

    def is_dconnected_to(self, node1: Node, node2: Node, z: Iterable[Node]) -> bool:
        return reachability.is_dconnected_to(node1, node2, list(z), self)

    def is_dseparated_from(self, node1: Node, node2: Node, z: Iterable[Node]) -> bool:
        return not self.is_dconnected_to(node1, node2, z)

    # =========================================================================
    # Whole-graph operations
    # =========================================================================

    def subgraph(self, nodes: Iterable[Node]) -> "Graph":
        """New graph over nodes (in the order given) with the edges among them."""
        sub = Graph(nodes)
        for edge in self.get_graph_edges():
            if sub.contains_node(edge.node1) and sub.contains_node(edge.node2):
                sub.add_edge(edge)
        sub.reconstitute_dpath()
        sub.pattern = self.pattern
        sub.pag = self.pag
        return sub

    def copy(self) -> "Graph":
        new_graph = Graph(self.nodes)
        new_graph.graph = self.graph.copy()
        new_graph.dpath = self.dpath.copy()
        new_graph.attributes = dict(self.attributes)
        new_graph.pattern = self.pattern
        new_graph.pag = self.pag
        new_graph.ambiguous_triples = list(self.ambiguous_triples)
        new_graph.underline_triples = list(self.underline_triples)
        new_graph.dotted_underline_triples = list(self.dotted_underline_triples)
        return new_graph

    def transfer_nodes_and_edges(self, other: "Graph"):
        """Add every node and edge of other to this graph."""
        self.add_nodes(other.nodes)
        for edge in other.get_graph_edges():
            self.add_edge(edge)

    def transfer_attributes(self, other: "Graph"):
        self.attributes.update(other.attributes)

    # ----- attribute bag -----

    def get_attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def get_all_attributes(self) -> Dict[str, Any]:
        return self.attributes

    def add_attribute(self, key: str, value: Any):
        self.attributes[key] = value

    def remove_attribute(self, key: str):
        self.attributes.pop(key, None)

    # ----- flags and stored triples -----

    def is_pattern(self) -> bool:
        return self.pattern

    def set_pattern(self, pattern: bool):
        self.pattern = pattern

    def is_pag(self) -> bool:
        return self.pag

    def set_pag(self, pag: bool):
        self.pag = pag

    def get_ambiguous_triples(self) -> List[Triple]:
        return list(self.ambiguous_triples)

    def get_underlines(self) -> List[Triple]:
        return list(self.underline_triples)

    def get_dotted_underlines(self) -> List[Triple]:
        return list(self.dotted_underline_triples)

    # =========================================================================
    # Dunder
    # =========================================================================

    def __eq__(self, other):
        if not isinstance(other, Graph):
            return NotImplemented
        return (
            set(self.get_node_names()) == set(other.get_node_names())
            and set(self.get_graph_edges()) == set(other.get_graph_edges())
        )

    __hash__ = None

    def __str__(self):
        lines = ["Graph Nodes:", ";".join(self.get_node_names()), "", "Graph Edges:"]
        for k, edge in enumerate(self.get_graph_edges(), 1):
            lines.append(f"{k}. {edge}")
        return "\n".join(lines) + "\n"

    def __repr__(self):
        return f"Graph(nodes={self.num_vars}, edges={self.get_num_edges()})"

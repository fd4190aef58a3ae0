from collections import deque
from typing import TYPE_CHECKING, Callable, List, Optional, Set, Tuple

from .edge import Edge, traverse_directed, traverse_semi_directed, traverse_undirected
from .endpoint import ARROW
from .node import Node

if TYPE_CHECKING:
    from .graph import Graph


# --------------------------------------------------------------------
# Path existence
# --------------------------------------------------------------------


def _exists_path(
    node_from: Node,
    node_to: Node,
    graph: "Graph",
    traverse: Callable[[Node, Edge], Optional[Node]],
) -> bool:
    """
    Breadth-first search from node_from along edges that traverse() lets us
    leave a node by. Reaching node_to again when node_to == node_from counts,
    which is what cycle detection relies on.
    """
    visited = {node_from}
    queue = deque([node_from])
    while queue:
        t = queue.popleft()
        for edge in graph.get_node_edges(t):
            c = traverse(t, edge)
            if c is None:
                continue
            if c == node_to:
                return True
            if c in visited:
                continue
            visited.add(c)
            queue.append(c)
    return False


def exists_directed_path_from_to_breadth_first(node_from: Node, node_to: Node, graph: "Graph") -> bool:
    """True iff node_from --> ... --> node_to over at least one edge."""
    return _exists_path(node_from, node_to, graph, traverse_directed)


def exists_semi_directed_path(node_from: Node, node_to: Node, graph: "Graph") -> bool:
    return _exists_path(node_from, node_to, graph, traverse_semi_directed)


def exists_undirected_path(node_from: Node, node_to: Node, graph: "Graph") -> bool:
    return _exists_path(node_from, node_to, graph, traverse_undirected)


def exists_directed_cycle(graph: "Graph") -> bool:
    """
    True iff some node reaches itself along directed edges. A pair marked
    i --> j and j --> i is the two-edge case of this search.
    """
    for node in graph.nodes:
        if exists_directed_path_from_to_breadth_first(node, node, graph):
            return True
    return False


def exists_trek(node1: Node, node2: Node, graph: "Graph") -> bool:
    """
    True iff some node (node1 and node2 included) is an ancestor of both,
    i.e. there is a common source with directed paths into node1 and node2.
    """
    for node in graph.nodes:
        if graph.is_ancestor_of(node, node1) and graph.is_ancestor_of(node, node2):
            return True
    return False


# --------------------------------------------------------------------
# d-separation
# --------------------------------------------------------------------


def is_ancestor(node: Node, z: List[Node], graph: "Graph") -> bool:
    """True iff node is in z or is an ancestor of some member of z."""
    if node in z:
        return True
    seen = set(z)
    queue = deque(z)
    while queue:
        t = queue.popleft()
        if t == node:
            return True
        for parent in graph.get_parents(t):
            if parent not in seen:
                seen.add(parent)
                queue.append(parent)
    return False


def reachable(edge1: Edge, edge2: Edge, a: Node, z: List[Node], graph: "Graph") -> bool:
    """
    Whether a path may run a *-* b *-* c, where edge1 joins a and b and edge2
    leaves b. A non-collider at b passes iff b is not conditioned on; a
    collider at b passes iff b is an ancestor of the conditioning set.
    """
    b = edge1.get_distal_node(a)
    collider = edge1.get_proximal_endpoint(b) == ARROW and edge2.get_proximal_endpoint(b) == ARROW
    if not collider and b not in z:
        return True
    return collider and is_ancestor(b, z, graph)


def is_dconnected_to(node1: Node, node2: Node, z: List[Node], graph: "Graph") -> bool:
    """
    True iff node1 is d-connected to node2 given z.

    Searches breadth-first over (edge, node) pairs: the pair (e, a) means the
    path has arrived at the far end of e coming from a. Each edge leaving
    that far end is followed only if reachable() lets the path through.
    """
    if node1 == node2:
        return True

    queue: deque = deque()
    visited: Set[Tuple[Edge, Node]] = set()
    for edge in graph.get_node_edges(node1):
        if edge.get_distal_node(node1) == node2:
            return True
        visited.add((edge, node1))
        queue.append((edge, node1))

    while queue:
        edge1, a = queue.popleft()
        b = edge1.get_distal_node(a)
        for edge2 in graph.get_node_edges(b):
            c = edge2.get_distal_node(b)
            if c == a:
                continue
            if not reachable(edge1, edge2, a, z, graph):
                continue
            if c == node2:
                return True
            if (edge2, b) not in visited:
                visited.add((edge2, b))
                queue.append((edge2, b))
    return False

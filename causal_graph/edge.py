from dataclasses import dataclass
from typing import Optional

from .endpoint import (
    Endpoint, NULL, CIRCLE, ARROW, TAIL, PLAIN_MARKS, pointing_left, mark_symbol,
)
from .exceptions import EdgeConstructionError
from .node import Node


@dataclass(frozen=True)
class Edge:
    """
    One logical edge: (node1, endpoint1) --- (endpoint2, node2).

    An edge is never stored pointing left: A <-- B becomes B --> A and
    A <-o B becomes B o-> A on construction. Edges are values; use
    with_endpoint1 / with_endpoint2 to get a re-marked copy.
    """
    node1: Node
    node2: Node
    endpoint1: Endpoint
    endpoint2: Endpoint

    def __post_init__(self):
        if self.node1 is None or self.node2 is None:
            raise EdgeConstructionError("nodes must not be None")
        if self.endpoint1 == NULL or self.endpoint2 == NULL:
            raise EdgeConstructionError("endpoints must not be NULL")
        if self.endpoint1 not in PLAIN_MARKS or self.endpoint2 not in PLAIN_MARKS:
            raise EdgeConstructionError(
                f"invalid endpoints ({self.endpoint1}, {self.endpoint2}) for a single edge"
            )
        endpoint1 = Endpoint(self.endpoint1)
        endpoint2 = Endpoint(self.endpoint2)
        if pointing_left(endpoint1, endpoint2):
            node1, node2 = self.node2, self.node1
            endpoint1, endpoint2 = endpoint2, endpoint1
            object.__setattr__(self, "node1", node1)
            object.__setattr__(self, "node2", node2)
        object.__setattr__(self, "endpoint1", endpoint1)
        object.__setattr__(self, "endpoint2", endpoint2)

    # ----- endpoint lookups relative to a node -----

    def get_proximal_endpoint(self, node: Node) -> Endpoint:
        """Mark at the end touching node; NULL if node is not on the edge."""
        if self.node1 == node:
            return self.endpoint1
        if self.node2 == node:
            return self.endpoint2
        return NULL

    def get_distal_endpoint(self, node: Node) -> Endpoint:
        if self.node1 == node:
            return self.endpoint2
        if self.node2 == node:
            return self.endpoint1
        return NULL

    def get_distal_node(self, node: Node) -> Optional[Node]:
        if self.node1 == node:
            return self.node2
        if self.node2 == node:
            return self.node1
        return None

    def points_toward(self, node: Node) -> bool:
        """True iff this edge is an arrowhead aimed at node: X --> node or X o-> node."""
        proximal = self.get_proximal_endpoint(node)
        distal = self.get_distal_endpoint(node)
        return proximal == ARROW and (distal == TAIL or distal == CIRCLE)

    def with_endpoint1(self, endpoint: Endpoint) -> "Edge":
        return Edge(self.node1, self.node2, endpoint, self.endpoint2)

    def with_endpoint2(self, endpoint: Endpoint) -> "Edge":
        return Edge(self.node1, self.node2, self.endpoint1, endpoint)

    def __lt__(self, other: "Edge") -> bool:
        return (self.node1.name, self.node2.name) < (other.node1.name, other.node2.name)

    def __str__(self):
        return (
            f"{self.node1.name} "
            f"{mark_symbol(self.endpoint1, left=True)}-{mark_symbol(self.endpoint2, left=False)} "
            f"{self.node2.name}"
        )


# ----- factories -----


def directed_edge(node1: Node, node2: Node) -> Edge:
    """node1 --> node2"""
    return Edge(node1, node2, TAIL, ARROW)


def bidirected_edge(node1: Node, node2: Node) -> Edge:
    """node1 <-> node2"""
    return Edge(node1, node2, ARROW, ARROW)


def undirected_edge(node1: Node, node2: Node) -> Edge:
    """node1 --- node2"""
    return Edge(node1, node2, TAIL, TAIL)


def partially_oriented_edge(node1: Node, node2: Node) -> Edge:
    """node1 o-> node2"""
    return Edge(node1, node2, CIRCLE, ARROW)


def nondirected_edge(node1: Node, node2: Node) -> Edge:
    """node1 o-o node2"""
    return Edge(node1, node2, CIRCLE, CIRCLE)


# ----- predicates -----


def is_directed_edge(edge: Edge) -> bool:
    # canonical form guarantees the arrow sits at endpoint2
    return edge.endpoint1 == TAIL and edge.endpoint2 == ARROW


def is_bidirected_edge(edge: Edge) -> bool:
    return edge.endpoint1 == ARROW and edge.endpoint2 == ARROW


def is_undirected_edge(edge: Edge) -> bool:
    return edge.endpoint1 == TAIL and edge.endpoint2 == TAIL


def is_partially_oriented_edge(edge: Edge) -> bool:
    return edge.endpoint1 == CIRCLE and edge.endpoint2 == ARROW


def is_nondirected_edge(edge: Edge) -> bool:
    return edge.endpoint1 == CIRCLE and edge.endpoint2 == CIRCLE


def get_directed_edge_head(edge: Edge) -> Node:
    if not is_directed_edge(edge):
        raise ValueError(f"Not a directed edge: {edge}")
    return edge.node2


def get_directed_edge_tail(edge: Edge) -> Node:
    if not is_directed_edge(edge):
        raise ValueError(f"Not a directed edge: {edge}")
    return edge.node1


def traverse_directed(node: Node, edge: Edge) -> Optional[Node]:
    """
    Follow edge out of node if it is node --> X; return X, else None.
    """
    if node == edge.node1:
        if edge.endpoint1 == TAIL and edge.endpoint2 == ARROW:
            return edge.node2
    elif node == edge.node2:
        if edge.endpoint2 == TAIL and edge.endpoint1 == ARROW:
            return edge.node1
    return None


def traverse_semi_directed(node: Node, edge: Edge) -> Optional[Node]:
    """
    Follow edge out of node if it is not into node (tail or circle at node).
    """
    if edge.get_proximal_endpoint(node) in (TAIL, CIRCLE):
        return edge.get_distal_node(node)
    return None


def traverse_undirected(node: Node, edge: Edge) -> Optional[Node]:
    if is_undirected_edge(edge):
        return edge.get_distal_node(node)
    return None

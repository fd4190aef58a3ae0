"""
causal_graph: mixed-type causal graphs for constraint-based discovery.

Graphs whose edges may be directed, bidirected, undirected or circle-marked,
with up to two edges per node pair, and the structural queries that PC/FCI
style procedures ask of them: adjacency, ancestry, directed cycles, treks
and d-separation.
"""

from .endpoint import Endpoint
from .node import Node, NodeType, NodeVariableType
from .edge import (
    Edge,
    directed_edge,
    bidirected_edge,
    undirected_edge,
    partially_oriented_edge,
    nondirected_edge,
    is_directed_edge,
    is_bidirected_edge,
    is_undirected_edge,
    is_partially_oriented_edge,
    is_nondirected_edge,
)
from .graph import Graph
from .graph_io import parse_graph_string, read_graph_file, write_graph_file
from .exceptions import (
    CausalGraphError,
    EdgeConstructionError,
    NodeNotFoundError,
    DuplicateNodeError,
    GraphIntegrityError,
)

__all__ = [
    'Endpoint',
    'Node',
    'NodeType',
    'NodeVariableType',
    'Edge',
    'directed_edge',
    'bidirected_edge',
    'undirected_edge',
    'partially_oriented_edge',
    'nondirected_edge',
    'is_directed_edge',
    'is_bidirected_edge',
    'is_undirected_edge',
    'is_partially_oriented_edge',
    'is_nondirected_edge',
    'Graph',
    'parse_graph_string',
    'read_graph_file',
    'write_graph_file',
    'CausalGraphError',
    'EdgeConstructionError',
    'NodeNotFoundError',
    'DuplicateNodeError',
    'GraphIntegrityError',
]

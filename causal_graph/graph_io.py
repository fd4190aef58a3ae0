"""
Graph I/O utilities: the Tetrad-style text format, labelled mark matrices
and NetworkX conversion.

Text format (what str(Graph) produces):
    Graph Nodes:
    X1;X2;X3;X4

    Graph Edges:
    1. X1 --> X2
    2. X2 <-> X3
    3. X3 --- X4
    4. X1 o-> X4

Edge types:
    --> : directed edge (tail to arrow)
    <-- : directed edge (arrow to tail)
    <-> : bidirected edge (latent confounder)
    --- : undirected edge
    o-> : PAG circle-arrow
    <-o : PAG arrow-circle
    o-o : PAG circle-circle
    --o : PAG tail-circle
"""

import logging
import re
from typing import Optional

import networkx as nx
import numpy as np
import pandas as pd

from .edge import Edge, directed_edge, is_directed_edge
from .encoding import PairState
from .endpoint import parse_mark
from .graph import Graph
from .node import Node

logger = logging.getLogger(__name__)

_EDGE_PATTERN = re.compile(r'^(\S+)\s+([-<o])-([->o])\s+(\S+)$')


def graph_to_string(graph: Graph) -> str:
    """
    str(graph), followed by a "Graph Attributes:" section of "key: value"
    lines when the graph carries attributes. Values are written with str()
    and read back as strings.
    """
    text = str(graph)
    attributes = graph.get_all_attributes()
    if attributes:
        lines = ["", "Graph Attributes:"]
        lines.extend(f"{key}: {value}" for key, value in attributes.items())
        text += "\n".join(lines) + "\n"
    return text


def write_graph_file(graph: Graph, filepath: str):
    """Write a Graph to a Tetrad format file."""
    with open(filepath, 'w') as f:
        f.write(graph_to_string(graph))


def parse_edge(edge_str: str, graph: Graph) -> Optional[Edge]:
    """
    Parse a single edge line against the nodes of graph.

    Examples:
        "1. X1 --> X2" -> X1 --> X2
        "X1 <-- X2"    -> X2 --> X1
        "X1 <-o X2"    -> X2 o-> X1

    Returns None if the line is not an edge or names an unknown node.
    """
    # Remove leading number and period if present (e.g., "1. X1 --> X2")
    edge_str = re.sub(r'^\d+\.\s*', '', edge_str.strip())
    match = _EDGE_PATTERN.match(edge_str)
    if not match:
        return None
    name1, left, right, name2 = match.groups()
    node1 = graph.get_node(name1)
    node2 = graph.get_node(name2)
    if node1 is None or node2 is None:
        logger.warning("Node not found for edge %s", edge_str)
        return None
    return Edge(node1, node2, parse_mark(left), parse_mark(right))


def parse_graph_string(content: str) -> Graph:
    """Parse a Graph from text content."""
    graph = Graph()
    section = None
    for line in content.strip().split('\n'):
        line = line.strip()
        if not line:
            continue

        if line.startswith('Graph Nodes:'):
            section = 'nodes'
            continue
        elif line.startswith('Graph Edges:'):
            section = 'edges'
            continue
        elif line.startswith('Graph Attributes:'):
            section = 'attributes'
            continue

        if section == 'nodes':
            # Nodes are semicolon-separated
            for name in line.split(';'):
                name = name.strip()
                if name:
                    graph.add_node(Node(name))
        elif section == 'edges':
            edge = parse_edge(line, graph)
            if edge is None:
                logger.warning("Skipping unparseable edge line: %s", line)
            elif not graph.add_edge(edge):
                logger.warning("Edge %s conflicts with an earlier edge; skipped", edge)
        elif section == 'attributes':
            key, sep, value = line.partition(':')
            if not sep or not key.strip():
                logger.warning("Skipping unparseable attribute line: %s", line)
            else:
                graph.add_attribute(key.strip(), value.strip())

    return graph


def read_graph_file(filepath: str) -> Graph:
    with open(filepath, 'r') as f:
        content = f.read()
    return parse_graph_string(content)


# =============================================================================
# Mark matrices
# =============================================================================

def to_adjacency_frame(graph: Graph) -> pd.DataFrame:
    """
    The encoded mark matrix as a DataFrame labelled by node name; cell
    (row, col) is the mark at the row node.
    """
    names = graph.get_node_names()
    return pd.DataFrame(graph.graph.copy(), index=names, columns=names)


def from_adjacency_frame(frame: pd.DataFrame) -> Graph:
    """
    Inverse of to_adjacency_frame. Raises ValueError if the labels are not
    the same names in the same order, GraphIntegrityError on a cell pair
    that encodes no edge configuration.
    """
    if list(frame.index) != list(frame.columns):
        raise ValueError("Row and column labels must match")
    marks = frame.to_numpy(dtype=int)
    if not np.all(np.diag(marks) == 0):
        raise ValueError("Diagonal of a mark matrix must be empty")

    graph = Graph([Node(str(name)) for name in frame.columns])
    n = graph.num_vars
    for i in range(n):
        for j in range(i + 1, n):
            for mark_i, mark_j in PairState.decode(marks[i, j], marks[j, i]).edges:
                graph.add_edge(Edge(graph.nodes[i], graph.nodes[j], mark_i, mark_j))
    return graph


# =============================================================================
# NetworkX
# =============================================================================

def to_networkx(graph: Graph) -> nx.MultiDiGraph:
    """
    One NetworkX edge per logical edge, oriented node1 -> node2 and carrying
    the endpoint marks as 'endpoint1' / 'endpoint2'.
    """
    g = nx.MultiDiGraph()
    g.add_nodes_from(graph.get_node_names())
    for edge in graph.get_graph_edges():
        g.add_edge(
            edge.node1.name, edge.node2.name,
            endpoint1=edge.endpoint1, endpoint2=edge.endpoint2,
        )
    return g


def directed_part(graph: Graph) -> nx.DiGraph:
    """DiGraph over all nodes keeping only the --> edges."""
    g = nx.DiGraph()
    g.add_nodes_from(graph.get_node_names())
    for edge in graph.get_graph_edges():
        if is_directed_edge(edge):
            g.add_edge(edge.node1.name, edge.node2.name)
    return g


def from_networkx(digraph: nx.DiGraph) -> Graph:
    """Graph with a directed edge for every arc of digraph."""
    graph = Graph([Node(str(name)) for name in digraph.nodes()])
    for src, tgt in digraph.edges():
        if not graph.add_edge(directed_edge(graph.get_node(str(src)), graph.get_node(str(tgt)))):
            logger.warning("Arc %s -> %s conflicts with an earlier arc; skipped", src, tgt)
    return graph

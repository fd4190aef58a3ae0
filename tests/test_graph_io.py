import unittest
import os
import sys
import tempfile
import networkx as nx
import pandas as pd
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from causal_graph.graph import Graph
from causal_graph.node import Node
from causal_graph.edge import (
    Edge, directed_edge, bidirected_edge, undirected_edge, partially_oriented_edge,
    nondirected_edge,
)
from causal_graph.endpoint import CIRCLE, ARROW, TAIL, TAIL_AND_ARROW, ARROW_AND_ARROW
from causal_graph.exceptions import GraphIntegrityError
from causal_graph.graph_io import (
    graph_to_string, parse_graph_string, read_graph_file, write_graph_file, to_adjacency_frame,
    from_adjacency_frame, to_networkx, directed_part, from_networkx,
)

TETRAD_TEXT = """
Graph Nodes:
X1;X2;X3;X4;X5

Graph Edges:
1. X1 --> X2
2. X2 <-> X3
3. X3 --- X4
4. X1 o-> X4
5. X5 <-- X2
6. X5 <-o X3
7. X4 o-o X5
8. X1 <-> X2
"""


class TestTextFormat(unittest.TestCase):
    def setUp(self):
        self.G = parse_graph_string(TETRAD_TEXT)
        self.n = {name: self.G.get_node(name) for name in self.G.get_node_names()}

    def test_parse_nodes(self):
        self.assertEqual(self.G.get_node_names(), ["X1", "X2", "X3", "X4", "X5"])

    def test_parse_edges(self):
        n = self.n
        expected = {
            directed_edge(n["X1"], n["X2"]),
            bidirected_edge(n["X1"], n["X2"]),
            bidirected_edge(n["X2"], n["X3"]),
            undirected_edge(n["X3"], n["X4"]),
            partially_oriented_edge(n["X1"], n["X4"]),
            directed_edge(n["X2"], n["X5"]),
            partially_oriented_edge(n["X3"], n["X5"]),
            nondirected_edge(n["X4"], n["X5"]),
        }
        self.assertEqual(set(self.G.get_graph_edges()), expected)
        self.assertEqual(self.G.get_num_edges(), 8)

    def test_round_trip_through_text(self):
        self.assertEqual(parse_graph_string(str(self.G)), self.G)

    def test_round_trip_through_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "graph.txt")
            write_graph_file(self.G, path)
            self.assertEqual(read_graph_file(path), self.G)

    def test_attributes_round_trip(self):
        self.G.add_attribute("source", "simulation")
        self.G.add_attribute("seed", 7)
        text = graph_to_string(self.G)
        self.assertTrue(text.endswith("Graph Attributes:\nsource: simulation\nseed: 7\n"))
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "graph.txt")
            write_graph_file(self.G, path)
            H = read_graph_file(path)
        self.assertEqual(H, self.G)
        self.assertEqual(H.get_all_attributes(), {"source": "simulation", "seed": "7"})

    def test_plain_graph_has_no_attribute_section(self):
        self.assertEqual(graph_to_string(self.G), str(self.G))
        self.assertNotIn("Graph Attributes:", graph_to_string(self.G))

    def test_bad_attribute_line_is_skipped(self):
        text = "Graph Nodes:\nA;B\n\nGraph Attributes:\nnot an attribute\nkind: pag\n"
        with self.assertLogs("causal_graph.graph_io", level="WARNING"):
            G = parse_graph_string(text)
        self.assertEqual(G.get_all_attributes(), {"kind": "pag"})

    def test_bad_lines_are_skipped(self):
        text = "Graph Nodes:\nA;B\n\nGraph Edges:\n1. A --> Q\n2. A ==> B\n3. A --> B\n4. B --> A\n"
        with self.assertLogs("causal_graph.graph_io", level="WARNING"):
            G = parse_graph_string(text)
        self.assertEqual([str(e) for e in G.get_graph_edges()], ["A --> B"])


class TestMatrixFormat(unittest.TestCase):
    def setUp(self):
        self.A = Node("A")
        self.B = Node("B")
        self.C = Node("C")
        self.G = Graph([self.A, self.B, self.C])
        self.G.add_directed_edge(self.A, self.B)
        self.G.add_bidirected_edge(self.A, self.B)
        self.G.add_edge(Edge(self.B, self.C, TAIL, CIRCLE))

    def test_frame_is_labelled_mark_matrix(self):
        frame = to_adjacency_frame(self.G)
        self.assertEqual(list(frame.index), ["A", "B", "C"])
        self.assertEqual(frame.loc["A", "B"], TAIL_AND_ARROW)
        self.assertEqual(frame.loc["B", "A"], ARROW_AND_ARROW)
        self.assertEqual(frame.loc["B", "C"], TAIL)
        self.assertEqual(frame.loc["C", "B"], CIRCLE)
        self.assertEqual(frame.loc["A", "C"], 0)

    def test_frame_round_trip(self):
        H = from_adjacency_frame(to_adjacency_frame(self.G))
        self.assertEqual(H, self.G)
        self.assertTrue(H.is_ancestor_of(H.get_node("A"), H.get_node("B")))

    def test_corrupt_frame(self):
        frame = pd.DataFrame([[0, 3], [0, 0]], index=["A", "B"], columns=["A", "B"])
        with self.assertRaises(GraphIntegrityError):
            from_adjacency_frame(frame)
        with self.assertRaises(ValueError):
            from_adjacency_frame(pd.DataFrame([[0]], index=["A"], columns=["B"]))


class TestNetworkX(unittest.TestCase):
    def test_to_networkx_keeps_both_edges_of_a_pair(self):
        A, B, C = Node("A"), Node("B"), Node("C")
        G = Graph([A, B, C])
        G.add_directed_edge(A, B)
        G.add_bidirected_edge(A, B)
        G.add_partially_oriented_edge(C, B)
        g = to_networkx(G)
        self.assertEqual(g.number_of_edges(), 3)
        self.assertEqual(g.number_of_edges("A", "B"), 2)
        marks = {(d["endpoint1"], d["endpoint2"]) for _, _, d in g.edges(data=True)}
        self.assertEqual(marks, {(TAIL, ARROW), (ARROW, ARROW), (CIRCLE, ARROW)})

        dag = directed_part(G)
        self.assertEqual(list(dag.edges()), [("A", "B")])
        self.assertEqual(set(dag.nodes()), {"A", "B", "C"})

    def test_from_networkx(self):
        g = nx.DiGraph([("a", "b"), ("b", "c")])
        g.add_node("d")
        G = from_networkx(g)
        self.assertEqual(G.get_node_names(), ["a", "b", "c", "d"])
        self.assertTrue(G.is_ancestor_of(G.get_node("a"), G.get_node("c")))
        self.assertEqual(G.get_num_edges(), 2)


if __name__ == '__main__':
    unittest.main()

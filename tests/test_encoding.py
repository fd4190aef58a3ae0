import unittest
import os
import sys
sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from causal_graph.encoding import PairState, PairKind
from causal_graph.endpoint import (
    NULL, CIRCLE, ARROW, TAIL, TAIL_AND_ARROW, ARROW_AND_ARROW,
)
from causal_graph.exceptions import GraphIntegrityError


class TestPairState(unittest.TestCase):
    def test_decode_plain(self):
        self.assertEqual(PairState.decode(NULL, NULL).kind, PairKind.NO_EDGE)
        state = PairState.decode(TAIL, ARROW)
        self.assertEqual(state.kind, PairKind.SINGLE)
        self.assertEqual(state.edges, ((TAIL, ARROW),))

    def test_decode_double(self):
        self.assertEqual(
            PairState.decode(TAIL_AND_ARROW, TAIL_AND_ARROW).edges,
            ((TAIL, TAIL), (ARROW, ARROW)),
        )
        self.assertEqual(
            PairState.decode(TAIL_AND_ARROW, ARROW_AND_ARROW).edges,
            ((TAIL, ARROW), (ARROW, ARROW)),
        )
        self.assertEqual(
            PairState.decode(ARROW_AND_ARROW, TAIL_AND_ARROW).edges,
            ((ARROW, TAIL), (ARROW, ARROW)),
        )

    def test_encode_inverts_decode(self):
        legal = [
            (NULL, NULL), (TAIL, ARROW), (ARROW, ARROW), (CIRCLE, TAIL),
            (TAIL_AND_ARROW, TAIL_AND_ARROW),
            (TAIL_AND_ARROW, ARROW_AND_ARROW),
            (ARROW_AND_ARROW, TAIL_AND_ARROW),
        ]
        for cells in legal:
            self.assertEqual(PairState.decode(*cells).encode(), cells)

    def test_corrupt_pairs(self):
        for cells in [(TAIL, NULL), (ARROW_AND_ARROW, ARROW_AND_ARROW),
                      (TAIL_AND_ARROW, ARROW), (CIRCLE, ARROW_AND_ARROW)]:
            with self.assertRaises(GraphIntegrityError):
                PairState.decode(*cells)

    def test_with_edge_table(self):
        empty = PairState()
        bidirected = PairState(((ARROW, ARROW),))
        directed = PairState(((TAIL, ARROW),))
        circle = PairState(((CIRCLE, ARROW),))

        self.assertEqual(empty.with_edge(CIRCLE, CIRCLE).edges, ((CIRCLE, CIRCLE),))
        self.assertEqual(bidirected.with_edge(TAIL, TAIL).encode(), (TAIL_AND_ARROW, TAIL_AND_ARROW))
        self.assertEqual(bidirected.with_edge(TAIL, ARROW).encode(), (TAIL_AND_ARROW, ARROW_AND_ARROW))
        self.assertEqual(directed.with_edge(ARROW, ARROW).encode(), (TAIL_AND_ARROW, ARROW_AND_ARROW))

        self.assertIsNone(bidirected.with_edge(ARROW, ARROW))
        self.assertIsNone(bidirected.with_edge(TAIL, CIRCLE))
        self.assertIsNone(directed.with_edge(TAIL, TAIL))
        self.assertIsNone(circle.with_edge(ARROW, ARROW))
        self.assertIsNone(directed.with_edge(ARROW, ARROW).with_edge(TAIL, TAIL))
        self.assertIsNone(empty.with_edge(NULL, ARROW))

    def test_without_edge_peels_one(self):
        double = PairState.decode(TAIL_AND_ARROW, ARROW_AND_ARROW)
        self.assertEqual(double.without_edge(TAIL, ARROW).encode(), (ARROW, ARROW))
        self.assertEqual(double.without_edge(ARROW, ARROW).encode(), (TAIL, ARROW))
        self.assertIsNone(double.without_edge(ARROW, TAIL))

    def test_reversed(self):
        state = PairState.decode(TAIL_AND_ARROW, ARROW_AND_ARROW).reversed()
        self.assertEqual(state.encode(), (ARROW_AND_ARROW, TAIL_AND_ARROW))


if __name__ == '__main__':
    unittest.main()

"""
Codec between the two matrix cells of a node pair and the logical edges
they hold.

For nodes i and j, cell (i, j) is the mark at i and cell (j, i) the mark at
j. A pair holds no edge, one edge with plain marks at both ends, or two
edges, one of which is always bidirected:

    (TAIL_AND_ARROW,  TAIL_AND_ARROW)    i --- j  and  i <-> j
    (TAIL_AND_ARROW,  ARROW_AND_ARROW)   i --> j  and  i <-> j
    (ARROW_AND_ARROW, TAIL_AND_ARROW)    i <-- j  and  i <-> j

Every other combination is a corrupt store.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .endpoint import (
    Endpoint, NULL, ARROW, TAIL, TAIL_AND_ARROW, ARROW_AND_ARROW, PLAIN_MARKS,
)
from .exceptions import GraphIntegrityError

Marks = Tuple[Endpoint, Endpoint]

BIDIRECTED: Marks = (ARROW, ARROW)

# Non-bidirected edges that may share a pair with a bidirected one, and the
# cell codes the combination is stored as.
_DOUBLE_CODES = {
    (TAIL, TAIL): (TAIL_AND_ARROW, TAIL_AND_ARROW),
    (TAIL, ARROW): (TAIL_AND_ARROW, ARROW_AND_ARROW),
    (ARROW, TAIL): (ARROW_AND_ARROW, TAIL_AND_ARROW),
}
_DOUBLE_MARKS = {codes: marks for marks, codes in _DOUBLE_CODES.items()}


class PairKind(Enum):
    NO_EDGE = 0
    SINGLE = 1
    DOUBLE = 2


@dataclass(frozen=True)
class PairState:
    """
    The logical edges between an ordered node pair (i, j), each given as
    (mark at i, mark at j). In a double state the bidirected edge is last.
    """
    edges: Tuple[Marks, ...] = ()

    @property
    def kind(self) -> PairKind:
        return PairKind(len(self.edges))

    @classmethod
    def decode(cls, m_ij: int, m_ji: int) -> "PairState":
        if m_ij == NULL and m_ji == NULL:
            return cls()
        if m_ij in PLAIN_MARKS and m_ji in PLAIN_MARKS:
            return cls(((Endpoint(m_ij), Endpoint(m_ji)),))
        marks = _DOUBLE_MARKS.get((m_ij, m_ji))
        if marks is None:
            raise GraphIntegrityError(f"Corrupt cell pair ({m_ij}, {m_ji})")
        return cls((marks, BIDIRECTED))

    def encode(self) -> Tuple[int, int]:
        if self.kind == PairKind.NO_EDGE:
            return NULL, NULL
        if self.kind == PairKind.SINGLE:
            return self.edges[0]
        return _DOUBLE_CODES[self.edges[0]]

    def reversed(self) -> "PairState":
        """The same edges seen from (j, i)."""
        return PairState(tuple((b, a) for a, b in self.edges))

    def contains(self, mark_i: int, mark_j: int) -> bool:
        return (mark_i, mark_j) in self.edges

    def marks_at_i(self) -> Tuple[Endpoint, ...]:
        return tuple(a for a, _ in self.edges)

    def marks_at_j(self) -> Tuple[Endpoint, ...]:
        return tuple(b for _, b in self.edges)

    def with_edge(self, mark_i: int, mark_j: int) -> Optional["PairState"]:
        """
        State after adding edge (mark_i, mark_j), or None when the pair
        already holds a configuration the edge cannot join.

        Only an undirected or directed edge and a bidirected edge can share
        a pair; circle-marked edges need the pair to be empty.
        """
        if mark_i not in PLAIN_MARKS or mark_j not in PLAIN_MARKS:
            return None
        new = (Endpoint(mark_i), Endpoint(mark_j))
        if self.kind == PairKind.NO_EDGE:
            return PairState((new,))
        if self.kind == PairKind.DOUBLE:
            return None
        existing = self.edges[0]
        if new == BIDIRECTED and existing in _DOUBLE_CODES:
            return PairState((existing, BIDIRECTED))
        if existing == BIDIRECTED and new in _DOUBLE_CODES:
            return PairState((new, BIDIRECTED))
        return None

    def without_edge(self, mark_i: int, mark_j: int) -> Optional["PairState"]:
        """State after peeling off edge (mark_i, mark_j), or None if absent."""
        if not self.contains(mark_i, mark_j):
            return None
        return PairState(tuple(e for e in self.edges if e != (mark_i, mark_j)))

from enum import IntEnum


class Endpoint(IntEnum):
    """
    Endpoint marks, stored directly as integer codes in the graph matrix.

        0: NULL   (no edge)
        1: CIRCLE (o)
        2: ARROW  (> or <)
        3: TAIL   (-)

    The two combined codes only ever appear inside the encoded matrix, where
    they record two edges living between the same node pair:

        4: TAIL_AND_ARROW   (a tail and an arrowhead at the same end)
        5: ARROW_AND_ARROW  (two arrowheads at the same end)
    """
    NULL = 0
    CIRCLE = 1
    ARROW = 2
    TAIL = 3
    TAIL_AND_ARROW = 4
    ARROW_AND_ARROW = 5


NULL = Endpoint.NULL
CIRCLE = Endpoint.CIRCLE
ARROW = Endpoint.ARROW
TAIL = Endpoint.TAIL
TAIL_AND_ARROW = Endpoint.TAIL_AND_ARROW
ARROW_AND_ARROW = Endpoint.ARROW_AND_ARROW

# Marks a single logical edge may carry at either end.
PLAIN_MARKS = frozenset({CIRCLE, ARROW, TAIL})


def pointing_left(endpoint1: int, endpoint2: int) -> bool:
    """True for A <-- B and A <-o B."""
    return endpoint1 == ARROW and (endpoint2 == TAIL or endpoint2 == CIRCLE)


def mark_symbol(mark: int, left: bool) -> str:
    """
    Render one end of an edge. Arrowheads point outwards, so the left end
    renders as '<' and the right end as '>'.
    """
    if mark == TAIL:
        return "-"
    if mark == ARROW:
        return "<" if left else ">"
    if mark == CIRCLE:
        return "o"
    raise ValueError(f"Endpoint {Endpoint(mark).name} has no edge symbol")


def parse_mark(symbol: str) -> Endpoint:
    """Inverse of mark_symbol for either end."""
    if symbol == "-":
        return TAIL
    if symbol in ("<", ">"):
        return ARROW
    if symbol == "o":
        return CIRCLE
    raise ValueError(f"Unknown endpoint symbol '{symbol}'")

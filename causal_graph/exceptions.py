"""Exceptions raised by causal_graph."""


class CausalGraphError(Exception):
    """Base exception for graph operations."""
    pass


class EdgeConstructionError(CausalGraphError, ValueError):
    """Raised when an edge is built from a missing node or a NULL endpoint."""
    pass


class NodeNotFoundError(CausalGraphError, KeyError):
    """Raised when an operation names a node the graph does not hold."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Node '{name}' is not in the graph")

    def __str__(self):
        return self.args[0]


class DuplicateNodeError(CausalGraphError, ValueError):
    """Raised when a rename would give two nodes the same name."""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A node named '{name}' is already in the graph")


class GraphIntegrityError(CausalGraphError, AssertionError):
    """
    Raised when the encoded matrix or the name->index map is found in a
    state that no sequence of public operations can produce.
    """
    pass

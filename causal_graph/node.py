from enum import IntEnum
from typing import Any, Dict, Optional


class NodeType(IntEnum):
    MEASURED = 1
    LATENT = 2
    ERROR = 3
    SESSION = 4
    RANDOMIZE = 5
    LOCK = 6
    NO_TYPE = 7


class NodeVariableType(IntEnum):
    DOMAIN = 1
    INTERVENTION_STATUS = 2
    INTERVENTION_VALUE = 3


class Node:
    """
    A graph vertex. Two nodes are the same node iff their names match; the
    name is also the key of the owning graph's index map, so it can only be
    changed through Graph.rename_node.

    Role, variable type and display coordinates are free to change.
    """

    def __init__(
        self,
        name: str,
        node_type: NodeType = NodeType.MEASURED,
        variable_type: NodeVariableType = NodeVariableType.DOMAIN,
        center_x: int = 0,
        center_y: int = 0,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        if not isinstance(name, str) or not name:
            raise ValueError("Node name must be a non-empty string")
        self._name = name
        self.node_type = NodeType(node_type)
        self.variable_type = NodeVariableType(variable_type)
        self.center_x = center_x
        self.center_y = center_y
        self.attributes: Dict[str, Any] = dict(attributes) if attributes else {}

    @property
    def name(self) -> str:
        return self._name

    def set_center(self, x: int, y: int):
        self.center_x = x
        self.center_y = y

    # ----- attribute bag -----

    def get_attribute(self, key: str) -> Any:
        return self.attributes.get(key)

    def get_all_attributes(self) -> Dict[str, Any]:
        return self.attributes

    def add_attribute(self, key: str, value: Any):
        self.attributes[key] = value

    def remove_attribute(self, key: str):
        self.attributes.pop(key, None)

    # ----- identity -----

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self._name == other._name

    def __hash__(self):
        return hash(self._name)

    def __lt__(self, other: "Node") -> bool:
        return self._name < other._name

    def __str__(self):
        return self._name

    def __repr__(self):
        return f"Node({self._name!r}, {self.node_type.name})"

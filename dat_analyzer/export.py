"""JSON-friendly conversion of decoded documents."""
from dataclasses import fields, is_dataclass
from enum import Enum
from typing import Any

from .sections.world_tree import NodeChild


def to_dict(value: Any) -> Any:
    """Convert decoded values to JSON-serializable data.

    Dataclasses become dicts, tuples become lists, bytes become hex
    strings, enums their names, and BSP children ``{"node": i}`` or
    ``"inside"`` / ``"outside"``.
    """
    if isinstance(value, NodeChild):
        if value.is_leaf:
            return value.leaf.name.lower()
        return {'node': value.node_index}
    if isinstance(value, Enum):
        return value.name
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_dict(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, dict):
        return {str(k.value if isinstance(k, Enum) else k): to_dict(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dict(item) for item in value]
    return value

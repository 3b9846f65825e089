# dat_analyzer/sections/objects/entry.py
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Tuple, Union

from ...utils.common_types import Color, Quaternion, Vec3


class PropertyType(IntEnum):
    """Property payload type tags."""
    STRING = 0
    VECTOR = 1
    COLOR = 2
    REAL = 3
    BOOL = 5
    FLAGS = 6
    ROTATION = 7


# Encoded payload width for the fixed-size types
PAYLOAD_SIZES = {
    PropertyType.VECTOR: 12,
    PropertyType.COLOR: 12,
    PropertyType.REAL: 4,
    PropertyType.BOOL: 1,
    PropertyType.FLAGS: 4,
    PropertyType.ROTATION: 16,
}

PropertyValue = Union[str, Vec3, Color, float, bool, int, Quaternion]


def _value_matches(type_tag: PropertyType, value: Any) -> bool:
    if type_tag == PropertyType.STRING:
        return isinstance(value, str)
    if type_tag == PropertyType.VECTOR:
        return isinstance(value, Vec3)
    if type_tag == PropertyType.COLOR:
        return isinstance(value, Color)
    if type_tag == PropertyType.REAL:
        return isinstance(value, float)
    if type_tag == PropertyType.BOOL:
        return isinstance(value, bool)
    if type_tag == PropertyType.FLAGS:
        return isinstance(value, int) and not isinstance(value, bool)
    return isinstance(value, Quaternion)


@dataclass(frozen=True)
class Property:
    """Named, flagged world object property with exactly one typed value."""
    name: str
    type_tag: PropertyType
    flags: int
    declared_size: int      # Informational, payload width comes from type_tag
    value: PropertyValue

    def __post_init__(self):
        if not _value_matches(self.type_tag, self.value):
            raise TypeError(
                f"Property '{self.name}': {type(self.value).__name__} value "
                f"does not match type {self.type_tag.name}"
            )

    @property
    def payload_size(self) -> Optional[int]:
        """Encoded payload width, None for strings."""
        return PAYLOAD_SIZES.get(self.type_tag)


@dataclass(frozen=True)
class WorldObject:
    """Placed world object: a class name and its ordered properties."""
    object_size: int
    object_type: str
    properties: Tuple[Property, ...]

    def get(self, name: str, default: Any = None) -> Any:
        """Value of the first property called ``name``."""
        for prop in self.properties:
            if prop.name == name:
                return prop.value
        return default

    @property
    def name(self) -> Optional[str]:
        return self.get('Name')

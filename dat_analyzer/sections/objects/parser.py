# dat_analyzer/sections/objects/parser.py
from typing import Tuple
import logging

from ...errors import UnknownPropertyTag, decode_context
from ...reader import ByteCursor
from ...utils.common_types import COLOR, QUATERNION, VEC3
from ..base import BaseSection
from .entry import PAYLOAD_SIZES, Property, PropertyType, PropertyValue, WorldObject

logger = logging.getLogger(__name__)


class WorldObjectsSection(BaseSection):
    """World objects section parser.

    Structure:
    1. u32 object count
    2. Objects, each:
       - u16 object size
       - LString object type (class name)
       - u32 property count
       - Properties: LString name, u8 type, u32 flags, u16 size, payload
    """

    def parse(self) -> Tuple[WorldObject, ...]:
        """Parse world objects."""
        count = self.cursor.read_u32()
        logger.debug(f"World objects: {count} at 0x{self.cursor.position:08X}")
        return self.read_array(count, self.read_object)

    def read_object(self, cursor: ByteCursor) -> WorldObject:
        object_size = cursor.read_u16()
        with decode_context('object_type'):
            object_type = self.read_lstring()
        prop_count = cursor.read_u32()
        properties = self.read_array(prop_count, self.read_property, 'properties')
        return WorldObject(object_size, object_type, properties)

    def read_property(self, cursor: ByteCursor) -> Property:
        """Read one tagged property; the payload layout follows the type tag."""
        with decode_context('name'):
            name = self.read_lstring()
        tag_offset = cursor.position
        type_tag = cursor.read_u8()
        flags = cursor.read_u32()
        declared_size = cursor.read_u16()
        try:
            type_tag = PropertyType(type_tag)
        except ValueError:
            raise UnknownPropertyTag(type_tag, tag_offset) from None

        payload_offset = cursor.position
        with decode_context('value'):
            value = self._read_value(type_tag)

        expected = PAYLOAD_SIZES.get(type_tag)
        if expected is not None:
            self.check_length(
                f"Property '{name}' ({type_tag.name}) declared size",
                declared_size, expected, payload_offset
            )
        return Property(name, type_tag, flags, declared_size, value)

    def _read_value(self, type_tag: PropertyType) -> PropertyValue:
        cursor = self.cursor
        if type_tag == PropertyType.STRING:
            return self.read_lstring()
        if type_tag == PropertyType.VECTOR:
            return cursor.read_struct(VEC3)
        if type_tag == PropertyType.COLOR:
            return cursor.read_struct(COLOR)
        if type_tag == PropertyType.REAL:
            return cursor.read_f32()
        if type_tag == PropertyType.BOOL:
            return cursor.read_u8() != 0
        if type_tag == PropertyType.FLAGS:
            return cursor.read_u32()
        return cursor.read_struct(QUATERNION)

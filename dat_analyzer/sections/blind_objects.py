# dat_analyzer/sections/blind_objects.py
"""Blind object data: ID-tagged opaque blobs."""
from dataclasses import dataclass
from typing import Tuple
import logging

from ..errors import decode_context
from ..reader import ByteCursor
from .base import BaseSection

logger = logging.getLogger(__name__)

# Known blob IDs
KEYFRAMER_ID = 1789855876
SCATTER_VOLUME_ID = 1945451140


@dataclass(frozen=True)
class BlindObject:
    """Engine blob owned by a world object, not interpreted here."""
    object_id: int
    data: bytes


class BlindObjectsSection(BaseSection):
    """Blind objects section parser.

    u32 count, then per object: u32 size, u32 id, size bytes.
    """

    def parse(self) -> Tuple[BlindObject, ...]:
        count = self.cursor.read_u32()
        logger.debug(f"Blind objects: {count}")
        return self.read_array(count, self.read_blind_object)

    def read_blind_object(self, cursor: ByteCursor) -> BlindObject:
        size = cursor.read_u32()
        object_id = cursor.read_u32()
        with decode_context('data'):
            data = cursor.read_bytes(size)
        return BlindObject(object_id, data)

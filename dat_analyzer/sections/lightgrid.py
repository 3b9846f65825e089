# dat_analyzer/sections/lightgrid.py
"""Static light grid."""
from dataclasses import dataclass
import logging

from ..errors import decode_context
from ..utils.common_types import VEC3, VEC3U, Vec3, Vec3u
from .base import BaseSection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LightGrid:
    """Light grid lookup volume. ``data`` is RLE compressed and kept as is."""
    lookup_start: Vec3
    block_size: Vec3
    lookup_size: Vec3u
    data: bytes


class LightGridSection(BaseSection):
    """Light grid parser: two Vec3, three u32 sizes, u32 length, data."""

    HAS_PREFIX = False

    def parse(self) -> LightGrid:
        lookup_start = self.cursor.read_struct(VEC3)
        block_size = self.cursor.read_struct(VEC3)
        lookup_size = self.cursor.read_struct(VEC3U)
        with decode_context('data'):
            data = self.read_blob()
        logger.debug(f"Light grid {lookup_size.x}x{lookup_size.y}x{lookup_size.z}, {len(data)} bytes")
        return LightGrid(lookup_start, block_size, lookup_size, data)

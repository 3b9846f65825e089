# dat_analyzer/sections/header/parser.py
import logging

from construct import Array, Int32ul, Struct

from ...errors import decode_context
from ...utils.common_types import VEC3
from ..base import BaseSection
from .entry import Header, WorldInfo

logger = logging.getLogger(__name__)

HEADER_SCHEMA = Struct(
    "version" / Int32ul,
    "object_data_pos" / Int32ul,
    "blind_object_data_pos" / Int32ul,
    "lightgrid_pos" / Int32ul,
    "collision_data_pos" / Int32ul,
    "particle_blocker_data_pos" / Int32ul,
    "render_data_pos" / Int32ul,
    "packer_type" / Int32ul,
    "packer_version" / Int32ul,
    "future" / Array(6, Int32ul),
)


class HeaderSection(BaseSection):
    """Fixed 60-byte file header."""

    HAS_PREFIX = False

    def parse(self) -> Header:
        raw = self.cursor.read_struct(HEADER_SCHEMA)
        header = Header(
            version=raw.version,
            object_data_pos=raw.object_data_pos,
            blind_object_data_pos=raw.blind_object_data_pos,
            lightgrid_pos=raw.lightgrid_pos,
            collision_data_pos=raw.collision_data_pos,
            particle_blocker_data_pos=raw.particle_blocker_data_pos,
            render_data_pos=raw.render_data_pos,
            packer_type=raw.packer_type,
            packer_version=raw.packer_version,
            future=tuple(raw.future)
        )
        logger.debug(f"Header version {header.version}, packer {header.packer_type}/{header.packer_version}")
        return header


class WorldInfoSection(BaseSection):
    """World info string, extents and offset following the header."""

    HAS_PREFIX = False

    def parse(self) -> WorldInfo:
        with decode_context('info'):
            info = self.read_lstring32()
        extents_min = self.cursor.read_struct(VEC3)
        extents_max = self.cursor.read_struct(VEC3)
        offset = self.cursor.read_struct(VEC3)
        return WorldInfo(info, extents_min, extents_max, offset)

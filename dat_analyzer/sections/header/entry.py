# dat_analyzer/sections/header/entry.py
from dataclasses import dataclass
from typing import Dict, Tuple

from ...utils.common_types import Vec3
from ..constants import SectionName

HEADER_SIZE = 60


@dataclass(frozen=True)
class Header:
    """World file header.

    Nine named u32 fields (36 bytes) followed by six reserved u32 values.
    The ``*_pos`` fields are absolute offsets of the six sections.
    """
    version: int
    object_data_pos: int
    blind_object_data_pos: int
    lightgrid_pos: int
    collision_data_pos: int
    particle_blocker_data_pos: int
    render_data_pos: int
    packer_type: int
    packer_version: int
    future: Tuple[int, int, int, int, int, int] = (0, 0, 0, 0, 0, 0)

    def section_offsets(self) -> Dict[SectionName, int]:
        """Section offsets in dispatch order."""
        return {
            SectionName.WORLD_OBJECTS: self.object_data_pos,
            SectionName.BLIND_OBJECTS: self.blind_object_data_pos,
            SectionName.LIGHTGRID: self.lightgrid_pos,
            SectionName.PHYSICS: self.collision_data_pos,
            SectionName.PARTICLE_BLOCKERS: self.particle_blocker_data_pos,
            SectionName.RENDER_DATA: self.render_data_pos,
        }


@dataclass(frozen=True)
class WorldInfo:
    """World info block stored directly after the header."""
    info: str           # Key/value text from the world properties
    extents_min: Vec3
    extents_max: Vec3
    offset: Vec3        # World translation applied to all positions

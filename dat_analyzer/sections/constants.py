# dat_analyzer/sections/constants.py
from enum import Enum


class SectionName(str, Enum):
    """Offset-addressed world sections, in dispatch order."""
    WORLD_OBJECTS = 'world_objects'
    BLIND_OBJECTS = 'blind_objects'
    LIGHTGRID = 'lightgrid'
    PHYSICS = 'physics'
    PARTICLE_BLOCKERS = 'particle_blockers'
    RENDER_DATA = 'render_data'


class ShaderCode(Enum):
    """Render section shader codes."""
    NONE = 0
    GOURAUD = 1
    LIGHTMAP = 2
    LIGHTMAP_TEXTURE = 4
    SKYPAN = 5
    SKY_PORTAL = 6
    OCCLUDER = 7
    DUAL_TEXTURE = 8
    LIGHTMAP_DUAL_TEXTURE = 9
    SPLITTER = 10

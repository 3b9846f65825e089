# dat_analyzer/sections/__init__.py
"""World file section decoders."""
from .base import BaseSection, read_array, read_lstring, read_lstring32
from .constants import SectionName, ShaderCode
from .header import HeaderSection, WorldInfoSection
from .world_tree import WorldTreeSection
from .objects import WorldObjectsSection
from .blind_objects import BlindObjectsSection
from .lightgrid import LightGridSection
from .polygons import ParticleBlockerSection, PhysicsSection, PolygonSection
from .render import RenderDataSection

__all__ = [
    'BaseSection',
    'read_array',
    'read_lstring',
    'read_lstring32',
    'SectionName',
    'ShaderCode',
    'HeaderSection',
    'WorldInfoSection',
    'WorldTreeSection',
    'WorldObjectsSection',
    'BlindObjectsSection',
    'LightGridSection',
    'PolygonSection',
    'PhysicsSection',
    'ParticleBlockerSection',
    'RenderDataSection',
]

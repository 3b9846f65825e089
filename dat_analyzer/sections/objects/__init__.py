# dat_analyzer/sections/objects/__init__.py
"""World objects and tagged properties."""
from .parser import WorldObjectsSection
from .entry import PAYLOAD_SIZES, Property, PropertyType, WorldObject

__all__ = ['WorldObjectsSection', 'Property', 'PropertyType', 'WorldObject', 'PAYLOAD_SIZES']

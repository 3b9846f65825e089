# dat_analyzer/sections/world_tree/__init__.py
"""World tree and BSP world models."""
from .parser import WorldTreeSection, read_node_child
from .entry import (
    Leaf,
    NodeChild,
    SurfaceFlags,
    WMNode,
    WMPolygon,
    WorldModel,
    WorldTree,
    iter_layout,
    layout_size
)

__all__ = [
    'WorldTreeSection',
    'read_node_child',
    'Leaf',
    'NodeChild',
    'SurfaceFlags',
    'WMNode',
    'WMPolygon',
    'WorldModel',
    'WorldTree',
    'iter_layout',
    'layout_size',
]

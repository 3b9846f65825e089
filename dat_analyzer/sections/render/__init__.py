# dat_analyzer/sections/render/__init__.py
"""Render data: render nodes, world model render nodes and light groups."""
from .parser import RenderDataSection
from .entry import (
    LightGroup,
    Occluder,
    RenderData,
    RenderNode,
    RenderSection,
    SectionLightmap,
    SkyPortal,
    SubLightmap,
    WMRenderNode,
    WorldLightGroup
)

__all__ = [
    'RenderDataSection',
    'LightGroup',
    'Occluder',
    'RenderData',
    'RenderNode',
    'RenderSection',
    'SectionLightmap',
    'SkyPortal',
    'SubLightmap',
    'WMRenderNode',
    'WorldLightGroup',
]

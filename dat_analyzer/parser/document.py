# dat_analyzer/parser/document.py
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..sections.blind_objects import BlindObject
from ..sections.header import Header, WorldInfo
from ..sections.lightgrid import LightGrid
from ..sections.objects import WorldObject
from ..sections.polygons import PolygonList
from ..sections.render import RenderData
from ..sections.world_tree import WorldTree


@dataclass(frozen=True)
class DeferredSection:
    """A located but undecoded section.

    ``prefix`` is the leading u32 count or length, None for sections
    without one (the light grid and render data).
    """
    offset: int
    prefix: Optional[int] = None


@dataclass(frozen=True)
class WorldDocument:
    """Decoded world file.

    ``world_info`` and ``world_tree`` are None unless the world tree block
    was read.
    """
    header: Header
    world_info: Optional[WorldInfo]
    world_tree: Optional[WorldTree]
    world_objects: Union[Tuple[WorldObject, ...], DeferredSection]
    blind_objects: Union[Tuple[BlindObject, ...], DeferredSection]
    lightgrid: Union[LightGrid, DeferredSection]
    physics: Union[PolygonList, DeferredSection]
    particle_blockers: Union[PolygonList, DeferredSection]
    render_data: Union[RenderData, DeferredSection]
    warnings: Tuple[str, ...] = ()

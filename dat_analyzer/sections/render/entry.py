# dat_analyzer/sections/render/entry.py
from dataclasses import dataclass
from typing import Iterator, Tuple

from ...utils.common_types import Plane, Triangle, Vec3, Vec3u, Vertex

# Render node child flag bits
CHILD_FLAG_0 = 0x01
CHILD_FLAG_1 = 0x02


@dataclass(frozen=True)
class RenderSection:
    """Render batch: textures, shader and an optional lightmap page."""
    textures: Tuple[str, str]
    shader_code: int
    triangle_count: int
    texture_effect: str
    lightmap_width: int
    lightmap_height: int
    lightmap_data: bytes


@dataclass(frozen=True)
class SkyPortal:
    vertices: Tuple[Vec3, ...]
    plane: Plane


@dataclass(frozen=True)
class Occluder:
    vertices: Tuple[Vec3, ...]
    plane: Plane
    occluder_id: int


@dataclass(frozen=True)
class SubLightmap:
    """Lightmap rectangle; ``data`` stays compressed."""
    left: int
    top: int
    width: int
    height: int
    data: bytes


@dataclass(frozen=True)
class SectionLightmap:
    sub_lightmaps: Tuple[SubLightmap, ...]


@dataclass(frozen=True)
class LightGroup:
    """Dynamic light group of a render node.

    ``intensity_data`` is zero-compressed per-vertex intensity, kept opaque.
    """
    name: str
    color: Vec3
    intensity_data: bytes
    section_lightmaps: Tuple[SectionLightmap, ...]


@dataclass(frozen=True)
class RenderNode:
    """Render tree node with its geometry batches."""
    center: Vec3
    half_dims: Vec3
    sections: Tuple[RenderSection, ...]
    vertices: Tuple[Vertex, ...]
    triangles: Tuple[Triangle, ...]
    sky_portals: Tuple[SkyPortal, ...]
    occluders: Tuple[Occluder, ...]
    light_groups: Tuple[LightGroup, ...]
    child_flags: int
    child_node_indices: Tuple[int, int]

    def has_child(self, i: int) -> bool:
        """Whether child slot ``i`` (0 or 1) is in use."""
        if i not in (0, 1):
            raise IndexError(f"Render node child slot {i} out of range")
        return bool(self.child_flags & (1 << i))

    def children(self) -> Iterator[int]:
        """Indices of the present children."""
        for i in (0, 1):
            if self.has_child(i):
                yield self.child_node_indices[i]


@dataclass(frozen=True)
class WMRenderNode:
    """Render nodes of a named world model."""
    name: str
    nodes: Tuple[RenderNode, ...]
    no_child_flag: int


@dataclass(frozen=True)
class WorldLightGroup:
    """Light group volume; ``data`` holds size.x * size.y * size.z bytes."""
    name: str
    color: Vec3
    offset: Vec3u
    size: Vec3u
    data: bytes


@dataclass(frozen=True)
class RenderData:
    render_nodes: Tuple[RenderNode, ...]
    world_model_nodes: Tuple[WMRenderNode, ...]
    light_groups: Tuple[WorldLightGroup, ...]

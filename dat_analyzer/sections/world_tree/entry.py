# dat_analyzer/sections/world_tree/entry.py
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Iterator, Optional, Tuple

from ...utils.common_types import Plane, Surface, Vec3

NODE_IN = -1
NODE_OUT = -2


class SurfaceFlags(IntFlag):
    """World model surface flags"""
    SOLID = 1 << 0
    NONEXISTENT = 1 << 1
    INVISIBLE = 1 << 2
    SKY = 1 << 4
    FLATSHADE = 1 << 6
    LIGHTMAP = 1 << 7
    NOSUBDIV = 1 << 8
    PARTICLEBLOCKER = 1 << 10
    GOURAUDSHADE = 1 << 12
    PHYSICSBLOCKER = 1 << 17
    RBSPLITTER = 1 << 19
    VISBLOCKER = 1 << 21
    NOTASTEP = 1 << 22
    RECEIVELIGHT = 1 << 24
    RECEIVESHADOWS = 1 << 25
    RECEIVESUNLIGHT = 1 << 26
    SHADOWMESH = 1 << 28
    CASTSHADOWMESH = 1 << 29
    CLIPLIGHT = 1 << 30


class Leaf(Enum):
    """BSP leaf kinds"""
    INSIDE = NODE_IN
    OUTSIDE = NODE_OUT


@dataclass(frozen=True)
class NodeChild:
    """BSP child reference: either a node index or an inside/outside leaf.

    Decoded once from the raw i32 so consumers never index the node array
    with a sentinel.
    """
    node_index: Optional[int] = None
    leaf: Optional[Leaf] = None

    def __post_init__(self):
        if (self.node_index is None) == (self.leaf is None):
            raise ValueError("NodeChild needs exactly one of node_index or leaf")
        if self.node_index is not None and self.node_index < 0:
            raise ValueError(f"Negative node index {self.node_index}")

    @classmethod
    def node(cls, index: int) -> 'NodeChild':
        return cls(node_index=index)

    @classmethod
    def inside(cls) -> 'NodeChild':
        return cls(leaf=Leaf.INSIDE)

    @classmethod
    def outside(cls) -> 'NodeChild':
        return cls(leaf=Leaf.OUTSIDE)

    @classmethod
    def from_raw(cls, raw: int) -> 'NodeChild':
        """Decode a stored index; raises ValueError for unknown sentinels."""
        if raw == NODE_IN:
            return cls.inside()
        if raw == NODE_OUT:
            return cls.outside()
        if raw < 0:
            raise ValueError(f"Unknown BSP child sentinel {raw}")
        return cls.node(raw)

    @property
    def is_leaf(self) -> bool:
        return self.leaf is not None

    @property
    def index(self) -> int:
        """Node index; raises ValueError on leaves."""
        if self.node_index is None:
            raise ValueError(f"{self.leaf.name} leaf has no node index")
        return self.node_index

    def to_raw(self) -> int:
        if self.leaf is not None:
            return self.leaf.value
        return self.node_index


@dataclass(frozen=True)
class WMPolygon:
    """World model polygon referencing a surface, a plane and points."""
    surface_index: int
    plane_index: int
    vertex_indices: Tuple[int, ...]


@dataclass(frozen=True)
class WMNode:
    """BSP node: splitting polygon, an unused leaf field (zero) and two children."""
    poly_index: int
    leaf_index: int
    children: Tuple[NodeChild, NodeChild]


@dataclass(frozen=True)
class WorldModel:
    """BSP world model (the main world or a brush model such as a door).

    Array lengths are the tuple lengths; ``portals``, ``leaves_len``,
    ``poly_vertices_len``, ``visible_list_len`` and ``leaf_list`` are
    header counts with no array stored in this block.
    """
    dummy: int
    info_flags: int
    name: str
    portals: int
    leaves_len: int
    poly_vertices_len: int
    visible_list_len: int
    leaf_list: int
    bbox_min: Vec3
    bbox_max: Vec3
    translation: Vec3
    texture_names: Tuple[str, ...]
    planes: Tuple[Plane, ...]
    surfaces: Tuple[Surface, ...]
    polygons: Tuple[WMPolygon, ...]
    nodes: Tuple[WMNode, ...]
    points: Tuple[Vec3, ...]
    root_node: NodeChild
    sections: int = 0

    def surface_texture(self, surface: Surface) -> Optional[str]:
        """Texture name of a surface, None for an out of range index."""
        if 0 <= surface.texture_index < len(self.texture_names):
            return self.texture_names[surface.texture_index]
        return None


@dataclass(frozen=True)
class WorldTree:
    """World tree: root bounds, quadtree layout bits and world models."""
    root_bbox_min: Vec3
    root_bbox_max: Vec3
    sub_nodes_len: int
    terrain_depth: int
    layout: bytes
    world_models: Tuple[WorldModel, ...]


def layout_size(sub_nodes_len: int) -> int:
    """Bytes used by the layout bitstream."""
    return (sub_nodes_len + 7) // 8


def iter_layout(layout: bytes) -> Iterator[Tuple[int, bool]]:
    """Walk the quadtree layout depth-first.

    Yields ``(depth, has_children)`` per node. A set bit (LSB first) marks a
    node with four children.
    """
    bit_pos = 0

    def next_bit() -> bool:
        nonlocal bit_pos
        byte = bit_pos // 8
        if byte >= len(layout):
            raise ValueError("World layout bitstream ended early")
        bit = (layout[byte] >> (bit_pos % 8)) & 1
        bit_pos += 1
        return bool(bit)

    stack = [0]
    while stack:
        depth = stack.pop()
        has_children = next_bit()
        yield depth, has_children
        if has_children:
            stack.extend([depth + 1] * 4)

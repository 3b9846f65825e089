# dat_analyzer/sections/world_tree/parser.py
from typing import List, Tuple
import logging

from ...errors import DecodeError, decode_context
from ...reader import ByteCursor
from ...utils.common_types import PLANE, SURFACE, VEC3
from ..base import BaseSection, decode_text
from .entry import NodeChild, WMNode, WMPolygon, WorldModel, WorldTree, layout_size

logger = logging.getLogger(__name__)


def read_node_child(cursor: ByteCursor) -> NodeChild:
    """Read an i32 BSP child index and resolve its sentinel."""
    offset = cursor.position
    raw = cursor.read_i32()
    try:
        return NodeChild.from_raw(raw)
    except ValueError as e:
        raise DecodeError(str(e), offset) from None


class WorldTreeSection(BaseSection):
    """World tree parser.

    Follows the world info block directly (no header offset):
    1. Root bounds (2 x Vec3), sub node count, terrain depth
    2. Layout bitstream, ceil(sub_nodes / 8) bytes
    3. u32 world model count and the world models
    """

    HAS_PREFIX = False

    def parse(self) -> WorldTree:
        cursor = self.cursor
        root_bbox_min = cursor.read_struct(VEC3)
        root_bbox_max = cursor.read_struct(VEC3)
        sub_nodes_len = cursor.read_u32()
        terrain_depth = cursor.read_u32()
        with decode_context('layout'):
            layout = cursor.read_bytes(layout_size(sub_nodes_len))
        world_models = self.read_counted(self.read_world_model, 'world_models')
        logger.debug(f"World tree: {sub_nodes_len} sub nodes, {len(world_models)} world models")
        return WorldTree(
            root_bbox_min=root_bbox_min,
            root_bbox_max=root_bbox_max,
            sub_nodes_len=sub_nodes_len,
            terrain_depth=terrain_depth,
            layout=layout,
            world_models=world_models
        )

    def read_world_model(self, cursor: ByteCursor) -> WorldModel:
        """Read one world model in file order."""
        dummy = cursor.read_u32()
        info_flags = cursor.read_u32()
        with decode_context('name'):
            name = self.read_lstring()

        points_len = cursor.read_u32()
        planes_len = cursor.read_u32()
        surfaces_len = cursor.read_u32()
        portals = cursor.read_u32()
        polies_len = cursor.read_u32()
        leaves_len = cursor.read_u32()
        poly_vertices_len = cursor.read_u32()
        visible_list_len = cursor.read_u32()
        leaf_list = cursor.read_u32()
        nodes_len = cursor.read_u32()

        bbox_min = cursor.read_struct(VEC3)
        bbox_max = cursor.read_struct(VEC3)
        translation = cursor.read_struct(VEC3)

        with decode_context('texture_names'):
            texture_names = self._read_texture_names(cursor)

        with decode_context('vertex_counts'):
            vertex_counts = cursor.read_bytes(polies_len)
        planes = self.read_array(planes_len, lambda c: c.read_struct(PLANE), 'planes')
        surfaces = self.read_array(surfaces_len, lambda c: c.read_struct(SURFACE), 'surfaces')
        polygons = self._read_polygons(vertex_counts)
        nodes = self.read_array(nodes_len, self.read_node, 'nodes')
        points = self.read_array(points_len, lambda c: c.read_struct(VEC3), 'points')

        with decode_context('root_node'):
            root_node = read_node_child(cursor)
        sections = cursor.read_u32()

        self._check_node_refs(name, nodes, root_node)

        return WorldModel(
            dummy=dummy,
            info_flags=info_flags,
            name=name,
            portals=portals,
            leaves_len=leaves_len,
            poly_vertices_len=poly_vertices_len,
            visible_list_len=visible_list_len,
            leaf_list=leaf_list,
            bbox_min=bbox_min,
            bbox_max=bbox_max,
            translation=translation,
            texture_names=texture_names,
            planes=planes,
            surfaces=surfaces,
            polygons=polygons,
            nodes=nodes,
            points=points,
            root_node=root_node,
            sections=sections
        )

    def read_node(self, cursor: ByteCursor) -> WMNode:
        poly_index = cursor.read_u32()
        leaf_index = cursor.read_u32()
        children = (read_node_child(cursor), read_node_child(cursor))
        return WMNode(poly_index, leaf_index, children)

    def _read_texture_names(self, cursor: ByteCursor) -> Tuple[str, ...]:
        """Read the NUL separated texture name block."""
        block_size = cursor.read_u32()
        declared_count = cursor.read_u32()
        offset = cursor.position
        block = cursor.read_bytes(block_size)
        names: List[str] = []
        start = 0
        for raw in block.split(b'\0'):
            if raw:
                names.append(decode_text(raw, self.options.encoding, offset + start))
            start += len(raw) + 1
        self.check_length("Texture name count", declared_count, len(names), offset)
        return tuple(names)

    def _read_polygons(self, vertex_counts: bytes) -> Tuple[WMPolygon, ...]:
        polygons: List[WMPolygon] = []
        with decode_context('polygons'):
            for i, count in enumerate(vertex_counts):
                with decode_context(f"[{i}]"):
                    surface_index = self.cursor.read_u32()
                    plane_index = self.cursor.read_u32()
                    indices = self.read_array(count, lambda c: c.read_u32(), 'vertex_indices')
                polygons.append(WMPolygon(surface_index, plane_index, indices))
        return tuple(polygons)

    def _check_node_refs(self, name: str, nodes: Tuple[WMNode, ...], root: NodeChild) -> None:
        refs = [root] + [child for node in nodes for child in node.children]
        bad = [ref.node_index for ref in refs
               if not ref.is_leaf and ref.node_index >= len(nodes)]
        if bad:
            message = f"World model '{name}': node indices {bad} outside {len(nodes)} nodes"
            logger.warning(message)
            self.warnings.append(message)

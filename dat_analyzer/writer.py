"""World file encoder.

Writes a WorldDocument back into the binary layout read by WorldFileParser.
The header is written last, once every section offset is known.
"""
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar
import io
import logging

from construct import Construct, Float32l, Int8ul, Int16ul, Int32sl, Int32ul

from .options import DecodeOptions
from .parser.document import DeferredSection, WorldDocument
from .sections.blind_objects import BlindObject
from .sections.constants import SectionName
from .sections.header import HEADER_SCHEMA, HEADER_SIZE, Header, WorldInfo
from .sections.lightgrid import LightGrid
from .sections.objects import Property, PropertyType, WorldObject
from .sections.polygons import Polygon, PolygonList
from .sections.render import (
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
from .sections.world_tree import WMNode, WMPolygon, WorldModel, WorldTree, layout_size
from .utils.common_types import (
    COLOR,
    PLANE,
    QUATERNION,
    SURFACE,
    TRIANGLE,
    VEC3,
    VEC3U,
    vertex_schema
)

logger = logging.getLogger(__name__)

T = TypeVar('T')

_COUNT_TYPES = {1: Int8ul, 2: Int16ul, 4: Int32ul}


class WorldWriter:
    """Little-endian writer with one ``write_*`` method per aggregate."""

    def __init__(self, options: Optional[DecodeOptions] = None):
        self.options = options or DecodeOptions()
        self.stream = io.BytesIO()

    @property
    def position(self) -> int:
        return self.stream.tell()

    def getvalue(self) -> bytes:
        return self.stream.getvalue()

    # Primitives

    def write_struct(self, schema: Construct, value: Any) -> None:
        self.stream.write(schema.build(value))

    def write_u8(self, value: int) -> None:
        self.write_struct(Int8ul, value)

    def write_u16(self, value: int) -> None:
        self.write_struct(Int16ul, value)

    def write_u32(self, value: int) -> None:
        self.write_struct(Int32ul, value)

    def write_i32(self, value: int) -> None:
        self.write_struct(Int32sl, value)

    def write_f32(self, value: float) -> None:
        self.write_struct(Float32l, value)

    def write_bytes(self, data: bytes) -> None:
        self.stream.write(data)

    def write_blob(self, data: bytes) -> None:
        """u32 length then the bytes."""
        self.write_u32(len(data))
        self.write_bytes(data)

    def write_lstring(self, text: str) -> None:
        raw = text.encode(self.options.encoding)
        if len(raw) > 0xFFFF:
            raise ValueError(f"String of {len(raw)} bytes does not fit a u16 length")
        self.write_u16(len(raw))
        self.write_bytes(raw)

    def write_lstring32(self, text: str) -> None:
        self.write_blob(text.encode(self.options.encoding))

    def write_array(self, items: Iterable[T], write_one: Callable[[T], None]) -> None:
        for item in items:
            write_one(item)

    def write_counted(self, items: Sequence[T], write_one: Callable[[T], None],
                      width: int = 4) -> None:
        """Count prefix (u8/u16/u32) then the items."""
        if len(items) >= 1 << (8 * width):
            raise ValueError(f"{len(items)} items do not fit a {width}-byte count")
        self.write_struct(_COUNT_TYPES[width], len(items))
        self.write_array(items, write_one)

    # Header, world info, world tree

    def write_header(self, header: Header) -> None:
        self.write_struct(HEADER_SCHEMA, dict(
            version=header.version,
            object_data_pos=header.object_data_pos,
            blind_object_data_pos=header.blind_object_data_pos,
            lightgrid_pos=header.lightgrid_pos,
            collision_data_pos=header.collision_data_pos,
            particle_blocker_data_pos=header.particle_blocker_data_pos,
            render_data_pos=header.render_data_pos,
            packer_type=header.packer_type,
            packer_version=header.packer_version,
            future=list(header.future)
        ))

    def write_world_info(self, info: WorldInfo) -> None:
        self.write_lstring32(info.info)
        self.write_struct(VEC3, info.extents_min)
        self.write_struct(VEC3, info.extents_max)
        self.write_struct(VEC3, info.offset)

    def write_world_tree(self, tree: WorldTree) -> None:
        if len(tree.layout) != layout_size(tree.sub_nodes_len):
            raise ValueError(
                f"Layout holds {len(tree.layout)} bytes, "
                f"{tree.sub_nodes_len} sub nodes need {layout_size(tree.sub_nodes_len)}"
            )
        self.write_struct(VEC3, tree.root_bbox_min)
        self.write_struct(VEC3, tree.root_bbox_max)
        self.write_u32(tree.sub_nodes_len)
        self.write_u32(tree.terrain_depth)
        self.write_bytes(tree.layout)
        self.write_counted(tree.world_models, self.write_world_model)

    def write_world_model(self, model: WorldModel) -> None:
        self.write_u32(model.dummy)
        self.write_u32(model.info_flags)
        self.write_lstring(model.name)
        for count in (
            len(model.points),
            len(model.planes),
            len(model.surfaces),
            model.portals,
            len(model.polygons),
            model.leaves_len,
            model.poly_vertices_len,
            model.visible_list_len,
            model.leaf_list,
            len(model.nodes),
        ):
            self.write_u32(count)
        self.write_struct(VEC3, model.bbox_min)
        self.write_struct(VEC3, model.bbox_max)
        self.write_struct(VEC3, model.translation)

        if any(not name for name in model.texture_names):
            raise ValueError(f"World model '{model.name}' has an empty texture name")
        names = b''.join(name.encode(self.options.encoding) + b'\0' for name in model.texture_names)
        self.write_u32(len(names))
        self.write_u32(len(model.texture_names))
        self.write_bytes(names)

        for polygon in model.polygons:
            if len(polygon.vertex_indices) > 0xFF:
                raise ValueError(f"Polygon with {len(polygon.vertex_indices)} vertices exceeds 255")
            self.write_u8(len(polygon.vertex_indices))
        self.write_array(model.planes, lambda plane: self.write_struct(PLANE, plane))
        self.write_array(model.surfaces, lambda surface: self.write_struct(SURFACE, surface))
        self.write_array(model.polygons, self.write_wm_polygon)
        self.write_array(model.nodes, self.write_wm_node)
        self.write_array(model.points, lambda point: self.write_struct(VEC3, point))
        self.write_i32(model.root_node.to_raw())
        self.write_u32(model.sections)

    def write_wm_polygon(self, polygon: WMPolygon) -> None:
        self.write_u32(polygon.surface_index)
        self.write_u32(polygon.plane_index)
        self.write_array(polygon.vertex_indices, self.write_u32)

    def write_wm_node(self, node: WMNode) -> None:
        self.write_u32(node.poly_index)
        self.write_u32(node.leaf_index)
        for child in node.children:
            self.write_i32(child.to_raw())

    # World objects

    def write_world_objects(self, objects: Sequence[WorldObject]) -> None:
        self.write_counted(objects, self.write_world_object)

    def write_world_object(self, obj: WorldObject) -> None:
        self.write_u16(obj.object_size)
        self.write_lstring(obj.object_type)
        self.write_counted(obj.properties, self.write_property)

    def write_property(self, prop: Property) -> None:
        self.write_lstring(prop.name)
        self.write_u8(prop.type_tag)
        self.write_u32(prop.flags)
        self.write_u16(prop.declared_size)
        value = prop.value
        if prop.type_tag == PropertyType.STRING:
            self.write_lstring(value)
        elif prop.type_tag == PropertyType.VECTOR:
            self.write_struct(VEC3, value)
        elif prop.type_tag == PropertyType.COLOR:
            self.write_struct(COLOR, value)
        elif prop.type_tag == PropertyType.REAL:
            self.write_f32(value)
        elif prop.type_tag == PropertyType.BOOL:
            self.write_u8(1 if value else 0)
        elif prop.type_tag == PropertyType.FLAGS:
            self.write_u32(value)
        else:
            self.write_struct(QUATERNION, value)

    # Blind objects, light grid, polygons

    def write_blind_objects(self, objects: Sequence[BlindObject]) -> None:
        self.write_counted(objects, self.write_blind_object)

    def write_blind_object(self, obj: BlindObject) -> None:
        self.write_u32(len(obj.data))
        self.write_u32(obj.object_id)
        self.write_bytes(obj.data)

    def write_lightgrid(self, grid: LightGrid) -> None:
        self.write_struct(VEC3, grid.lookup_start)
        self.write_struct(VEC3, grid.block_size)
        self.write_struct(VEC3U, grid.lookup_size)
        self.write_blob(grid.data)

    def write_polygon_list(self, polygons: PolygonList) -> None:
        self.write_counted(polygons.polygons, self.write_polygon)
        self.write_u32(polygons.trailer)

    def write_polygon(self, polygon: Polygon) -> None:
        self.write_struct(PLANE, polygon.plane)
        self.write_counted(polygon.vertices, lambda v: self.write_struct(VEC3, v))

    # Render data

    def write_render_data(self, render_data: RenderData) -> None:
        self.write_counted(render_data.render_nodes, self.write_render_node)
        self.write_counted(render_data.world_model_nodes, self.write_wm_render_node)
        self.write_counted(render_data.light_groups, self.write_world_light_group)

    def write_render_node(self, node: RenderNode) -> None:
        self.write_struct(VEC3, node.center)
        self.write_struct(VEC3, node.half_dims)
        self.write_counted(node.sections, self.write_render_section)

        schema = vertex_schema(self.options.vertex_tangents)
        if self.options.vertex_tangents and any(
                v.tangent is None or v.binormal is None for v in node.vertices):
            raise ValueError("Vertex without tangent space in a tangent layout")
        self.write_counted(node.vertices, lambda v: self.write_struct(schema, v))
        self.write_counted(node.triangles, lambda t: self.write_struct(TRIANGLE, t))
        self.write_counted(node.sky_portals, self.write_sky_portal)
        self.write_counted(node.occluders, self.write_occluder)
        self.write_counted(node.light_groups, self.write_light_group)
        self.write_u8(node.child_flags)
        for index in node.child_node_indices:
            self.write_u32(index)

    def write_render_section(self, section: RenderSection) -> None:
        for texture in section.textures:
            self.write_lstring(texture)
        self.write_u8(section.shader_code)
        self.write_u32(section.triangle_count)
        self.write_lstring(section.texture_effect)
        self.write_u32(section.lightmap_width)
        self.write_u32(section.lightmap_height)
        self.write_blob(section.lightmap_data)

    def write_sky_portal(self, portal: SkyPortal) -> None:
        self.write_counted(portal.vertices, lambda v: self.write_struct(VEC3, v), width=1)
        self.write_struct(PLANE, portal.plane)

    def write_occluder(self, occluder: Occluder) -> None:
        self.write_counted(occluder.vertices, lambda v: self.write_struct(VEC3, v), width=1)
        self.write_struct(PLANE, occluder.plane)
        self.write_u32(occluder.occluder_id)

    def write_light_group(self, group: LightGroup) -> None:
        self.write_lstring(group.name)
        self.write_struct(VEC3, group.color)
        self.write_blob(group.intensity_data)
        self.write_counted(group.section_lightmaps, self.write_section_lightmap)

    def write_section_lightmap(self, lightmap: SectionLightmap) -> None:
        self.write_counted(lightmap.sub_lightmaps, self.write_sub_lightmap)

    def write_sub_lightmap(self, sub: SubLightmap) -> None:
        self.write_u32(sub.left)
        self.write_u32(sub.top)
        self.write_u32(sub.width)
        self.write_u32(sub.height)
        self.write_blob(sub.data)

    def write_wm_render_node(self, node: WMRenderNode) -> None:
        self.write_lstring(node.name)
        self.write_counted(node.nodes, self.write_render_node)
        self.write_u32(node.no_child_flag)

    def write_world_light_group(self, group: WorldLightGroup) -> None:
        if len(group.data) != group.size.volume:
            raise ValueError(
                f"Light group '{group.name}' holds {len(group.data)} bytes, "
                f"size needs {group.size.volume}"
            )
        self.write_lstring(group.name)
        self.write_struct(VEC3, group.color)
        self.write_struct(VEC3U, group.offset)
        self.write_struct(VEC3U, group.size)
        self.write_bytes(group.data)

    # Document

    def write_document(self, document: WorldDocument) -> None:
        """Write a whole world file, computing the header offsets."""
        section_writers = (
            (SectionName.WORLD_OBJECTS, document.world_objects, self.write_world_objects),
            (SectionName.BLIND_OBJECTS, document.blind_objects, self.write_blind_objects),
            (SectionName.LIGHTGRID, document.lightgrid, self.write_lightgrid),
            (SectionName.PHYSICS, document.physics, self.write_polygon_list),
            (SectionName.PARTICLE_BLOCKERS, document.particle_blockers, self.write_polygon_list),
            (SectionName.RENDER_DATA, document.render_data, self.write_render_data),
        )

        if (document.world_info is None) != (document.world_tree is None):
            raise ValueError("World info and world tree must both be present or both be None")

        start = self.position
        self.write_bytes(bytes(HEADER_SIZE))
        if document.world_tree is not None:
            self.write_world_info(document.world_info)
            self.write_world_tree(document.world_tree)

        offsets = {}
        for name, value, write in section_writers:
            if isinstance(value, DeferredSection):
                raise ValueError(f"Cannot encode deferred section {name.value}")
            offsets[name] = self.position - start
            write(value)

        header = document.header
        end = self.position
        self.stream.seek(start)
        self.write_header(Header(
            version=header.version,
            object_data_pos=offsets[SectionName.WORLD_OBJECTS],
            blind_object_data_pos=offsets[SectionName.BLIND_OBJECTS],
            lightgrid_pos=offsets[SectionName.LIGHTGRID],
            collision_data_pos=offsets[SectionName.PHYSICS],
            particle_blocker_data_pos=offsets[SectionName.PARTICLE_BLOCKERS],
            render_data_pos=offsets[SectionName.RENDER_DATA],
            packer_type=header.packer_type,
            packer_version=header.packer_version,
            future=header.future
        ))
        self.stream.seek(end)
        logger.debug(f"Encoded world file, {end - start} bytes")


def encode_world(document: WorldDocument, options: Optional[DecodeOptions] = None) -> bytes:
    """Encode a document; the header offsets are recomputed from the layout."""
    writer = WorldWriter(options)
    writer.write_document(document)
    return writer.getvalue()

# dat_analyzer/sections/render/parser.py
import logging

from ...errors import decode_context
from ...reader import ByteCursor
from ...utils.common_types import PLANE, TRIANGLE, VEC3, VEC3U, vertex_schema
from ..base import BaseSection
from ..constants import ShaderCode
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

logger = logging.getLogger(__name__)

_SHADER_CODES = {code.value for code in ShaderCode}


class RenderDataSection(BaseSection):
    """Render data parser.

    Structure:
    1. u32 count + render nodes
    2. u32 count + world model render nodes (name, nodes, no-child flag)
    3. u32 count + world light groups (name, color, offset, size, volume data)

    Deferred by default. A deferred render section is only located, so an
    empty or truncated payload still loads.
    """

    HAS_PREFIX = False

    def parse(self) -> RenderData:
        render_nodes = self.read_counted(self.read_render_node, 'render_nodes')
        world_model_nodes = self.read_counted(self.read_wm_render_node, 'world_model_nodes')
        light_groups = self.read_counted(self.read_world_light_group, 'light_groups')
        logger.debug(
            f"Render data: {len(render_nodes)} nodes, "
            f"{len(world_model_nodes)} world model nodes, {len(light_groups)} light groups"
        )
        return RenderData(render_nodes, world_model_nodes, light_groups)

    def read_render_node(self, cursor: ByteCursor) -> RenderNode:
        center = cursor.read_struct(VEC3)
        half_dims = cursor.read_struct(VEC3)
        sections = self.read_counted(self.read_section, 'sections')
        schema = vertex_schema(self.options.vertex_tangents)
        vertices = self.read_counted(lambda c: c.read_struct(schema), 'vertices')
        triangles = self.read_counted(lambda c: c.read_struct(TRIANGLE), 'triangles')
        sky_portals = self.read_counted(self.read_sky_portal, 'sky_portals')
        occluders = self.read_counted(self.read_occluder, 'occluders')
        light_groups = self.read_counted(self.read_light_group, 'light_groups')
        child_flags = cursor.read_u8()
        child_node_indices = (cursor.read_u32(), cursor.read_u32())
        return RenderNode(
            center=center,
            half_dims=half_dims,
            sections=sections,
            vertices=vertices,
            triangles=triangles,
            sky_portals=sky_portals,
            occluders=occluders,
            light_groups=light_groups,
            child_flags=child_flags,
            child_node_indices=child_node_indices
        )

    def read_section(self, cursor: ByteCursor) -> RenderSection:
        with decode_context('textures'):
            textures = (self.read_lstring(), self.read_lstring())
        shader_offset = cursor.position
        shader_code = cursor.read_u8()
        if shader_code not in _SHADER_CODES:
            message = f"Unknown shader code {shader_code} at offset 0x{shader_offset:08X}"
            logger.warning(message)
            self.warnings.append(message)
        triangle_count = cursor.read_u32()
        with decode_context('texture_effect'):
            texture_effect = self.read_lstring()
        lightmap_width = cursor.read_u32()
        lightmap_height = cursor.read_u32()
        with decode_context('lightmap_data'):
            lightmap_data = self.read_blob()
        return RenderSection(
            textures=textures,
            shader_code=shader_code,
            triangle_count=triangle_count,
            texture_effect=texture_effect,
            lightmap_width=lightmap_width,
            lightmap_height=lightmap_height,
            lightmap_data=lightmap_data
        )

    def read_sky_portal(self, cursor: ByteCursor) -> SkyPortal:
        vertices = self.read_counted(lambda c: c.read_struct(VEC3), 'vertices', width=1)
        plane = cursor.read_struct(PLANE)
        return SkyPortal(vertices, plane)

    def read_occluder(self, cursor: ByteCursor) -> Occluder:
        vertices = self.read_counted(lambda c: c.read_struct(VEC3), 'vertices', width=1)
        plane = cursor.read_struct(PLANE)
        occluder_id = cursor.read_u32()
        return Occluder(vertices, plane, occluder_id)

    def read_light_group(self, cursor: ByteCursor) -> LightGroup:
        with decode_context('name'):
            name = self.read_lstring()
        color = cursor.read_struct(VEC3)
        with decode_context('intensity_data'):
            intensity_data = self.read_blob()
        section_lightmaps = self.read_counted(self.read_section_lightmap, 'section_lightmaps')
        return LightGroup(name, color, intensity_data, section_lightmaps)

    def read_section_lightmap(self, cursor: ByteCursor) -> SectionLightmap:
        return SectionLightmap(self.read_counted(self.read_sub_lightmap, 'sub_lightmaps'))

    def read_sub_lightmap(self, cursor: ByteCursor) -> SubLightmap:
        left = cursor.read_u32()
        top = cursor.read_u32()
        width = cursor.read_u32()
        height = cursor.read_u32()
        with decode_context('data'):
            data = self.read_blob()
        return SubLightmap(left, top, width, height, data)

    def read_wm_render_node(self, cursor: ByteCursor) -> WMRenderNode:
        with decode_context('name'):
            name = self.read_lstring()
        nodes = self.read_counted(self.read_render_node, 'nodes')
        no_child_flag = cursor.read_u32()
        return WMRenderNode(name, nodes, no_child_flag)

    def read_world_light_group(self, cursor: ByteCursor) -> WorldLightGroup:
        with decode_context('name'):
            name = self.read_lstring()
        color = cursor.read_struct(VEC3)
        offset = cursor.read_struct(VEC3U)
        size = cursor.read_struct(VEC3U)
        with decode_context('data'):
            data = cursor.read_bytes(size.volume)
        return WorldLightGroup(name, color, offset, size, data)

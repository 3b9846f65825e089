"""
Tests for the section dispatcher
"""
import struct

import pytest

from dat_analyzer import (
    DecodeError,
    DecodeOptions,
    DeferredSection,
    InvalidOffset,
    SectionName,
    SectionRegistry,
    UnexpectedEof,
    UnknownPropertyTag,
    WorldFileParser,
    decode_world
)
from dat_analyzer.options import DEFAULT_DEFERRED
from dat_analyzer.sections.base import BaseSection
from dat_analyzer.sections.objects import PropertyType
from dat_analyzer.sections.polygons import PolygonList
from dat_analyzer.utils.common_types import Vec3

from builders import (
    EMPTY_BLIND_OBJECTS,
    EMPTY_LIGHTGRID,
    EMPTY_POLYGONS,
    EMPTY_RENDER_DATA,
    HEADER_SIZE,
    assemble,
    counted,
    f32,
    header,
    lstring,
    prop,
    render_node,
    u32,
    vec3,
    world_info,
    world_model,
    world_object,
    world_tree
)

ALL_SECTIONS = DecodeOptions(deferred_sections=frozenset())

DOOR = world_object('Door', [prop('Name', 0, lstring('Door01'))])
LIGHT = world_object('Light', [prop('Radius', 3, f32(1.0))])


class RecordingSection(BaseSection):
    """Decoder that records being called"""

    calls = []

    def parse(self):
        RecordingSection.calls.append(self.cursor.position)
        return self.cursor.read_u32()


class TestDecodeWorld:
    """Test whole-file decoding"""

    def test_defaults(self):
        document = decode_world(assemble())
        offsets = document.header.section_offsets()
        assert document.header.version == 85
        assert document.world_info is None
        assert document.world_tree is None
        assert document.world_objects == ()
        assert document.blind_objects == ()
        assert document.physics == PolygonList((), 0)
        assert document.particle_blockers == PolygonList((), 0)
        assert document.lightgrid == DeferredSection(offsets[SectionName.LIGHTGRID], None)
        assert document.render_data == DeferredSection(offsets[SectionName.RENDER_DATA], None)
        assert document.warnings == ()

    def test_empty_deferred_sections(self):
        # Only located, so zero-length payloads load
        document = decode_world(assemble(lightgrid=b'', render_data=b''))
        assert document.render_data.offset == document.header.render_data_pos
        assert document.render_data.offset == len(assemble(lightgrid=b'', render_data=b''))
        assert document.lightgrid.prefix is None

    def test_empty_sections_fail_when_decoded(self):
        with pytest.raises(UnexpectedEof) as exc:
            decode_world(assemble(lightgrid=b'', render_data=b''), ALL_SECTIONS)
        assert exc.value.location.startswith('lightgrid')

    def test_full_world(self):
        data = assemble(info=world_info('WorldName Test'), tree=world_tree([world_model()]))
        document = decode_world(data, DecodeOptions.full())
        assert document.world_info.info == 'WorldName Test'
        assert document.world_tree.world_models[0].name == 'PhysicsBSP'
        assert document.world_objects == ()
        assert document.lightgrid.block_size == Vec3(32.0, 32.0, 32.0)
        assert document.render_data.render_nodes == ()
        assert document.warnings == ()

    def test_world_tree_skipped_by_default(self):
        # The block is present but the default decoder never reads it
        data = assemble(info=world_info('WorldName Test'), tree=world_tree([world_model()]))
        document = decode_world(data)
        assert document.world_info is None
        assert document.world_tree is None

    def test_two_objects_at_0x24(self):
        # The object section overlaps the reserved header words and runs past them
        objects = u32(2) + DOOR + LIGHT
        position = 0x24 + len(objects)
        assert position > HEADER_SIZE
        offsets = []
        for section in (EMPTY_BLIND_OBJECTS, EMPTY_LIGHTGRID, EMPTY_POLYGONS, EMPTY_POLYGONS):
            offsets.append(position)
            position += len(section)
        data = (
            struct.pack('<9I', 1, 0x24, *offsets, position, 0, 0) + objects
            + EMPTY_BLIND_OBJECTS + EMPTY_LIGHTGRID
            + EMPTY_POLYGONS + EMPTY_POLYGONS + EMPTY_RENDER_DATA
        )
        assert data[:8] == bytes.fromhex('0100000024000000')

        document = decode_world(data)
        assert document.header.version == 1
        door, light = document.world_objects
        assert door.object_type == 'Door'
        assert door.name == 'Door01'
        assert door.properties[0].type_tag == PropertyType.STRING
        assert light.object_type == 'Light'
        assert light.get('Radius') == 1.0
        assert light.properties[0].type_tag == PropertyType.REAL
        assert document.world_tree is None

    def test_sections_out_of_file_order(self):
        # Render data stored before the objects; offsets do not increase
        render = counted([render_node()]) + u32(0) + u32(0)
        order = ('render_data', 'world_objects', 'blind_objects',
                 'lightgrid', 'physics', 'particle_blockers')
        data = assemble(objects=counted([DOOR]), render_data=render, order=order)
        document = decode_world(data, ALL_SECTIONS)

        assert document.header.render_data_pos == HEADER_SIZE
        assert document.header.render_data_pos < document.header.object_data_pos
        assert document.world_objects[0].name == 'Door01'
        assert len(document.render_data.render_nodes) == 1
        assert document.lightgrid.block_size == Vec3(32.0, 32.0, 32.0)

    def test_stream_source(self, tmp_path):
        path = tmp_path / 'test.dat'
        path.write_bytes(assemble(tree=world_tree([world_model()])))
        document = WorldFileParser(DecodeOptions.full()).parse_file(path)
        assert document.world_tree.world_models[0].name == 'PhysicsBSP'

    def test_objects_and_render_data(self):
        render = counted([render_node()]) + u32(0) + u32(0)
        document = decode_world(assemble(objects=counted([DOOR]), render_data=render), ALL_SECTIONS)
        assert document.world_objects[0].name == 'Door01'
        assert len(document.render_data.render_nodes) == 1

    def test_warnings_collected(self):
        objects = counted([world_object('Light', [prop('Radius', 3, struct.pack('<f', 1.0), size=2)])])
        document = decode_world(assemble(objects=objects))
        assert len(document.warnings) == 1


class TestOffsetValidation:
    """Test header offset checks"""

    def test_offset_past_end(self):
        data = assemble()
        bad = header([len(data) + 1] + [HEADER_SIZE] * 5) + data[HEADER_SIZE:]
        with pytest.raises(InvalidOffset) as exc:
            decode_world(bad)
        assert exc.value.section == 'world_objects'
        assert exc.value.target == len(data) + 1

    def test_zero_offset(self):
        data = assemble()
        offsets = [HEADER_SIZE] * 6
        offsets[4] = 0
        with pytest.raises(InvalidOffset) as exc:
            decode_world(header(offsets) + data[HEADER_SIZE:])
        assert exc.value.section == 'particle_blockers'

    def test_checked_before_any_section(self):
        # The world info is garbage: the offset check must fire first
        data = header([10000] * 6) + u32(0xFFFFFFFF)
        RecordingSection.calls = []
        registry = SectionRegistry({SectionName.WORLD_OBJECTS: RecordingSection})
        with pytest.raises(InvalidOffset):
            WorldFileParser(DecodeOptions.full(), registry).parse(data)
        assert RecordingSection.calls == []

    def test_truncated_header(self):
        with pytest.raises(UnexpectedEof) as exc:
            decode_world(u32(85) + u32(0))
        assert exc.value.location == 'header'


class TestErrorPaths:
    """Test error annotation through the dispatcher"""

    def test_unknown_tag_path(self):
        objects = counted([
            world_object('Door'),
            world_object('Light', [prop('Odd', 9, b'')]),
        ])
        with pytest.raises(UnknownPropertyTag) as exc:
            decode_world(assemble(objects=objects))
        assert exc.value.location == 'world_objects[1].properties[0]'
        assert '(world_objects[1].properties[0])' in str(exc.value)

    def test_truncated_last_section(self):
        data = assemble(render_data=counted([render_node()]) + u32(0) + u32(0))
        with pytest.raises(UnexpectedEof) as exc:
            decode_world(data[:-6], ALL_SECTIONS)
        assert exc.value.location.startswith('render_data')

    def test_invalid_text_path(self):
        data = assemble(objects=counted([world_object('Door\xff')]))
        with pytest.raises(DecodeError) as exc:
            decode_world(data, DecodeOptions(encoding='utf-8'))
        assert exc.value.location == 'world_objects[0].object_type'
        assert exc.value.offset == HEADER_SIZE + 4 + 2 + 2 + 4
        assert 'utf-8' in str(exc.value)

    def test_invalid_text_latin1_default(self):
        document = decode_world(assemble(objects=counted([world_object('Door\xff')])))
        assert document.world_objects[0].object_type == 'Door\xff'


class TestRegistryAndDeferral:
    """Test section registry and deferred sections"""

    def test_default_deferred_set(self):
        assert DecodeOptions().deferred_sections == DEFAULT_DEFERRED
        assert DEFAULT_DEFERRED == {'lightgrid', 'render_data'}
        assert DecodeOptions.full().deferred_sections == frozenset()
        assert DecodeOptions.full(strict=True).world_tree

    def test_deferred_sections(self):
        polygons = counted([struct.pack('<4f', 0.0, 1.0, 0.0, 0.0) + counted([vec3()])]) + u32(0)
        data = assemble(physics=polygons, render_data=counted([render_node()]) + u32(0) + u32(0))
        options = DecodeOptions(deferred_sections=frozenset({'physics', 'lightgrid', 'render_data'}))
        document = decode_world(data, options)

        offsets = document.header.section_offsets()
        assert document.physics == DeferredSection(offsets[SectionName.PHYSICS], 1)
        assert document.lightgrid == DeferredSection(offsets[SectionName.LIGHTGRID], None)
        assert document.render_data == DeferredSection(offsets[SectionName.RENDER_DATA], None)
        assert document.world_objects == ()

    def test_deferred_section_skips_bad_data(self):
        # Bytes after the prefix are never looked at
        data = assemble(blind_objects=u32(5) + b'\xff')
        options = DecodeOptions(deferred_sections=frozenset({SectionName.BLIND_OBJECTS}))
        document = decode_world(data, options)
        assert document.blind_objects.prefix == 5

    def test_registered_decoder(self):
        RecordingSection.calls = []
        registry = SectionRegistry()
        registry.register(SectionName.PHYSICS, RecordingSection)
        data = assemble(physics=u32(1234))
        document = WorldFileParser(registry=registry).parse(data)
        assert document.physics == 1234
        assert RecordingSection.calls == [document.header.collision_data_pos]
        assert document.particle_blockers == PolygonList((), 0)

    def test_registry_lookup_by_name(self):
        registry = SectionRegistry()
        assert registry.get('physics') is registry.get(SectionName.PHYSICS)

"""
Tests for the world tree, world models and BSP children
"""
import pytest

from dat_analyzer.errors import DecodeError, InconsistentLength, UnexpectedEof
from dat_analyzer.options import DecodeOptions
from dat_analyzer.reader import ByteCursor
from dat_analyzer.sections.world_tree import (
    Leaf,
    NodeChild,
    SurfaceFlags,
    WorldTreeSection,
    iter_layout,
    layout_size,
    read_node_child
)
from dat_analyzer.utils.common_types import Vec3

from builders import i32, world_model, world_tree


def parse_tree(data: bytes, options: DecodeOptions = None, warnings: list = None):
    return WorldTreeSection(ByteCursor(data), options, warnings).parse()


class TestNodeChild:
    """Test BSP child sentinels"""

    def test_sentinels(self):
        assert NodeChild.from_raw(-1) == NodeChild.inside()
        assert NodeChild.from_raw(-2) == NodeChild.outside()
        assert NodeChild.from_raw(-1).leaf == Leaf.INSIDE
        assert NodeChild.from_raw(-2).is_leaf

    def test_node_index(self):
        child = NodeChild.from_raw(7)
        assert not child.is_leaf
        assert child.index == 7
        assert child.to_raw() == 7

    def test_leaf_has_no_index(self):
        with pytest.raises(ValueError):
            NodeChild.inside().index

    def test_raw_round_trip(self):
        for raw in (-2, -1, 0, 1, 1000):
            assert NodeChild.from_raw(raw).to_raw() == raw

    def test_unknown_sentinel(self):
        with pytest.raises(ValueError):
            NodeChild.from_raw(-3)
        with pytest.raises(DecodeError) as exc:
            read_node_child(ByteCursor(i32(-3)))
        assert exc.value.offset == 0

    def test_exactly_one_variant(self):
        with pytest.raises(ValueError):
            NodeChild()
        with pytest.raises(ValueError):
            NodeChild(node_index=1, leaf=Leaf.INSIDE)


class TestLayout:
    """Test the quadtree layout bitstream"""

    def test_layout_size(self):
        assert layout_size(0) == 0
        assert layout_size(1) == 1
        assert layout_size(8) == 1
        assert layout_size(9) == 2

    def test_walk(self):
        # Root split once, children are leaves
        assert list(iter_layout(b'\x01')) == [(0, True)] + [(1, False)] * 4

    def test_walk_ends_early(self):
        with pytest.raises(ValueError):
            list(iter_layout(b''))


class TestWorldTree:
    """Test world tree decoding"""

    def test_empty_tree(self):
        tree = parse_tree(world_tree())
        assert tree.sub_nodes_len == 1
        assert tree.layout == b'\x00'
        assert tree.world_models == ()
        assert tree.root_bbox_max == Vec3(1.0, 1.0, 1.0)

    def test_world_model(self):
        tree = parse_tree(world_tree([world_model()]))
        model = tree.world_models[0]
        assert model.name == 'PhysicsBSP'
        assert model.texture_names == ('tex\\a.dtx', 'tex\\b.dtx')
        assert len(model.planes) == 1
        assert model.surfaces[0].flags & SurfaceFlags.SOLID
        assert model.surface_texture(model.surfaces[0]) == 'tex\\a.dtx'
        assert model.polygons[0].vertex_indices == (0, 1, 2)
        assert model.nodes[0].children == (NodeChild.inside(), NodeChild.outside())
        assert model.points[1] == Vec3(1.0, 0.0, 0.0)
        assert model.root_node == NodeChild.node(0)
        assert model.poly_vertices_len == 3

    def test_texture_count_mismatch_warns(self):
        warnings = []
        tree = parse_tree(world_tree([world_model(texture_count=3)]), warnings=warnings)
        assert len(tree.world_models[0].texture_names) == 2
        assert len(warnings) == 1

    def test_texture_count_mismatch_strict(self):
        with pytest.raises(InconsistentLength) as exc:
            parse_tree(world_tree([world_model(texture_count=3)]), DecodeOptions(strict=True))
        assert exc.value.location == 'world_models[0].texture_names'

    def test_dangling_node_index_warns(self):
        warnings = []
        parse_tree(world_tree([world_model(children=(5, -1))]), warnings=warnings)
        assert any('node indices [5]' in w for w in warnings)

    def test_unknown_sentinel_in_model(self):
        with pytest.raises(DecodeError) as exc:
            parse_tree(world_tree([world_model(root=-7)]))
        assert exc.value.location == 'world_models[0].root_node'

    def test_node_leaf_field_is_u32(self):
        tree = parse_tree(world_tree([world_model(leaf_index=0x10000)]))
        node = tree.world_models[0].nodes[0]
        assert node.leaf_index == 0x10000
        assert node.children == (NodeChild.inside(), NodeChild.outside())
        assert tree.world_models[0].points[2] == Vec3(0.0, 0.0, 1.0)

    def test_invalid_texture_name_text(self):
        data = world_tree([world_model(texture_names=(b'tex\\a.dtx', b'tex\\\xff.dtx'))])
        with pytest.raises(DecodeError) as exc:
            parse_tree(data, DecodeOptions(encoding='utf-8'))
        assert exc.value.location == 'world_models[0].texture_names'
        assert exc.value.offset == data.index(b'\xff')

    def test_truncated_model(self):
        data = world_tree([world_model()])
        with pytest.raises(UnexpectedEof) as exc:
            parse_tree(data[:-6])
        assert exc.value.location.startswith('world_models[0]')

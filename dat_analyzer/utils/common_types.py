"""
Common data types used in LithTech world files.
Each type has a construct schema decoding it field by field in file order.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from construct import Adapter, Float32l, Int16ul, Int32ul, Struct


@dataclass(frozen=True)
class Vec2:
    """2D vector"""
    x: float
    y: float


@dataclass(frozen=True)
class Vec3:
    """3D vector"""
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Vec3u:
    """Unsigned integer triple (grid offsets and sizes)"""
    x: int
    y: int
    z: int

    @property
    def volume(self) -> int:
        return self.x * self.y * self.z


@dataclass(frozen=True)
class Color:
    """Floating point RGB color"""
    r: float
    g: float
    b: float


@dataclass(frozen=True)
class Quaternion:
    """Quaternion (x, y, z, w)"""
    x: float
    y: float
    z: float
    w: float


@dataclass(frozen=True)
class Plane:
    """Plane as unit normal and distance from origin"""
    normal: Vec3
    dist: float


@dataclass(frozen=True)
class Surface:
    """World model surface"""
    flags: int
    texture_index: int
    texture_flags: int


@dataclass(frozen=True)
class Triangle:
    """Render triangle: three vertex indices and the source polygon"""
    indices: Tuple[int, int, int]
    poly_index: int


@dataclass(frozen=True)
class Vertex:
    """Render vertex. Tangent and binormal are absent in the short layout."""
    position: Vec3
    uv0: Vec2
    uv1: Vec2
    color: int
    normal: Vec3
    tangent: Optional[Vec3] = None
    binormal: Optional[Vec3] = None


# Adapters between construct containers and the dataclasses above

class Vec2Adapter(Adapter):
    def _decode(self, obj, context, path):
        return Vec2(obj.x, obj.y)

    def _encode(self, obj, context, path):
        return dict(x=obj.x, y=obj.y)


class Vec3Adapter(Adapter):
    def _decode(self, obj, context, path):
        return Vec3(obj.x, obj.y, obj.z)

    def _encode(self, obj, context, path):
        return dict(x=obj.x, y=obj.y, z=obj.z)


class Vec3uAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Vec3u(obj.x, obj.y, obj.z)

    def _encode(self, obj, context, path):
        return dict(x=obj.x, y=obj.y, z=obj.z)


class ColorAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Color(obj.r, obj.g, obj.b)

    def _encode(self, obj, context, path):
        return dict(r=obj.r, g=obj.g, b=obj.b)


class QuaternionAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Quaternion(obj.x, obj.y, obj.z, obj.w)

    def _encode(self, obj, context, path):
        return dict(x=obj.x, y=obj.y, z=obj.z, w=obj.w)


class PlaneAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Plane(obj.normal, obj.dist)

    def _encode(self, obj, context, path):
        return dict(normal=obj.normal, dist=obj.dist)


class SurfaceAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Surface(obj.flags, obj.texture_index, obj.texture_flags)

    def _encode(self, obj, context, path):
        return dict(
            flags=obj.flags,
            texture_index=obj.texture_index,
            texture_flags=obj.texture_flags
        )


class TriangleAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Triangle((obj.t0, obj.t1, obj.t2), obj.poly_index)

    def _encode(self, obj, context, path):
        t0, t1, t2 = obj.indices
        return dict(t0=t0, t1=t1, t2=t2, poly_index=obj.poly_index)


class VertexAdapter(Adapter):
    def _decode(self, obj, context, path):
        return Vertex(
            position=obj.position,
            uv0=obj.uv0,
            uv1=obj.uv1,
            color=obj.color,
            normal=obj.normal,
            tangent=obj.get('tangent'),
            binormal=obj.get('binormal')
        )

    def _encode(self, obj, context, path):
        return dict(
            position=obj.position,
            uv0=obj.uv0,
            uv1=obj.uv1,
            color=obj.color,
            normal=obj.normal,
            tangent=obj.tangent,
            binormal=obj.binormal
        )


# Schemas

VEC2 = Vec2Adapter(Struct("x" / Float32l, "y" / Float32l))

VEC3 = Vec3Adapter(Struct("x" / Float32l, "y" / Float32l, "z" / Float32l))

VEC3U = Vec3uAdapter(Struct("x" / Int32ul, "y" / Int32ul, "z" / Int32ul))

COLOR = ColorAdapter(Struct("r" / Float32l, "g" / Float32l, "b" / Float32l))

QUATERNION = QuaternionAdapter(Struct(
    "x" / Float32l,
    "y" / Float32l,
    "z" / Float32l,
    "w" / Float32l,
))

PLANE = PlaneAdapter(Struct("normal" / VEC3, "dist" / Float32l))

SURFACE = SurfaceAdapter(Struct(
    "flags" / Int32ul,
    "texture_index" / Int16ul,
    "texture_flags" / Int16ul,
))

TRIANGLE = TriangleAdapter(Struct(
    "t0" / Int32ul,
    "t1" / Int32ul,
    "t2" / Int32ul,
    "poly_index" / Int32ul,
))

# 68 bytes
VERTEX = VertexAdapter(Struct(
    "position" / VEC3,
    "uv0" / VEC2,
    "uv1" / VEC2,
    "color" / Int32ul,
    "normal" / VEC3,
    "tangent" / VEC3,
    "binormal" / VEC3,
))

# 44 bytes, worlds built without tangent space
VERTEX_NO_TANGENTS = VertexAdapter(Struct(
    "position" / VEC3,
    "uv0" / VEC2,
    "uv1" / VEC2,
    "color" / Int32ul,
    "normal" / VEC3,
))


def vertex_schema(with_tangents: bool):
    """Vertex schema for the given layout."""
    return VERTEX if with_tangents else VERTEX_NO_TANGENTS

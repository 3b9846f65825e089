"""
Utility modules for world file analysis.
"""
from .common_types import (
    Vec2,
    Vec3,
    Vec3u,
    Color,
    Quaternion,
    Plane,
    Surface,
    Triangle,
    Vertex,
    VEC2,
    VEC3,
    VEC3U,
    COLOR,
    QUATERNION,
    PLANE,
    SURFACE,
    TRIANGLE,
    vertex_schema
)
from .logging import setup_logging

__all__ = [
    # Common types
    'Vec2',
    'Vec3',
    'Vec3u',
    'Color',
    'Quaternion',
    'Plane',
    'Surface',
    'Triangle',
    'Vertex',

    # Schemas
    'VEC2',
    'VEC3',
    'VEC3U',
    'COLOR',
    'QUATERNION',
    'PLANE',
    'SURFACE',
    'TRIANGLE',
    'vertex_schema',

    # Logging
    'setup_logging'
]

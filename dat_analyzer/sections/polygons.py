# dat_analyzer/sections/polygons.py
"""Physics and particle blocker polygon lists."""
from dataclasses import dataclass
from typing import Tuple
import logging

from ..reader import ByteCursor
from ..utils.common_types import PLANE, VEC3, Plane, Vec3
from .base import BaseSection

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Polygon:
    """Convex polygon with its plane."""
    plane: Plane
    vertices: Tuple[Vec3, ...]


@dataclass(frozen=True)
class PolygonList:
    """Polygon section followed by a reserved u32 (always zero so far)."""
    polygons: Tuple[Polygon, ...]
    trailer: int = 0


class PolygonSection(BaseSection):
    """u32 polygon count, polygons {Plane, u32 n, n x Vec3}, u32 trailer."""

    def parse(self) -> PolygonList:
        count = self.cursor.read_u32()
        logger.debug(f"{type(self).__name__}: {count} polygons")
        polygons = self.read_array(count, self.read_polygon, 'polygons')
        trailer = self.cursor.read_u32()
        return PolygonList(polygons, trailer)

    def read_polygon(self, cursor: ByteCursor) -> Polygon:
        plane = cursor.read_struct(PLANE)
        vertices = self.read_counted(lambda c: c.read_struct(VEC3), 'vertices')
        return Polygon(plane, vertices)


class PhysicsSection(PolygonSection):
    """Collision polygons."""


class ParticleBlockerSection(PolygonSection):
    """Particle blocker polygons."""

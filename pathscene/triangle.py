"""Triangle primitive with ray intersection and interpolated normals."""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from .common import FLOAT_EPSILON, float_eps_equal


def _vec3(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)[:3].copy()


class Triangle:
    """A triangle with per-vertex normals, a face index and a material."""

    def __init__(
        self,
        v1: Sequence[float],
        v2: Sequence[float],
        v3: Sequence[float],
        n1: Sequence[float] = (0.0, 0.0, 0.0),
        n2: Sequence[float] = (0.0, 0.0, 0.0),
        n3: Sequence[float] = (0.0, 0.0, 0.0),
        index: int = 0,
        material: Any = None,
    ) -> None:
        self.vertices = (_vec3(v1), _vec3(v2), _vec3(v3))
        self.normals = (_vec3(n1), _vec3(n2), _vec3(n3))
        self.index = index
        self.material = material
        stacked = np.stack(self.vertices)
        self._bbox = (stacked.min(axis=0), stacked.max(axis=0))

    def intersect(
        self, origin: Sequence[float], direction: Sequence[float]
    ) -> Optional[float]:
        """Distance along the ray to the hit point, or None on a miss."""
        o = np.asarray(origin, dtype=np.float64)[:3]
        d = np.asarray(direction, dtype=np.float64)[:3]
        a_v, b_v, c_v = self.vertices
        edge1 = b_v - a_v
        edge2 = c_v - a_v
        h = np.cross(d, edge2)
        a = float(edge1.dot(h))
        if float_eps_equal(a, 0.0):
            return None
        f = 1.0 / a
        s = o - a_v
        u = f * float(s.dot(h))
        if u < 0.0 or u > 1.0:
            return None
        q = np.cross(s, edge1)
        v = f * float(d.dot(q))
        if v < 0.0 or u + v > 1.0:
            return None
        t = f * float(edge2.dot(q))
        return t if t > FLOAT_EPSILON else None

    def normal_at(self, point: Sequence[float]) -> np.ndarray:
        """Unit normal at ``point``, interpolated barycentrically.

        Vertex normals that are zero are replaced by the face normal.
        """
        p = np.asarray(point, dtype=np.float64)[:3]
        a_v, b_v, c_v = self.vertices
        v0 = b_v - a_v
        v1 = c_v - a_v
        v2 = p - a_v
        d00 = v0.dot(v0)
        d01 = v0.dot(v1)
        d11 = v1.dot(v1)
        d20 = v2.dot(v0)
        d21 = v2.dot(v1)
        denom = d00 * d11 - d01 * d01
        v = (d11 * d20 - d01 * d21) / denom
        w = (d00 * d21 - d01 * d20) / denom
        u = 1.0 - v - w

        face = np.cross(v0, v1)
        n1, n2, n3 = (
            face if float_eps_equal(float(n.dot(n)), 0.0) else n for n in self.normals
        )
        interpolated = u * n1 + v * n2 + w * n3
        return interpolated / np.linalg.norm(interpolated)

    def centroid(self) -> np.ndarray:
        """Average of the three vertices."""
        a_v, b_v, c_v = self.vertices
        return (a_v + b_v + c_v) / 3.0

    def bbox(self) -> tuple[np.ndarray, np.ndarray]:
        """Axis-aligned bounding box as (minimum corner, maximum corner)."""
        lo, hi = self._bbox
        return lo.copy(), hi.copy()
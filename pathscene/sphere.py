"""A simple analytic sphere primitive."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np


class Sphere:
    """A sphere given by its centre and radius."""

    def __init__(
        self, center: Sequence[float] = (0.0, 0.0, 0.0), radius: float = 1.0
    ) -> None:
        self.center = np.asarray(center, dtype=np.float64)[:3].copy()
        self.radius = radius

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        self._radius = float(value)
        self._radius_sq = self._radius * self._radius

    def intersect(
        self, origin: Sequence[float], direction: Sequence[float]
    ) -> Optional[float]:
        """Distance to the nearer crossing, or None on a miss.

        ``direction`` is expected to be a unit vector. The ray is assumed to
        start outside the sphere, so the nearer root is always returned.
        """
        o = np.asarray(origin, dtype=np.float64)[:3]
        d = np.asarray(direction, dtype=np.float64)[:3]
        s = self.center - o
        sd = float(s.dot(d))
        ss = float(s.dot(s))
        disc = sd * sd - ss + self._radius_sq
        if disc < 0.0:
            return None
        return sd - math.sqrt(disc)

    def normal_at(self, point: Sequence[float]) -> np.ndarray:
        """Unit outward normal at ``point``."""
        n = np.asarray(point, dtype=np.float64)[:3] - self.center
        return n / np.linalg.norm(n)

    def centroid(self) -> np.ndarray:
        """The sphere's centre."""
        return self.center.copy()

    def bbox(self) -> tuple[np.ndarray, np.ndarray]:
        """Axis-aligned bounding box as (minimum corner, maximum corner)."""
        r = np.full(3, self._radius)
        return self.center - r, self.center + r
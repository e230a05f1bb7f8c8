"""Camera interface and a simple perspective camera."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np


class Camera(ABC):
    """A camera providing view and scale matrices."""

    @abstractmethod
    def view_matrix(self) -> np.ndarray:
        """World-to-camera 4x4 matrix."""

    @abstractmethod
    def scale_matrix(self) -> np.ndarray:
        """4x4 matrix scaling camera space to the view frustum."""


class BasicCamera(Camera):
    """Perspective camera defined by position, look direction and up vector."""

    def __init__(
        self,
        position: Sequence[float],
        direction: Sequence[float],
        up: Sequence[float],
        height_angle: float,
        aspect_ratio: float,
    ) -> None:
        self.position = np.asarray(position, dtype=np.float64)[:3].copy()
        self.direction = np.asarray(direction, dtype=np.float64)[:3].copy()
        self.up = np.asarray(up, dtype=np.float64)[:3].copy()
        self.height_angle = float(height_angle)
        self.aspect_ratio = float(aspect_ratio)

    def view_matrix(self) -> np.ndarray:
        f = self.direction / np.linalg.norm(self.direction)
        u = self.up / np.linalg.norm(self.up)
        s = np.cross(f, u)
        u = np.cross(s, f)
        p = self.position
        return np.array(
            [
                [s[0], s[1], s[2], -s.dot(p)],
                [u[0], u[1], u[2], -u.dot(p)],
                [-f[0], -f[1], -f[2], f.dot(p)],
                [0.0, 0.0, 0.0, 1.0],
            ]
        )

    def scale_matrix(self) -> np.ndarray:
        half_angle = math.pi * self.height_angle / 360.0
        tan_h = math.tan(half_angle)
        tan_w = self.aspect_ratio * tan_h
        scale = np.eye(4)
        scale[0, 0] = 1.0 / tan_w
        scale[1, 1] = 1.0 / tan_h
        return scale
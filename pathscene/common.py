"""Small numeric helpers and a PFM image writer."""

from __future__ import annotations

import sys
from os import PathLike
from typing import Sequence, Union

import numpy as np

FLOAT_EPSILON = 1e-4
DOUBLE_EPSILON = 1e-8


def float_eps_equal(a: float, b: float) -> bool:
    """Whether two floats differ by less than FLOAT_EPSILON."""
    return abs(a - b) < FLOAT_EPSILON


def double_eps_equal(a: float, b: float) -> bool:
    """Whether two doubles differ by less than DOUBLE_EPSILON."""
    return abs(a - b) < DOUBLE_EPSILON


def vec3_to_vec4(v: Sequence[float], w: float) -> np.ndarray:
    """Extend a 3-vector with a fourth component."""
    x, y, z = v
    return np.array([x, y, z, w], dtype=np.float64)


def is_little_endian() -> bool:
    """Whether this machine stores numbers little-endian."""
    return sys.byteorder == "little"


def write_pfm(
    path: Union[str, PathLike],
    width: int,
    height: int,
    intensities: Sequence[Sequence[float]],
    scale: float = 1.0,
) -> None:
    """Write an RGB PFM image; ``intensities`` is row-major, top row first."""
    pixels = np.asarray(intensities, dtype=np.float32).reshape(-1, 3)
    if pixels.shape[0] != width * height:
        raise ValueError(
            f"expected {width * height} pixels, got {pixels.shape[0]}"
        )
    if is_little_endian():
        scale = -scale
    header = f"PF\n{width} {height}\n{scale:g}\n".encode("ascii")
    # PFM rows run from bottom to top.
    body = pixels.reshape(height, width, 3)[::-1].tobytes()
    with open(path, "wb") as fh:
        fh.write(header)
        fh.write(body)
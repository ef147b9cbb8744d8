"""
UV lookups into grayscale displacement maps.

Ink is depth: black texels give intensity 1 (deepest), white texels give 0.
UVs outside [0, 1] are clamped to the nearest edge texel instead of failing.
"""

import numpy as np
from numpy.typing import NDArray

from data_types import DisplacementMap


def texel_indices(uvs: NDArray[np.float64], width: int, height: int) -> tuple[NDArray[np.int64], NDArray[np.int64]]:
    """Nearest texel columns and rows for an N x 2 array of UVs, clamped to the map."""
    # Clamp before rounding so infinite UVs land on the edge texel, NaN reads texel 0
    uvs = np.clip(np.nan_to_num(np.asarray(uvs, dtype=np.float64).reshape(-1, 2), nan=0.0), 0.0, 1.0)
    # floor(t + 0.5) rounds halves up, like Math.round
    x = np.floor(uvs[:, 0] * (width - 1) + 0.5).astype(np.int64)
    y = np.floor(uvs[:, 1] * (height - 1) + 0.5).astype(np.int64)
    return np.minimum(x, width - 1), np.minimum(y, height - 1)


def uv_to_texel(u: float, v: float, width: int, height: int) -> tuple[int, int]:
    """Nearest texel for a UV coordinate, clamped to the map."""
    x, y = texel_indices([[float(u), float(v)]], width, height)
    return int(x[0]), int(y[0])


def sample(displacement_map: DisplacementMap, u: float, v: float) -> float:
    """Displacement intensity in [0, 1] at (u, v)."""
    x, y = uv_to_texel(u, v, displacement_map.width, displacement_map.height)
    gray = displacement_map.pixels[(y * displacement_map.width + x) * 4]
    return float(1.0 - gray / 255.0)


def sample_many(displacement_map: DisplacementMap, uvs: NDArray[np.float32]) -> NDArray[np.float64]:
    """
    Vectorized implementation of sample.

    Args:
        displacement_map: Map to read from
        uvs: N x 2 array of UV coordinates

    Returns:
        NDArray[np.float64]: N intensities in [0, 1]
    """
    width = displacement_map.width
    x, y = texel_indices(uvs, width, displacement_map.height)
    gray = displacement_map.pixels[(y * width + x) * 4]
    return 1.0 - gray / 255.0

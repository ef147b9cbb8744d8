"""
Normal and bounding box utilities for triangle meshes.
"""

import numpy as np
from numpy.typing import NDArray


def calculate_triangle_normals(triangles: NDArray[np.float32]) -> NDArray[np.float32]:
    """
    Unit normal of every triangle by the right-hand rule on its winding.
    Degenerate triangles get a zero normal.

    Args:
        triangles: F x 3 x 3 array of triangle corners in winding order

    Returns:
        NDArray[np.float32]: F x 3 array of unit normals
    """
    triangles = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    normals = np.cross(triangles[:, 1] - triangles[:, 0], triangles[:, 2] - triangles[:, 0])
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    np.divide(normals, lengths, out=normals, where=lengths > 0)
    normals[lengths[:, 0] == 0] = 0.0
    return normals.astype(np.float32)


def calculate_bounds(positions: NDArray[np.float32]) -> NDArray[np.float32]:
    """Axis aligned bounding box as a 2 x 3 array [min corner, max corner]."""
    positions = np.asarray(positions, dtype=np.float32).reshape(-1, 3)
    if len(positions) == 0:
        return np.zeros((2, 3), dtype=np.float32)
    return np.stack([positions.min(axis=0), positions.max(axis=0)])

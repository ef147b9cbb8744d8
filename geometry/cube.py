"""
Subdivided cube construction. Every face is its own vertex lattice so that
engraving has enough vertex density and each face keeps a constant normal.
"""

from types import MappingProxyType

import numpy as np
from numpy.typing import NDArray

from data_types import DieMesh, FaceVertexGroup

GRID_SUBDIVISIONS = 16
CUBE_SIZE = 2.0

# (normal, up, right) per face, ordered front, back, top, bottom, right, left.
# right x up == normal for every face, so (i0, i1, i2), (i0, i2, i3) winds outward.
CUBE_FACES = (
    ((0, 0, 1), (0, 1, 0), (1, 0, 0)),
    ((0, 0, -1), (0, 1, 0), (-1, 0, 0)),
    ((0, 1, 0), (0, 0, -1), (1, 0, 0)),
    ((0, -1, 0), (0, 0, 1), (1, 0, 0)),
    ((1, 0, 0), (0, 1, 0), (0, 0, -1)),
    ((-1, 0, 0), (0, 1, 0), (0, 0, 1)),
)


def build_face_lattice(normal, up, right, grid: int, size: float = CUBE_SIZE):
    """
    Build the (grid + 1) x (grid + 1) vertex lattice of a single cube face.

    Vertices are generated row-major: iy is the outer loop, ix the inner one.

    Returns:
        tuple: (positions (N x 3), normals (N x 3), uvs (N x 2))
    """
    half = size / 2
    normal = np.asarray(normal, dtype=np.float64)
    up = np.asarray(up, dtype=np.float64)
    right = np.asarray(right, dtype=np.float64)

    steps = np.arange(grid + 1) / grid
    v, u = np.meshgrid(steps, steps, indexing="ij")
    u = u.reshape(-1)
    v = v.reshape(-1)
    local_x = -half + u * size
    local_y = -half + v * size

    positions = normal * half + local_x[:, None] * right + local_y[:, None] * up
    normals = np.tile(normal, (len(positions), 1))
    uvs = np.stack([u, v], axis=1)
    return positions, normals, uvs


def build_lattice_indices(grid: int, base: int = 0) -> NDArray[np.uint32]:
    """Two triangles per lattice quad, (i0, i1, i2) then (i0, i2, i3)."""
    row = grid + 1
    iy, ix = np.meshgrid(np.arange(grid), np.arange(grid), indexing="ij")
    i0 = base + iy * row + ix
    i1 = base + iy * row + ix + 1
    i2 = base + (iy + 1) * row + ix + 1
    i3 = base + (iy + 1) * row + ix
    quads = np.stack([i0, i1, i2, i0, i2, i3], axis=-1).reshape(-1)
    return quads.astype(np.uint32)


def build_subdivided_cube(grid: int = GRID_SUBDIVISIONS, size: float = CUBE_SIZE) -> tuple[DieMesh, FaceVertexGroup]:
    """
    Build the six-faced die as independent subdivided face grids.

    Args:
        grid: Number of quads along each face edge
        size: Edge length of the cube

    Returns:
        tuple: (DieMesh, FaceVertexGroup mapping face index -> vertex indices)
    """
    if isinstance(grid, bool) or not isinstance(grid, (int, np.integer)) or grid < 1:
        raise ValueError(f"grid must be a positive integer, got {grid!r}")

    vertices_per_face = (grid + 1) ** 2
    all_positions, all_normals, all_uvs, all_indices = [], [], [], []
    face_vertex_indices = {}

    for face_index, (normal, up, right) in enumerate(CUBE_FACES):
        positions, normals, uvs = build_face_lattice(normal, up, right, grid, size)
        base = face_index * vertices_per_face
        all_positions.append(positions)
        all_normals.append(normals)
        all_uvs.append(uvs)
        all_indices.append(build_lattice_indices(grid, base))
        face_vertex_indices[face_index] = tuple(range(base, base + vertices_per_face))

    mesh = DieMesh(
        positions=np.concatenate(all_positions),
        normals=np.concatenate(all_normals),
        uvs=np.concatenate(all_uvs),
        indices=np.concatenate(all_indices),
    )
    return mesh, MappingProxyType(face_vertex_indices)

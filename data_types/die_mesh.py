from dataclasses import dataclass, field
from typing import Mapping, Optional

import numpy as np
from numpy.typing import NDArray
import trimesh

from .normals import calculate_bounds, calculate_triangle_normals


@dataclass(eq=False)
class DieMesh:
    positions: NDArray[np.float32]  # V x 3 array of vertex coordinates
    normals: Optional[NDArray[np.float32]]  # V x 3 array, one (flat, per face) normal per vertex
    uvs: Optional[NDArray[np.float32]]  # V x 2 array of texture coordinates in [0, 1]
    indices: Optional[NDArray[np.uint32]] = None  # 3F array of vertex *indices*, each triple a CCW triangle
    face_normals: NDArray[np.float32] = field(init=False, repr=False)  # F x 3 array of triangle normals
    bounds: NDArray[np.float32] = field(init=False, repr=False)  # 2 x 3 array, [min corner, max corner]

    def __post_init__(self):
        if self.positions is not None:
            self.positions = np.asarray(self.positions, dtype=np.float32).reshape(-1, 3)
        if self.normals is not None:
            self.normals = np.asarray(self.normals, dtype=np.float32).reshape(-1, 3)
        if self.uvs is not None:
            self.uvs = np.asarray(self.uvs, dtype=np.float32).reshape(-1, 2)
        if self.indices is not None:
            self.indices = np.asarray(self.indices, dtype=np.uint32).reshape(-1)
        self.validate()
        self.refresh()

    @property
    def vertex_count(self) -> int:
        return 0 if self.positions is None else len(self.positions)

    @property
    def triangle_count(self) -> int:
        """Number of triangles, falling back to triangle-ordered positions when there is no index buffer."""
        if self.indices is not None:
            return len(self.indices) // 3
        return self.vertex_count // 3

    def triangle_indices(self) -> NDArray[np.int64]:
        """F x 3 array of vertex indices in winding order."""
        if self.indices is not None:
            return self.indices.astype(np.int64).reshape(-1, 3)
        return np.arange(self.triangle_count * 3, dtype=np.int64).reshape(-1, 3)

    def triangles(self) -> NDArray[np.float32]:
        """F x 3 x 3 array of triangle corner positions in winding order."""
        return self.positions[self.triangle_indices()]

    def validate(self):
        if self.positions is None:
            return
        vertex_count = len(self.positions)
        for name in ("normals", "uvs"):
            attribute = getattr(self, name)
            if attribute is not None and len(attribute) != vertex_count:
                raise ValueError(f"{name} has {len(attribute)} entries, expected {vertex_count}")
        if self.indices is not None:
            if len(self.indices) % 3 != 0:
                raise ValueError(f"Index buffer length {len(self.indices)} is not a multiple of 3")
            if len(self.indices) and self.indices.max() >= vertex_count:
                raise ValueError(f"Index {self.indices.max()} out of range for {vertex_count} vertices")

    def refresh(self):
        """Recompute the bounding box and the per-triangle normals from the current positions."""
        if self.positions is None:
            self.face_normals = np.zeros((0, 3), dtype=np.float32)
            self.bounds = np.zeros((2, 3), dtype=np.float32)
            return
        self.face_normals = calculate_triangle_normals(self.triangles())
        self.bounds = calculate_bounds(self.positions)

    def copy(self) -> "DieMesh":
        return DieMesh(
            positions=None if self.positions is None else self.positions.copy(),
            normals=None if self.normals is None else self.normals.copy(),
            uvs=None if self.uvs is None else self.uvs.copy(),
            indices=None if self.indices is None else self.indices.copy(),
        )

    def flat_shaded(self) -> "DieMesh":
        """
        Return an un-indexed copy in which every triangle owns its three vertices
        and every vertex normal is the triangle's recomputed normal.
        """
        triangle_indices = self.triangle_indices()
        flat_indices = triangle_indices.reshape(-1)
        return DieMesh(
            positions=self.positions[flat_indices].copy(),
            normals=np.repeat(self.face_normals, 3, axis=0),
            uvs=None if self.uvs is None else self.uvs[flat_indices].copy(),
            indices=None,
        )

    def to_trimesh(self) -> trimesh.Trimesh:
        return trimesh.Trimesh(
            vertices=self.positions.astype(np.float64),
            faces=self.triangle_indices(),
            process=False,
        )


# Face index -> vertex indices of that face, in generation (row-major) order
FaceVertexGroup = Mapping[int, tuple[int, ...]]

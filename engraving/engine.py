"""
Geometric engraving of displacement maps into die faces.
"""

import logging
import math
from typing import Optional

import numpy as np

from data_types import DieMesh, DisplacementMap, EngravingRequest, FaceVertexGroup, InvalidFaceIndex
from displacement import sample_many

logger = logging.getLogger(__name__)

DEFAULT_STRENGTH = 0.3


def get_face_vertex_indices(face_group: Optional[FaceVertexGroup], face_index: int) -> tuple[int, ...]:
    """Vertex indices of a face, or InvalidFaceIndex when the die has no such face group."""
    if face_group is None:
        raise InvalidFaceIndex(face_index)
    if face_index not in face_group:
        raise InvalidFaceIndex(face_index, sorted(face_group))
    return face_group[face_index]


def apply_engraving(
    mesh: DieMesh,
    face_group: Optional[FaceVertexGroup],
    face_index: int,
    displacement_map: DisplacementMap,
    strength: float = DEFAULT_STRENGTH,
) -> DieMesh:
    """
    Displace the vertices of one face along their stored normals.

    Each vertex moves by sample(map, uv) * strength, so black texels move a
    vertex by the full strength and white texels leave it in place. The stored
    per-vertex normal is used, which keeps the direction uniform over a flat
    face. Offsets add to the current positions: engraving the same face twice
    doubles the depth.

    The mesh is modified in place, its bounds and triangle normals are
    recomputed, and it is returned for chaining.

    Args:
        mesh: Mesh to modify
        face_group: Face vertex groups built with the mesh (None for coarse dice)
        face_index: Face to engrave
        displacement_map: Grayscale map sampled at each vertex UV
        strength: Maximum displacement in mesh units

    Returns:
        DieMesh: The same mesh object
    """
    vertex_indices = np.asarray(get_face_vertex_indices(face_group, face_index), dtype=np.int64)
    if not math.isfinite(strength) or strength < 0:
        raise ValueError(f"Engraving strength must be a non-negative number, got {strength}")
    if mesh.normals is None or mesh.uvs is None:
        raise ValueError("Engraving needs per-vertex normals and UVs")
    if len(vertex_indices) == 0:
        return mesh

    intensities = sample_many(displacement_map, mesh.uvs[vertex_indices])
    offsets = (intensities * strength).astype(np.float32)
    mesh.positions[vertex_indices] += mesh.normals[vertex_indices] * offsets[:, None]

    logger.info("Modified %d vertices on face %d with average displacement: %.3f",
                len(vertex_indices), face_index, float(offsets.mean()))

    mesh.refresh()
    return mesh


def apply_engraving_request(mesh: DieMesh, face_group: Optional[FaceVertexGroup], request: EngravingRequest) -> DieMesh:
    return apply_engraving(mesh, face_group, request.face_index, request.source, request.strength)

"""
Coarse solids for the non-cube dice. These are used as-is: no subdivision and
no per-face vertex groups, so they cannot be engraved.
"""

import numpy as np
from numpy.typing import NDArray
import trimesh

from data_types import DiceType, DieMesh

CIRCUMSCRIBED_RADIUS = 1.5
PHI = (1 + np.sqrt(5)) / 2


def tetrahedron_vertices() -> NDArray[np.float64]:
    return np.array([
        [1, 1, 1],
        [1, -1, -1],
        [-1, 1, -1],
        [-1, -1, 1],
    ], dtype=float)


def octahedron_vertices() -> NDArray[np.float64]:
    return np.array([
        [1, 0, 0], [-1, 0, 0],
        [0, 1, 0], [0, -1, 0],
        [0, 0, 1], [0, 0, -1],
    ], dtype=float)


def trapezohedron_vertices(sides: int = 5) -> NDArray[np.float64]:
    """
    Vertices of an n-gonal trapezohedron (the classic d10 for n = 5).

    Two apexes on the z axis and a zig-zag ring of 2n vertices. The apex height
    is chosen so that every kite face is planar.
    """
    ring_height = 0.1
    cos_step = np.cos(np.pi / sides)
    apex_height = ring_height * (1 + cos_step) / (1 - cos_step)

    angles = np.arange(2 * sides) * np.pi / sides
    ring_z = np.where(np.arange(2 * sides) % 2 == 0, ring_height, -ring_height)
    ring = np.stack([np.cos(angles), np.sin(angles), ring_z], axis=1)
    apexes = np.array([[0, 0, apex_height], [0, 0, -apex_height]])
    return np.concatenate([apexes, ring])


def dodecahedron_vertices() -> NDArray[np.float64]:
    vertices = [[x, y, z] for x in (-1, 1) for y in (-1, 1) for z in (-1, 1)]
    for a in (-1 / PHI, 1 / PHI):
        for b in (-PHI, PHI):
            vertices.append([0, a, b])
            vertices.append([a, b, 0])
            vertices.append([b, 0, a])
    return np.array(vertices, dtype=float)


def icosahedron_vertices() -> NDArray[np.float64]:
    vertices = []
    for a in (-1, 1):
        for b in (-PHI, PHI):
            vertices.append([0, a, b])
            vertices.append([a, b, 0])
            vertices.append([b, 0, a])
    return np.array(vertices, dtype=float)


SOLID_VERTICES = {
    DiceType.D4: tetrahedron_vertices,
    DiceType.D8: octahedron_vertices,
    DiceType.D10: trapezohedron_vertices,
    DiceType.D12: dodecahedron_vertices,
    DiceType.D20: icosahedron_vertices,
}


def build_solid_trimesh(vertices: NDArray[np.float64], radius: float = CIRCUMSCRIBED_RADIUS) -> trimesh.Trimesh:
    """Triangulated convex hull of the given points, centred and scaled to the circumscribed radius."""
    vertices = np.asarray(vertices, dtype=float)
    vertices = vertices - vertices.mean(axis=0)
    vertices *= radius / np.linalg.norm(vertices, axis=1).max()
    # convex_hull returns consistently wound, outward facing triangles
    return trimesh.convex.convex_hull(vertices)


def build_polyhedron(dice_type: DiceType, radius: float = CIRCUMSCRIBED_RADIUS) -> DieMesh:
    """
    Build a flat shaded, un-indexed mesh of a coarse die.

    Every triangle owns its three vertices, carries its face normal on each
    of them and gets the UV corners (0, 0), (1, 0), (0, 1).
    """
    if dice_type not in SOLID_VERTICES:
        raise ValueError(f"No coarse solid for {dice_type}")

    solid = build_solid_trimesh(SOLID_VERTICES[dice_type](), radius)
    faces = np.asarray(solid.faces)
    positions = np.asarray(solid.vertices)[faces].reshape(-1, 3)
    normals = np.repeat(np.asarray(solid.face_normals), 3, axis=0)
    uvs = np.tile([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], (len(faces), 1))
    return DieMesh(positions=positions, normals=normals, uvs=uvs, indices=np.arange(len(positions)))

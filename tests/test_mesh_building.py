"""
Tests for building the base meshes of every die type.
"""

import os
import sys
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the project packages
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import DiceType, DieMesh, UnsupportedDiceType, calculate_bounds, calculate_triangle_normals
from geometry import (
    CIRCUMSCRIBED_RADIUS,
    CUBE_FACES,
    build_mesh,
    build_subdivided_cube,
    parse_dice_type,
    resolution_multiplier,
)

EXPECTED_TRIANGLES = {
    DiceType.D4: 4,
    DiceType.D8: 8,
    DiceType.D10: 20,
    DiceType.D12: 36,
    DiceType.D20: 20,
}


@pytest.mark.parametrize("dice_type", list(DiceType))
def test_index_buffer_is_valid(dice_type):
    """Every die has whole triangles and in-range indices."""
    mesh, _ = build_mesh(dice_type, grid=4)
    assert len(mesh.indices) % 3 == 0
    assert mesh.indices.max() < mesh.vertex_count
    assert len(mesh.positions) == len(mesh.normals) == len(mesh.uvs)


@pytest.mark.parametrize("grid", [1, 2, 16])
def test_cube_counts(grid):
    mesh, face_group = build_subdivided_cube(grid)
    vertices_per_face = (grid + 1) ** 2

    assert mesh.vertex_count == 6 * vertices_per_face
    assert mesh.triangle_count == 6 * 2 * grid ** 2
    assert sorted(face_group) == [0, 1, 2, 3, 4, 5]
    for face_index in range(6):
        assert len(face_group[face_index]) == vertices_per_face


def test_cube_faces_are_flat_and_outward():
    """Each face lies on its plane, carries its normal, and winds outward."""
    mesh, face_group = build_subdivided_cube(4)

    for face_index, (normal, _, _) in enumerate(CUBE_FACES):
        vertex_indices = np.array(face_group[face_index])
        assert np.allclose(mesh.positions[vertex_indices] @ np.array(normal), 1.0)
        assert np.allclose(mesh.normals[vertex_indices], normal)

    # The normal of every triangle agrees with the stored normal of its corners
    first_corners = mesh.triangle_indices()[:, 0]
    assert np.allclose(mesh.face_normals, mesh.normals[first_corners])


def test_cube_uvs_and_generation_order():
    grid = 2
    mesh, face_group = build_subdivided_cube(grid)
    front = np.array(face_group[0])

    assert list(front) == list(range(9))
    expected_uvs = np.array([[ix / grid, iy / grid] for iy in range(grid + 1) for ix in range(grid + 1)])
    assert np.allclose(mesh.uvs[front], expected_uvs)
    # uv (0, 0) is the bottom left corner of the front face, uv (1, 1) the top right
    assert np.allclose(mesh.positions[front[0]], [-1.0, -1.0, 1.0])
    assert np.allclose(mesh.positions[front[-1]], [1.0, 1.0, 1.0])
    assert np.allclose(mesh.positions[front[4]], [0.0, 0.0, 1.0])


def test_cube_bounds():
    mesh, _ = build_subdivided_cube(3)
    assert np.allclose(mesh.bounds, [[-1, -1, -1], [1, 1, 1]])


def test_face_group_is_read_only():
    _, face_group = build_subdivided_cube(2)
    with pytest.raises(TypeError):
        face_group[0] = (1, 2, 3)
    assert isinstance(face_group[0], tuple)


def test_cube_rejects_invalid_grid():
    with pytest.raises(ValueError):
        build_subdivided_cube(0)
    with pytest.raises(ValueError):
        build_subdivided_cube(2.5)


@pytest.mark.parametrize("dice_type", list(EXPECTED_TRIANGLES))
def test_coarse_solids(dice_type):
    """Coarse dice are closed, outward facing, unsubdivided and not engravable."""
    mesh, face_group = build_mesh(dice_type)

    assert face_group is None
    assert mesh.triangle_count == EXPECTED_TRIANGLES[dice_type]
    # Flat shaded: every triangle owns its corners
    assert mesh.vertex_count == 3 * mesh.triangle_count

    radii = np.linalg.norm(mesh.positions, axis=1)
    assert np.isclose(radii.max(), CIRCUMSCRIBED_RADIUS, atol=1e-5)

    centroids = mesh.triangles().mean(axis=1)
    assert np.all(np.einsum('ij,ij->i', mesh.face_normals, centroids) > 0)
    assert np.allclose(mesh.normals.reshape(-1, 3, 3), mesh.face_normals[:, None, :], atol=1e-5)

    solid = mesh.to_trimesh()
    solid.merge_vertices()
    assert solid.is_watertight
    assert solid.volume > 0


def test_regular_solids_are_inscribed_in_sphere():
    for dice_type in (DiceType.D4, DiceType.D8, DiceType.D12, DiceType.D20):
        mesh, _ = build_mesh(dice_type)
        radii = np.linalg.norm(mesh.positions, axis=1)
        assert np.allclose(radii, CIRCUMSCRIBED_RADIUS, atol=1e-5)


def test_unknown_type_falls_back_to_cube():
    with pytest.warns(UnsupportedDiceType):
        mesh, face_group = build_mesh("D7", grid=2)
    assert face_group is not None
    assert mesh.triangle_count == 6 * 2 * 2 ** 2

    with pytest.warns(UnsupportedDiceType):
        _, face_group = build_mesh(None, grid=2)
    assert len(face_group) == 6


def test_builds_are_independent():
    mesh_a, _ = build_mesh(DiceType.D6, grid=2)
    mesh_b, _ = build_mesh(DiceType.D6, grid=2)
    mesh_a.positions[0] += 10
    assert not np.allclose(mesh_a.positions[0], mesh_b.positions[0])


def test_parse_dice_type():
    assert parse_dice_type("D20") is DiceType.D20
    assert parse_dice_type("d8") is DiceType.D8
    assert parse_dice_type("12") is DiceType.D12
    assert parse_dice_type(4) is DiceType.D4
    assert parse_dice_type(DiceType.D10) is DiceType.D10
    assert parse_dice_type("D3") is None
    assert parse_dice_type(True) is None


def test_resolution_multiplier():
    assert resolution_multiplier("low") == 1
    assert resolution_multiplier("medium") == 2
    assert resolution_multiplier("high") == 4
    assert resolution_multiplier("ultra") == 1


def test_die_mesh_validation():
    positions = np.zeros((4, 3))
    with pytest.raises(ValueError):
        DieMesh(positions=positions, normals=np.zeros((3, 3)), uvs=None)
    with pytest.raises(ValueError):
        DieMesh(positions=positions, normals=None, uvs=None, indices=[0, 1, 4])
    with pytest.raises(ValueError):
        DieMesh(positions=positions, normals=None, uvs=None, indices=[0, 1])


def test_flat_shaded_copy():
    mesh, _ = build_subdivided_cube(2)
    flat = mesh.flat_shaded()

    assert flat.indices is None
    assert flat.triangle_count == mesh.triangle_count
    assert np.allclose(flat.triangles(), mesh.triangles())
    assert np.allclose(flat.normals.reshape(-1, 3, 3), mesh.face_normals[:, None, :])
    # The source mesh keeps its buffers
    flat.positions += 1
    assert np.allclose(mesh.bounds, [[-1, -1, -1], [1, 1, 1]])


def test_refresh_tracks_moved_positions():
    mesh = DieMesh(positions=[[0, 0, 0], [1, 0, 0], [0, 1, 0]], normals=None, uvs=None)
    assert np.array_equal(mesh.face_normals, [[0, 0, 1]])

    mesh.positions[2] = [0, 0, 1]
    mesh.refresh()

    assert np.array_equal(mesh.face_normals, calculate_triangle_normals(mesh.triangles()))
    assert np.array_equal(mesh.face_normals, [[0, -1, 0]])
    assert np.array_equal(mesh.bounds, calculate_bounds(mesh.positions))
    assert np.array_equal(mesh.bounds, [[0, 0, 0], [1, 0, 1]])

"""
Tests for engraving displacement maps into die faces.
"""

import os
import sys
import numpy as np
import pytest

# Add the parent directory to the Python path so we can import the project packages
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from data_types import DiceType, EngravingRequest, InvalidFaceIndex
from displacement import map_from_gray, radial_gradient_map, uniform_map
from engraving import apply_engraving, apply_engraving_request
from geometry import build_mesh, build_subdivided_cube


def create_center_dot_map():
    """3 x 3 white map with a single black texel in the middle."""
    gray = np.full((3, 3), 255, dtype=np.uint8)
    gray[1, 1] = 0
    return map_from_gray(gray)


def other_face_indices(face_group, face_index):
    return np.array([idx for face, indices in face_group.items() if face != face_index for idx in indices])


def test_center_dot_scenario():
    """Only the vertex at uv (0.5, 0.5) of face 0 moves, by the strength, along +z."""
    mesh, face_group = build_subdivided_cube(2)
    original = mesh.positions.copy()

    apply_engraving(mesh, face_group, 0, create_center_dot_map(), 0.5)

    front = np.array(face_group[0])
    center = front[np.argmin(np.linalg.norm(mesh.uvs[front] - [0.5, 0.5], axis=1))]
    assert np.allclose(mesh.positions[center] - original[center], [0.0, 0.0, 0.5])

    moved = np.flatnonzero(np.any(mesh.positions != original, axis=1))
    assert list(moved) == [center]


def test_zero_strength_is_a_no_op():
    mesh, face_group = build_subdivided_cube(4)
    original = mesh.positions.copy()

    apply_engraving(mesh, face_group, 2, uniform_map(0, 16, 16), 0.0)

    assert np.array_equal(mesh.positions, original)


def test_white_map_leaves_positions_unchanged():
    mesh, face_group = build_subdivided_cube(4)
    original = mesh.positions.copy()

    apply_engraving(mesh, face_group, 1, uniform_map(255, 16, 16), 0.8)

    assert np.array_equal(mesh.positions, original)


@pytest.mark.parametrize("face_index", range(6))
def test_black_map_offsets_whole_face(face_index):
    mesh, face_group = build_subdivided_cube(4)
    original = mesh.positions.copy()
    strength = 0.25

    apply_engraving(mesh, face_group, face_index, uniform_map(0, 16, 16), strength)

    face = np.array(face_group[face_index])
    expected = original[face] + mesh.normals[face] * strength
    assert np.allclose(mesh.positions[face], expected)

    others = other_face_indices(face_group, face_index)
    assert np.array_equal(mesh.positions[others], original[others])


def test_engraving_is_additive():
    mesh, face_group = build_subdivided_cube(2)
    black = uniform_map(0, 4, 4)

    apply_engraving(mesh, face_group, 0, black, 0.5)
    apply_engraving(mesh, face_group, 0, black, 0.5)

    front = np.array(face_group[0])
    assert np.allclose(mesh.positions[front, 2], 2.0)


def test_gradient_depth_varies_across_face():
    mesh, face_group = build_subdivided_cube(8)
    original = mesh.positions.copy()

    apply_engraving(mesh, face_group, 0, radial_gradient_map(64, 64), 0.3)

    front = np.array(face_group[0])
    depth = mesh.positions[front, 2] - original[front, 2]
    center = front[np.argmin(np.linalg.norm(mesh.uvs[front] - [0.5, 0.5], axis=1))]
    corner = front[0]
    assert depth.max() <= 0.3 + 1e-6
    assert mesh.positions[center, 2] - original[center, 2] < mesh.positions[corner, 2] - original[corner, 2]
    # Offsets only ever follow the face normal
    assert np.allclose(mesh.positions[front, :2], original[front, :2])


def test_bounds_and_triangle_normals_are_refreshed():
    mesh, face_group = build_subdivided_cube(2)
    normals_before = mesh.face_normals.copy()

    apply_engraving(mesh, face_group, 0, create_center_dot_map(), 0.5)

    assert np.isclose(mesh.bounds[1, 2], 1.5)
    assert not np.allclose(mesh.face_normals, normals_before)
    # Stored vertex normals stay the flat face normal
    assert np.allclose(mesh.normals[np.array(face_group[0])], [0, 0, 1])


def test_invalid_face_index():
    mesh, face_group = build_subdivided_cube(2)
    original = mesh.positions.copy()

    with pytest.raises(InvalidFaceIndex):
        apply_engraving(mesh, face_group, 6, uniform_map(0, 4, 4), 0.5)
    with pytest.raises(InvalidFaceIndex):
        apply_engraving(mesh, face_group, -1, uniform_map(0, 4, 4), 0.5)
    assert np.array_equal(mesh.positions, original)


@pytest.mark.parametrize("dice_type", [DiceType.D4, DiceType.D8, DiceType.D10, DiceType.D12, DiceType.D20])
def test_coarse_dice_cannot_be_engraved(dice_type):
    mesh, face_group = build_mesh(dice_type)
    with pytest.raises(InvalidFaceIndex):
        apply_engraving(mesh, face_group, 0, uniform_map(0, 4, 4), 0.5)


def test_negative_strength_is_rejected():
    mesh, face_group = build_subdivided_cube(2)
    with pytest.raises(ValueError):
        apply_engraving(mesh, face_group, 0, uniform_map(0, 4, 4), -0.1)


def test_engraving_request():
    mesh, face_group = build_subdivided_cube(2)
    request = EngravingRequest(face_index=3, strength=0.5, source=uniform_map(0, 4, 4))

    result = apply_engraving_request(mesh, face_group, request)

    assert result is mesh
    assert np.allclose(mesh.positions[np.array(face_group[3]), 1], -1.5)


def test_engraving_request_validation():
    source = uniform_map(0, 4, 4)
    with pytest.raises(ValueError):
        EngravingRequest(face_index=0, strength=0.0, source=source)
    with pytest.raises(ValueError):
        EngravingRequest(face_index=0, strength=float("nan"), source=source)
    with pytest.raises(TypeError):
        EngravingRequest(face_index=0.5, strength=0.1, source=source)
    with pytest.raises(TypeError):
        EngravingRequest(face_index=0, strength=0.1, source=np.zeros(64, dtype=np.uint8))

import logging
import warnings
from typing import Optional, Union

from data_types import DiceType, DieMesh, FaceVertexGroup, UnsupportedDiceType

from .cube import GRID_SUBDIVISIONS, build_subdivided_cube
from .polyhedra import build_polyhedron

logger = logging.getLogger(__name__)

RESOLUTION_MULTIPLIERS = {
    "low": 1,
    "medium": 2,
    "high": 4,
}


def resolution_multiplier(resolution: str) -> int:
    """Subdivision multiplier for an export resolution. Unknown resolutions map to 1."""
    return RESOLUTION_MULTIPLIERS.get(resolution, 1)


def parse_dice_type(dice_type: Union[DiceType, str, int, None]) -> Optional[DiceType]:
    """Resolve 'D6', 'd6', 6 or DiceType.D6 to a DiceType. Returns None when unrecognized."""
    if isinstance(dice_type, DiceType):
        return dice_type
    if isinstance(dice_type, str):
        name = dice_type.strip().upper()
        if not name.startswith("D"):
            name = f"D{name}"
        return DiceType.__members__.get(name)
    if isinstance(dice_type, int) and not isinstance(dice_type, bool):
        try:
            return DiceType(dice_type)
        except ValueError:
            return None
    return None


def build_mesh(dice_type: Union[DiceType, str, int, None], grid: int = GRID_SUBDIVISIONS) -> tuple[DieMesh, Optional[FaceVertexGroup]]:
    """
    Build the base mesh for a die.

    The cube is built from subdivided face grids and comes with its face vertex
    groups. Every other die is a coarse solid without face vertex groups.
    Unrecognized dice fall back to the cube.

    Args:
        dice_type: DiceType member, or its name / face count
        grid: Subdivisions per cube face edge, ignored by the other dice

    Returns:
        tuple: (DieMesh, FaceVertexGroup or None)
    """
    resolved = parse_dice_type(dice_type)
    if resolved is None:
        message = f"Unsupported dice type {dice_type!r}, building a D6 instead"
        logger.warning(message)
        warnings.warn(message, UnsupportedDiceType, stacklevel=2)
        resolved = DiceType.D6

    if resolved is DiceType.D6:
        mesh, face_group = build_subdivided_cube(grid)
        logger.debug("Built %s with grid %d: %d vertices, %d triangles",
                     resolved.solid_name, grid, mesh.vertex_count, mesh.triangle_count)
        return mesh, face_group

    mesh = build_polyhedron(resolved)
    logger.debug("Built %s: %d triangles", resolved.solid_name, mesh.triangle_count)
    return mesh, None

from .builder import build_mesh, parse_dice_type, resolution_multiplier
from .cube import CUBE_FACES, CUBE_SIZE, GRID_SUBDIVISIONS, build_subdivided_cube
from .polyhedra import CIRCUMSCRIBED_RADIUS, build_polyhedron

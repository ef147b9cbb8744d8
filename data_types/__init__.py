from .die_mesh import DieMesh, FaceVertexGroup
from .displacement_map import DisplacementMap
from .options import DiceType, EngravingRequest, ExportOptions, RESOLUTIONS, SOLID_NAMES
from .errors import DiceEngraverError, InvalidFaceIndex, MissingVertexData, UnreadableImage, UnsupportedDiceType
from .normals import calculate_bounds, calculate_triangle_normals

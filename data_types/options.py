from dataclasses import dataclass
from enum import Enum
import math
import numbers

from .displacement_map import DisplacementMap


class DiceType(Enum):
    """Supported dice, valued by their face count."""

    D4 = 4
    D6 = 6
    D8 = 8
    D10 = 10
    D12 = 12
    D20 = 20

    @property
    def faces(self) -> int:
        return self.value

    @property
    def solid_name(self) -> str:
        return SOLID_NAMES[self]


SOLID_NAMES = {
    DiceType.D4: "Tetrahedron",
    DiceType.D6: "Cube",
    DiceType.D8: "Octahedron",
    DiceType.D10: "Decahedron",
    DiceType.D12: "Dodecahedron",
    DiceType.D20: "Icosahedron",
}

RESOLUTIONS = ("low", "medium", "high")


@dataclass
class EngravingRequest:
    face_index: int
    strength: float  # maximum displacement in mesh units
    source: DisplacementMap

    def __post_init__(self):
        if isinstance(self.face_index, bool) or not isinstance(self.face_index, numbers.Integral):
            raise TypeError(f"face_index must be an integer, got {self.face_index!r}")
        if not math.isfinite(self.strength) or self.strength <= 0:
            raise ValueError(f"Engraving strength must be a positive number, got {self.strength}")
        if not isinstance(self.source, DisplacementMap):
            raise TypeError(f"source must be a DisplacementMap, got {type(self.source).__name__}")


@dataclass
class ExportOptions:
    resolution: str = "medium"  # caller-side subdivision density, ignored by the serializer
    binary: bool = True
    include_displacement: bool = True

    def __post_init__(self):
        if self.resolution not in RESOLUTIONS:
            raise ValueError(f"resolution must be one of {RESOLUTIONS}, got {self.resolution!r}")

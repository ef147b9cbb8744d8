from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True, eq=False)
class DisplacementMap:
    width: int
    height: int
    pixels: NDArray[np.uint8]  # width * height * 4 RGBA bytes, row-major, grayscale so R == G == B

    def __post_init__(self):
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(f"Displacement map size must be positive, got {self.width}x{self.height}")
        pixels = np.frombuffer(np.asarray(self.pixels, dtype=np.uint8).tobytes(), dtype=np.uint8)
        expected = int(self.width) * int(self.height) * 4
        if pixels.size != expected:
            raise ValueError(f"Expected {expected} RGBA bytes for a {self.width}x{self.height} map, got {pixels.size}")
        # frombuffer over an immutable bytes object gives a read-only view
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "pixels", pixels)

    @property
    def red(self) -> NDArray[np.uint8]:
        """height x width array of the red channel."""
        return self.pixels.reshape(self.height, self.width, 4)[:, :, 0]

class DiceEngraverError(Exception):
    """Base class for errors reported to the user."""


class InvalidFaceIndex(DiceEngraverError, IndexError):
    """The requested face does not exist, or the die has no per-face vertex groups."""

    def __init__(self, face_index, valid_faces=()):
        self.face_index = face_index
        self.valid_faces = tuple(valid_faces)
        if self.valid_faces:
            message = f"Invalid face index {face_index}, expected one of {list(self.valid_faces)}"
        else:
            message = f"Invalid face index {face_index}, this die does not support engraving"
        super().__init__(message)


class MissingVertexData(DiceEngraverError, ValueError):
    """The mesh has no position buffer to serialize."""


class UnsupportedDiceType(UserWarning):
    """Unknown die type, the cube is built instead."""


class UnreadableImage(DiceEngraverError, ValueError):
    """The image file could not be decoded."""

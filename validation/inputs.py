import mimetypes
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from data_types import DiceType

TEXT_MAX_LENGTH = 2
FILE_MAX_SIZE = 2 * 1024 * 1024  # 2MB
ALLOWED_IMAGE_TYPES = ("image/png",)

ALPHANUMERIC = re.compile(r"^[a-zA-Z0-9]+$")


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


def validate_text_input(text: str) -> ValidationResult:
    errors = []

    if len(text) > TEXT_MAX_LENGTH:
        errors.append(f"Text must be {TEXT_MAX_LENGTH} characters or less")

    if len(text) == 0:
        errors.append("Text cannot be empty")

    if not ALPHANUMERIC.match(text):
        errors.append("Text can only contain letters and numbers")

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_image_file(filepath: Union[str, Path]) -> ValidationResult:
    """Check that an image is a PNG file of at most 2MB."""
    filepath = Path(filepath)
    errors = []

    content_type, _ = mimetypes.guess_type(filepath.name)
    if content_type not in ALLOWED_IMAGE_TYPES:
        errors.append("Only PNG files are allowed")

    if not filepath.is_file():
        errors.append(f"The file {filepath} does not exist")
    elif filepath.stat().st_size > FILE_MAX_SIZE:
        errors.append(f"File size must be {FILE_MAX_SIZE // (1024 * 1024)}MB or less")

    return ValidationResult(is_valid=not errors, errors=errors)


def validate_dice_type(dice_type: str) -> ValidationResult:
    valid_types = list(DiceType.__members__)
    if dice_type in valid_types:
        return ValidationResult(is_valid=True)
    return ValidationResult(is_valid=False, errors=["Invalid dice type"])

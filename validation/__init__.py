from .inputs import (
    ALLOWED_IMAGE_TYPES,
    FILE_MAX_SIZE,
    TEXT_MAX_LENGTH,
    ValidationResult,
    validate_dice_type,
    validate_image_file,
    validate_text_input,
)

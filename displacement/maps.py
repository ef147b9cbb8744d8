"""
Producers of grayscale displacement maps.

Every producer returns an immutable DisplacementMap whose RGBA pixels are
grayscale. Dark pixels engrave deep, white pixels are left untouched.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

import numpy as np
from numpy.typing import NDArray
from PIL import Image, ImageDraw, ImageFont

from data_types import DisplacementMap, UnreadableImage

logger = logging.getLogger(__name__)

MAP_SIZE = 256
FONT_SIZE = 96
FONT_CANDIDATES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")


def map_from_gray(gray: NDArray[np.uint8]) -> DisplacementMap:
    """Wrap a height x width gray array into a DisplacementMap with R = G = B and opaque alpha."""
    gray = np.asarray(gray)
    if gray.ndim != 2:
        raise ValueError(f"Expected a 2D gray array, got shape {gray.shape}")
    gray = np.clip(np.rint(gray), 0, 255).astype(np.uint8)
    height, width = gray.shape
    rgba = np.empty((height, width, 4), dtype=np.uint8)
    rgba[:, :, 0] = gray
    rgba[:, :, 1] = gray
    rgba[:, :, 2] = gray
    rgba[:, :, 3] = 255
    return DisplacementMap(width=width, height=height, pixels=rgba.reshape(-1))


def uniform_map(gray: int, width: int = MAP_SIZE, height: int = MAP_SIZE) -> DisplacementMap:
    return map_from_gray(np.full((height, width), gray, dtype=np.uint8))


def radial_gradient_map(width: int = MAP_SIZE, height: int = MAP_SIZE) -> DisplacementMap:
    """
    White at the centre fading linearly to black at radius min(width, height) / 2,
    black beyond it. Engraves shallow in the middle and deepens toward the rim.
    """
    radius = min(width, height) / 2
    # Pixel centres, as a canvas gradient is evaluated
    ys, xs = np.mgrid[0:height, 0:width] + 0.5
    distance = np.hypot(xs - width / 2, ys - height / 2)
    t = np.clip(distance / radius, 0.0, 1.0)
    return map_from_gray(255 * (1.0 - t))


def load_font(font_size: int = FONT_SIZE) -> ImageFont.FreeTypeFont:
    for candidate in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, font_size)
        except OSError:
            continue
    logger.debug("No bold TrueType font found, using the Pillow default font")
    return ImageFont.load_default(size=font_size)


def text_map(text: str, width: int = MAP_SIZE, height: int = MAP_SIZE, font_size: int = FONT_SIZE) -> DisplacementMap:
    """Black text centred on a white background, so the strokes are engraved."""
    image = Image.new("L", (width, height), color=255)
    draw = ImageDraw.Draw(image)
    draw.text((width / 2, height / 2), text, fill=0, font=load_font(font_size), anchor="mm")
    return map_from_gray(np.asarray(image))


def image_map(image: Union[str, Path, Image.Image], width: int = MAP_SIZE, height: int = MAP_SIZE) -> DisplacementMap:
    """
    Fit an image inside the map keeping its aspect ratio, centred on white,
    and convert it to gray by averaging the RGB channels.

    Transparent pixels are composited onto white and so are not engraved.
    Raises UnreadableImage when Pillow cannot decode the file.
    """
    if not isinstance(image, Image.Image):
        try:
            with Image.open(image) as opened:
                opened.load()
                image = opened.copy()
        except OSError as e:
            raise UnreadableImage(f"Cannot read image {image}: {e}") from e
    image = image.convert("RGBA")

    aspect = image.width / image.height
    draw_width, draw_height = width, height
    if aspect > 1:
        draw_height = max(1, round(width / aspect))
    else:
        draw_width = max(1, round(height * aspect))
    resized = image.resize((draw_width, draw_height), Image.LANCZOS)

    canvas = Image.new("RGBA", (width, height), color=(255, 255, 255, 255))
    canvas.alpha_composite(resized, ((width - draw_width) // 2, (height - draw_height) // 2))
    rgb = np.asarray(canvas, dtype=np.float64)[:, :, :3]
    return map_from_gray(rgb.mean(axis=2))


def generate_displacement_map(
    text: Optional[str] = None,
    image: Union[str, Path, Image.Image, None] = None,
    gradient: bool = False,
    width: int = MAP_SIZE,
    height: int = MAP_SIZE,
    font_size: int = FONT_SIZE,
) -> DisplacementMap:
    """
    Build the displacement map for an engraving.

    The gradient is only used when neither text nor an image is given. Text
    wins over an image. With no source at all the map is blank (white).
    """
    if gradient and not text and image is None:
        return radial_gradient_map(width, height)
    if text:
        return text_map(text, width, height, font_size)
    if image is not None:
        return image_map(image, width, height)
    return uniform_map(255, width, height)


async def load_displacement_map_async(**kwargs) -> DisplacementMap:
    """
    Produce a displacement map in a worker thread.

    Cancelling the awaiting task abandons the result, so no engraving happens.
    Takes the same keyword arguments as generate_displacement_map.
    """
    return await asyncio.to_thread(generate_displacement_map, **kwargs)

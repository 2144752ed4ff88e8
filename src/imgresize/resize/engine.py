"""Nearest-neighbour resize engine.

Every destination pixel ``(x, y)`` copies the source pixel at
``(x * srcW // width, y * srcH // height)``, clamped to the source bounds.
There is no interpolation, so identical inputs always give bit-identical
outputs and a cached variant can stand in for a recomputed one.
"""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from imgresize.errors.exceptions import EmptyImageError
from imgresize.types import Dimension

logger = logging.getLogger(__name__)

# Modes whose numpy array round-trips through Image.fromarray unchanged.
_ARRAY_MODES = {"1", "L", "LA", "RGB", "RGBA", "I", "F"}


def infer_dimensions(src_width: int, src_height: int, width: int, height: int) -> tuple[int, int]:
    """Fill in a zero target axis from the source aspect ratio.

    Floor division, with a floor of 1 so the result is always encodable.
    Both axes zero is returned as-is (no resize).
    """
    if width == 0 and height == 0:
        return 0, 0
    if src_width <= 0 or src_height <= 0:
        raise EmptyImageError(f"Cannot resize a {src_width}x{src_height} image")
    if width == 0:
        width = max(1, src_width * height // src_height)
    if height == 0:
        height = max(1, src_height * width // src_width)
    return width, height


def resize_image(image: Image.Image, width: int, height: int) -> Image.Image:
    """Resize ``image`` to ``width`` x ``height`` with nearest-neighbour sampling.

    ``width == height == 0`` returns ``image`` itself. Callers must not pass a
    zero-sized source; doing so raises EmptyImageError instead of dividing by
    zero.
    """
    if width < 0 or height < 0:
        raise ValueError(f"Target dimensions must be non-negative: {width}x{height}")
    if width == 0 and height == 0:
        return image

    src_width, src_height = image.size
    width, height = infer_dimensions(src_width, src_height, width, height)

    source = image if image.mode in _ARRAY_MODES else image.convert("RGBA")
    pixels = np.asarray(source)

    cols = np.minimum(np.arange(width, dtype=np.int64) * src_width // width, src_width - 1)
    rows = np.minimum(np.arange(height, dtype=np.int64) * src_height // height, src_height - 1)
    resized = pixels[rows[:, np.newaxis], cols[np.newaxis, :]]

    logger.debug(
        "Resized %dx%d -> %dx%d (%s)", src_width, src_height, width, height, source.mode
    )
    return Image.fromarray(np.ascontiguousarray(resized))


def resize_to(image: Image.Image, dimension: Dimension) -> Image.Image:
    """Resize to a catalog dimension; ``0x0`` hands back the source untouched."""
    if dimension.is_identity:
        return image
    return resize_image(image, dimension.width, dimension.height)

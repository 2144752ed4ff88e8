"""Image decoding and encoding via Pillow."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Protocol

from PIL import Image, UnidentifiedImageError

from imgresize.errors.exceptions import BadRequestError, DecodeError, EncodeError
from imgresize.types import ImageFormat

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 85
_MAX_IMAGE_SIZE_BYTES = 50 * 1024 * 1024  # 50 MB
# Modes Pillow can save without conversion.
_WRITABLE_MODES: dict[ImageFormat, frozenset[str]] = {
    ImageFormat.JPEG: frozenset({"1", "L", "RGB", "CMYK"}),
    ImageFormat.PNG: frozenset({"1", "L", "LA", "I", "I;16", "I;16B", "P", "RGB", "RGBA"}),
}


class Codec(Protocol):
    """Byte stream ↔ raster conversion used by the resize pipeline."""

    def decode(self, data: bytes) -> Image.Image: ...

    def encode(
        self, image: Image.Image, fmt: ImageFormat, quality: int = DEFAULT_JPEG_QUALITY
    ) -> bytes: ...


class PillowCodec:
    """Codec backed by Pillow."""

    def decode(self, data: bytes) -> Image.Image:
        return decode_image(data)

    def encode(
        self, image: Image.Image, fmt: ImageFormat, quality: int = DEFAULT_JPEG_QUALITY
    ) -> bytes:
        return encode_image(image, fmt, quality=quality)


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded Pillow image.

    Raises DecodeError for unreadable data and for zero-sized rasters.
    """
    if len(data) > _MAX_IMAGE_SIZE_BYTES:
        raise DecodeError(f"Image too large ({len(data)} bytes, max {_MAX_IMAGE_SIZE_BYTES})")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (
        UnidentifiedImageError,
        OSError,
        ValueError,
        SyntaxError,
        EOFError,
        Image.DecompressionBombError,
    ) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e

    width, height = img.size
    if width == 0 or height == 0:
        raise DecodeError(f"Image has no pixels ({width}x{height})")
    return img


def encode_image(
    image: Image.Image, fmt: ImageFormat, quality: int = DEFAULT_JPEG_QUALITY
) -> bytes:
    """Encode a Pillow image as JPEG or PNG bytes.

    Modes the target format cannot store are converted first: CMYK, YCbCr
    and the like become RGB (RGBA for PNG when there is alpha), and float
    rasters are narrowed to integer ones.
    """
    if not isinstance(fmt, ImageFormat):
        raise BadRequestError(f"Unsupported image format: {fmt}", error_type="unsupported_extension")

    options: dict = {}
    if fmt == ImageFormat.JPEG:
        options["quality"] = quality

    buf = io.BytesIO()
    try:
        _writable(image, fmt).save(buf, format=fmt.pil_format, **options)
    except (OSError, ValueError, KeyError) as e:
        raise EncodeError(f"Failed to encode image as {fmt.value}: {e}") from e
    return buf.getvalue()


def _writable(image: Image.Image, fmt: ImageFormat) -> Image.Image:
    mode = image.mode
    if mode in _WRITABLE_MODES[fmt]:
        return image
    if mode == "F" and fmt == ImageFormat.PNG:
        return image.convert("I")
    if mode == "F" or mode.startswith("I"):
        return image.convert("L")
    has_alpha = "A" in image.getbands() or "transparency" in image.info
    target = "RGBA" if has_alpha and fmt == ImageFormat.PNG else "RGB"
    logger.debug("Converting %s to %s for %s output", mode, target, fmt.value)
    return image.convert(target)


def load_image(path: str | Path) -> Image.Image:
    """Load and decode an image file from local disk."""
    path = Path(path)
    _validate_path(path)
    return decode_image(path.read_bytes())


def save_image(image: Image.Image, path: str | Path, quality: int = DEFAULT_JPEG_QUALITY) -> Path:
    """Encode ``image`` in the format implied by the file suffix and write it."""
    path = Path(path)
    fmt = ImageFormat.from_extension(path.suffix.lstrip("."))
    if fmt is None:
        raise ValueError(f"Unsupported output type: {path.suffix}")
    path.write_bytes(encode_image(image, fmt, quality=quality))
    return path


def _validate_path(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if path.is_symlink():
        raise ValueError(f"Symlinks not allowed: {path}")
    size = path.stat().st_size
    if size > _MAX_IMAGE_SIZE_BYTES:
        raise ValueError(f"File too large ({size} bytes, max {_MAX_IMAGE_SIZE_BYTES})")

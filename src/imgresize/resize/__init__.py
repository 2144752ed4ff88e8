"""Resize subsystem — size spec parsing and nearest-neighbour scaling."""

from imgresize.resize.engine import infer_dimensions, resize_image, resize_to
from imgresize.resize.sizes import format_size, parse_size

__all__ = [
    "parse_size",
    "format_size",
    "infer_dimensions",
    "resize_image",
    "resize_to",
]

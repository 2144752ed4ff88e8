"""imgresize — serve resized image variants from an object store with a disk cache."""

from imgresize.core import ImageResizer
from imgresize.types import Dimension, ImageFormat, RequestDescriptor, ServeResult

__all__ = [
    "ImageResizer",
    "Dimension",
    "ImageFormat",
    "RequestDescriptor",
    "ServeResult",
]

"""Object stores holding the original images."""

from imgresize.storage.base import ObjectStore
from imgresize.storage.gcs import GCSObjectStore
from imgresize.storage.local import LocalObjectStore

__all__ = ["ObjectStore", "GCSObjectStore", "LocalObjectStore"]

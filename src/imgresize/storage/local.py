"""Filesystem object store: ``root/{bucket}/{key}``. For development and tests."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from imgresize.errors.exceptions import ObjectNotFoundError, UpstreamError

logger = logging.getLogger(__name__)


class LocalObjectStore:
    """Reads objects from a directory tree. Symlinks and paths outside ``root`` are not served."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).resolve()

    @property
    def root(self) -> Path:
        return self._root

    async def fetch(self, bucket: str, key: str) -> bytes:
        path = self._object_path(bucket, key)
        return await asyncio.to_thread(self._read, path, bucket, key)

    async def close(self) -> None:
        return None

    def _object_path(self, bucket: str, key: str) -> Path:
        path = self._root / bucket / key
        if path.is_symlink() or not path.resolve().is_relative_to(self._root):
            raise ObjectNotFoundError(
                f"Object not found: {bucket}/{key}", bucket=bucket, key=key
            )
        return path

    @staticmethod
    def _read(path: Path, bucket: str, key: str) -> bytes:
        if not path.is_file():
            raise ObjectNotFoundError(f"Object not found: {bucket}/{key}", bucket=bucket, key=key)
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error("Failed to read %s: %s", path, e)
            raise UpstreamError(f"Failed to read {bucket}/{key}: {e}", original=e) from e

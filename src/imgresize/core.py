"""Top-level entry point: ImageResizer wires config into a ready pipeline."""

from __future__ import annotations

import logging
from pathlib import Path

from imgresize.cache.store import CacheStore
from imgresize.config.schema import AppConfig, ensure_valid_catalog
from imgresize.errors.exceptions import ConfigError
from imgresize.pipeline.orchestrator import ResizePipeline
from imgresize.request.resolver import RequestResolver
from imgresize.storage.base import ObjectStore
from imgresize.storage.gcs import GCSObjectStore, load_credentials
from imgresize.storage.local import LocalObjectStore
from imgresize.types import ServeResult, StorageBackend
from imgresize.utils.image import Codec

logger = logging.getLogger(__name__)


class ImageResizer:
    """Resize service with full lifecycle control."""

    def __init__(
        self,
        config: AppConfig,
        object_store: ObjectStore | None = None,
        codec: Codec | None = None,
    ) -> None:
        ensure_valid_catalog(config)
        self._config = config
        self._object_store = object_store or build_object_store(config)
        self._cache = CacheStore(
            cache_dir=config.server.cache_dir,
            max_files=config.server.max_cache_files,
        )
        self._resolver = RequestResolver(config.catalog())
        self._pipeline = ResizePipeline(
            resolver=self._resolver,
            cache=self._cache,
            object_store=self._object_store,
            codec=codec,
            jpeg_quality=config.server.jpeg_quality,
        )

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def cache(self) -> CacheStore:
        return self._cache

    @property
    def resolver(self) -> RequestResolver:
        return self._resolver

    @property
    def pipeline(self) -> ResizePipeline:
        return self._pipeline

    async def serve(self, path: str) -> ServeResult:
        return await self._pipeline.serve(path)

    async def close(self) -> None:
        await self._object_store.close()

    async def __aenter__(self) -> ImageResizer:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()


def build_object_store(config: AppConfig) -> ObjectStore:
    """Create the object store selected by ``storage.backend``."""
    if config.storage.backend == StorageBackend.LOCAL:
        if not config.storage.local_root:
            raise ConfigError("storage.local_root is required for the local backend")
        root = Path(config.storage.local_root)
        logger.info("Using local object store at %s", root)
        return LocalObjectStore(root)

    gcs = config.gcs
    if gcs.anonymous:
        credentials = None
        logger.info("Using anonymous GCS access at %s", gcs.base_url)
    else:
        credentials = load_credentials(gcs.credentials_file)
        logger.info(
            "Using GCS object store at %s (project: %s)", gcs.base_url, gcs.project_id or "default"
        )
    return GCSObjectStore(
        base_url=gcs.base_url,
        credentials=credentials,
        user_project=gcs.user_project,
        timeout=gcs.timeout_seconds,
    )

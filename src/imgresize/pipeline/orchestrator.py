"""Resize pipeline — resolve → cache → fetch → decode → resize → encode → cache.

One ``serve`` call per inbound request; many run concurrently on one event
loop. CPU-bound codec work and cache file I/O run in worker threads. The
cache store's lock is only held for its own index mutations, never while
waiting on the object store or the codec.
"""

from __future__ import annotations

import asyncio
import logging

from PIL import Image

from imgresize.cache.keys import key_for_descriptor
from imgresize.cache.store import CacheStore
from imgresize.errors.exceptions import CacheWriteError
from imgresize.request.resolver import RequestResolver
from imgresize.resize.engine import resize_to
from imgresize.storage.base import ObjectStore
from imgresize.types import RequestDescriptor, ServeResult
from imgresize.utils.image import DEFAULT_JPEG_QUALITY, Codec, PillowCodec

logger = logging.getLogger(__name__)


class ResizePipeline:
    """Serves resized variants, computing them only on a cache miss.

    Errors propagate as ImgResizeError subclasses whose ``kind`` tells the
    transport layer how to answer. Cache failures never propagate: a read
    failure is a miss and a write failure is logged after the fact.
    """

    def __init__(
        self,
        resolver: RequestResolver,
        cache: CacheStore,
        object_store: ObjectStore,
        codec: Codec | None = None,
        jpeg_quality: int = DEFAULT_JPEG_QUALITY,
    ) -> None:
        self._resolver = resolver
        self._cache = cache
        self._object_store = object_store
        self._codec = codec or PillowCodec()
        self._jpeg_quality = jpeg_quality

    @property
    def cache(self) -> CacheStore:
        return self._cache

    async def serve(self, path: str) -> ServeResult:
        """Return the encoded variant for a request path."""
        descriptor = self._resolver.resolve(path)
        key = key_for_descriptor(descriptor)
        content_type = descriptor.image_format.content_type

        cached = await asyncio.to_thread(self._cache.get, key)
        if cached is not None:
            logger.debug("Cache hit: %s", path)
            return ServeResult(content=cached, content_type=content_type, cache_hit=True, key=key)

        logger.info(
            "Fetching %s/%s for %s/%s",
            descriptor.resolved_bucket,
            descriptor.object_key,
            descriptor.assortment,
            descriptor.size_name,
        )
        raw = await self._object_store.fetch(descriptor.resolved_bucket, descriptor.object_key)
        encoded = await asyncio.to_thread(self._render, raw, descriptor)

        await self._store(key, encoded)
        return ServeResult(content=encoded, content_type=content_type, cache_hit=False, key=key)

    def _render(self, raw: bytes, descriptor: RequestDescriptor) -> bytes:
        image: Image.Image = self._codec.decode(raw)
        resized = resize_to(image, descriptor.resolved_dimension)
        return self._codec.encode(resized, descriptor.image_format, quality=self._jpeg_quality)

    async def _store(self, key: str, data: bytes) -> None:
        try:
            await asyncio.to_thread(self._cache.set, key, data)
        except CacheWriteError as e:
            logger.warning("Cache write failed, serving uncached: %s", e.message)

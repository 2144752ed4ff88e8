"""Cache key generation — content-addressed over the request's public names."""

from __future__ import annotations

import hashlib
import json
import re

from imgresize.types import RequestDescriptor

KEY_LENGTH = 64  # SHA256 hex digest
_KEY_PATTERN = re.compile(r"^[0-9a-f]{64}$")


def generate_cache_key(
    bucket_alias: str,
    object_key: str,
    assortment: str,
    size_name: str,
    extension: str,
) -> str:
    """Generate a SHA256 cache key from the identifying request fields.

    The bucket *alias* is hashed rather than the resolved bucket name, so
    pointing an alias at a renamed bucket keeps existing entries valid.
    Fields are serialised as a JSON array; ``object_key`` may contain ``/``
    and must not bleed into its neighbours.
    """
    components = [bucket_alias, object_key, assortment, size_name, extension]
    serialized = json.dumps(components, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def key_for_descriptor(descriptor: RequestDescriptor) -> str:
    """Cache key for a resolved request."""
    return generate_cache_key(
        bucket_alias=descriptor.bucket_alias,
        object_key=descriptor.object_key,
        assortment=descriptor.assortment,
        size_name=descriptor.size_name,
        extension=descriptor.extension,
    )


def is_cache_key(name: str) -> bool:
    return bool(_KEY_PATTERN.match(name))

"""Cache subsystem — content-addressed keys over a bounded disk store."""

from imgresize.cache.keys import generate_cache_key, is_cache_key, key_for_descriptor
from imgresize.cache.stats import CacheRecord, CacheStats
from imgresize.cache.store import CacheStore

__all__ = [
    "CacheStore",
    "CacheRecord",
    "CacheStats",
    "generate_cache_key",
    "key_for_descriptor",
    "is_cache_key",
]

"""Bounded file-backed cache store with batch LRU eviction.

One file per key directly under ``cache_dir``, named by the key. An
in-memory index tracks the last access time of every entry; it is the only
authority on what the cache holds and is guarded by a single lock.

Cache layout::

    cache_dir/
    ├── 3f9a...e1   (encoded variant bytes)
    └── ...
"""

from __future__ import annotations

import itertools
import logging
import os
import re
import tempfile
import threading
from pathlib import Path

from imgresize.cache.keys import is_cache_key
from imgresize.cache.stats import CacheRecord, CacheStats
from imgresize.errors.exceptions import CacheWriteError

logger = logging.getLogger(__name__)

_DEFAULT_MAX_FILES = 1000
_TMP_SUFFIX = ".tmp"
_SAFE_KEY = re.compile(r"^[A-Za-z0-9_-]{1,128}$")


class CacheStore:
    """Key → bytes store on local disk, capped at ``max_files`` entries.

    When an insert finds the store at capacity, the least recently accessed
    half of the entries is removed in one pass, so a store under sustained
    load evicts once per ``max_files / 2`` inserts rather than on every one.
    """

    def __init__(
        self,
        cache_dir: str | Path,
        max_files: int = _DEFAULT_MAX_FILES,
        clean_temp_files: bool = True,
    ) -> None:
        if max_files < 1:
            raise ValueError(f"max_files must be at least 1, got {max_files}")
        self._cache_dir = Path(cache_dir)
        self._max_files = max_files
        self._index: dict[str, CacheRecord] = {}
        self._sequence = itertools.count()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._load_existing(clean_temp_files)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def max_files(self) -> int:
        return self._max_files

    def get(self, key: str) -> bytes | None:
        """Return cached bytes and refresh the access time, or None on a miss.

        An unreadable file is reported as a miss, never as an error.
        """
        path = self._path_for(key)
        with self._lock:
            record = self._index.get(key)
            if record is None:
                self._misses += 1
                return None
            try:
                data = path.read_bytes()
            except FileNotFoundError:
                logger.warning("Cache file missing, dropping entry: %s", key)
                del self._index[key]
                self._misses += 1
                return None
            except OSError as e:
                logger.warning("Failed to read cache file %s: %s", key, e)
                self._misses += 1
                return None

            record.touch(next(self._sequence))
            self._hits += 1
            return data

    def set(self, key: str, data: bytes) -> None:
        """Persist ``data`` under ``key``, evicting first if at capacity.

        Raises CacheWriteError when the file cannot be written. Eviction
        failures are logged and otherwise ignored.
        """
        path = self._path_for(key)
        with self._lock:
            if len(self._index) >= self._max_files:
                self._evict()

            try:
                self._write_atomic(path, data)
            except OSError as e:
                raise CacheWriteError(f"Failed to write cache entry {key}: {e}", key=key) from e

            record = self._index.get(key)
            if record is None:
                record = CacheRecord(key=key)
                self._index[key] = record
            record.size_bytes = len(data)
            record.touch(next(self._sequence))

    def delete(self, key: str) -> bool:
        """Remove one entry. Returns True if it was tracked."""
        path = self._path_for(key)
        with self._lock:
            if self._index.pop(key, None) is None:
                return False
            self._remove_file(path)
            return True

    def clear(self) -> int:
        """Remove every tracked entry. Returns the number removed."""
        with self._lock:
            count = len(self._index)
            for key in list(self._index):
                self._remove_file(self._cache_dir / key)
            self._index.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0
        logger.info("Cleared %d cache entries", count)
        return count

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self._index),
                max_entries=self._max_files,
                size_bytes=sum(r.size_bytes for r in self._index.values()),
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._index)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._index

    def _evict(self) -> int:
        """Drop the least recently accessed half of the index. Lock must be held."""
        ordered = sorted(self._index.values(), key=lambda r: (r.last_accessed, r.sequence))
        # len // 2, but never zero: max_files == 1 must still make room.
        count = max(len(ordered) // 2, 1) if ordered else 0
        for record in ordered[:count]:
            self._remove_file(self._cache_dir / record.key)
            del self._index[record.key]
        self._evictions += count
        logger.info("LRU evicted %d of %d cache entries", count, len(ordered))
        return count

    def _remove_file(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Failed to remove cache file %s: %s", path.name, e)

    def _write_atomic(self, path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._cache_dir, prefix=f".{path.name}.", suffix=_TMP_SUFFIX
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _path_for(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self._cache_dir / key

    def _load_existing(self, clean_temp_files: bool) -> None:
        """Adopt cache files left by a previous run, oldest first.

        Leftover temp files are removed only when ``clean_temp_files`` is set;
        a store opened beside a running server must leave its writes alone.
        """
        found: list[tuple[float, str, int]] = []
        for path in self._cache_dir.iterdir():
            name = path.name
            if name.startswith(".") and name.endswith(_TMP_SUFFIX):
                if clean_temp_files:
                    self._remove_file(path)
                continue
            if not is_cache_key(name) or not path.is_file():
                continue
            stat = path.stat()
            found.append((stat.st_mtime, name, stat.st_size))

        for mtime, name, size in sorted(found):
            self._index[name] = CacheRecord(
                key=name,
                last_accessed=mtime,
                sequence=next(self._sequence),
                size_bytes=size,
            )
        if found:
            logger.info("Loaded %d cached entries from %s", len(found), self._cache_dir)

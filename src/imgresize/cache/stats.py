"""Cache index record and statistics models."""

from __future__ import annotations

import time

from pydantic import BaseModel, Field


class CacheRecord(BaseModel):
    """In-memory index entry for one cached file."""

    key: str
    last_accessed: float = Field(default_factory=time.time)
    sequence: int = 0  # tie-breaker for equal timestamps
    size_bytes: int = 0

    def touch(self, sequence: int) -> None:
        self.last_accessed = time.time()
        self.sequence = sequence


class CacheStats(BaseModel):
    """Aggregate cache statistics."""

    entries: int = 0
    max_entries: int = 0
    size_bytes: int = 0
    hits: int = 0
    misses: int = 0
    evictions: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)

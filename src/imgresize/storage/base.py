"""Object store protocol consumed by the resize pipeline."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ObjectStore(Protocol):
    """Fetch-by-key access to original images.

    ``fetch`` raises ObjectNotFoundError when the object does not exist and
    UpstreamError for every other failure.
    """

    async def fetch(self, bucket: str, key: str) -> bytes: ...

    async def close(self) -> None: ...

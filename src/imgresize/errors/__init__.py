"""Error handling — one exception per user-facing failure kind."""

from imgresize.errors.exceptions import (
    BadRequestError,
    CacheWriteError,
    ConfigError,
    DecodeError,
    EmptyImageError,
    EncodeError,
    ImgResizeError,
    InvalidSizeSpecError,
    ObjectNotFoundError,
    UpstreamError,
)

__all__ = [
    "ImgResizeError",
    "BadRequestError",
    "InvalidSizeSpecError",
    "ObjectNotFoundError",
    "UpstreamError",
    "DecodeError",
    "EmptyImageError",
    "EncodeError",
    "CacheWriteError",
    "ConfigError",
]

"""Custom exception hierarchy for imgresize."""

from __future__ import annotations

from typing import Any, ClassVar

from imgresize.types import ErrorKind


class ImgResizeError(Exception):
    """Base exception for all imgresize errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.UPSTREAM_ERROR
    http_status: ClassVar[int] = 500

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(ImgResizeError):
    """The request path cannot be turned into a servable descriptor.

    Examples: malformed path, unknown alias/assortment/size, invalid size spec,
    unsupported extension.
    """

    kind = ErrorKind.BAD_REQUEST
    http_status = 400

    def __init__(self, message: str = "", error_type: str = "malformed_path") -> None:
        super().__init__(message)
        self.error_type = error_type


class InvalidSizeSpecError(BadRequestError):
    """A ``"<width>x<height>"`` string could not be parsed."""

    def __init__(
        self,
        message: str = "",
        error_type: str = "invalid_format",
        spec: str = "",
    ) -> None:
        super().__init__(message, error_type=error_type)
        self.spec = spec


class ObjectNotFoundError(ImgResizeError):
    """The source object does not exist in the object store."""

    kind = ErrorKind.NOT_FOUND
    http_status = 404

    def __init__(self, message: str = "", bucket: str = "", key: str = "") -> None:
        super().__init__(message)
        self.bucket = bucket
        self.key = key


class UpstreamError(ImgResizeError):
    """The object store failed for a reason other than a missing object."""

    kind = ErrorKind.UPSTREAM_ERROR
    http_status = 502

    def __init__(
        self,
        message: str = "",
        upstream_status: int | None = None,
        original: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.upstream_status = upstream_status
        self.original = original


class DecodeError(ImgResizeError):
    """Raw bytes could not be decoded into a raster image."""

    kind = ErrorKind.DECODE_ERROR
    http_status = 500


class EmptyImageError(DecodeError):
    """A raster with zero width or height reached the resize step."""


class EncodeError(ImgResizeError):
    """A raster could not be encoded into the requested format."""

    kind = ErrorKind.ENCODE_ERROR
    http_status = 500


class CacheWriteError(ImgResizeError):
    """A cache entry could not be persisted. Never surfaced to HTTP clients."""

    kind = ErrorKind.CACHE_ERROR
    http_status = 500

    def __init__(self, message: str = "", key: str = "") -> None:
        super().__init__(message)
        self.key = key


class ConfigError(ImgResizeError):
    """Configuration is missing, malformed or inconsistent."""

    kind = ErrorKind.CONFIG_ERROR
    http_status = 500

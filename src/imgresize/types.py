"""Shared Pydantic models for imgresize."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ── Enums ──


class ImageFormat(StrEnum):
    JPEG = "jpeg"
    PNG = "png"

    @classmethod
    def from_extension(cls, extension: str) -> ImageFormat | None:
        """Map a request extension (``jpg``, ``jpeg``, ``png``) to a format."""
        return _EXTENSION_FORMATS.get(extension.lower())

    @property
    def content_type(self) -> str:
        return f"image/{self.value}"

    @property
    def pil_format(self) -> str:
        return self.value.upper()


_EXTENSION_FORMATS: dict[str, ImageFormat] = {
    "jpg": ImageFormat.JPEG,
    "jpeg": ImageFormat.JPEG,
    "png": ImageFormat.PNG,
}

SUPPORTED_EXTENSIONS = frozenset(_EXTENSION_FORMATS)


class ErrorKind(StrEnum):
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"
    DECODE_ERROR = "decode_error"
    ENCODE_ERROR = "encode_error"
    CACHE_ERROR = "cache_error"
    CONFIG_ERROR = "config_error"


class StorageBackend(StrEnum):
    GCS = "gcs"
    LOCAL = "local"


# ── Request models ──


class Dimension(BaseModel):
    """Target size. Zero on one axis means "infer from aspect ratio"."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)

    @property
    def is_identity(self) -> bool:
        return self.width == 0 and self.height == 0


class Catalog(BaseModel):
    """Read-only snapshot of bucket aliases and size assortments."""

    model_config = ConfigDict(frozen=True)

    buckets: dict[str, str] = Field(default_factory=dict)
    assortments: dict[str, dict[str, str]] = Field(default_factory=dict)


class RequestDescriptor(BaseModel):
    """A fully parsed and validated artifact request."""

    model_config = ConfigDict(frozen=True)

    bucket_alias: str
    assortment: str
    object_key: str
    size_name: str
    extension: str
    resolved_bucket: str
    resolved_dimension: Dimension

    @property
    def image_format(self) -> ImageFormat:
        fmt = ImageFormat.from_extension(self.extension)
        if fmt is None:
            raise ValueError(f"Unsupported extension: {self.extension}")
        return fmt


# ── Results ──


class ServeResult(BaseModel):
    """Bytes handed back to the transport layer for one request."""

    content: bytes
    content_type: str
    cache_hit: bool = False
    key: str = ""

"""Pydantic models for server configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from imgresize.config import defaults
from imgresize.errors.exceptions import ConfigError, InvalidSizeSpecError
from imgresize.resize.sizes import parse_size
from imgresize.types import Catalog, StorageBackend


class ServerConfig(BaseModel):
    host: str = defaults.DEFAULT_HOST
    port: int = Field(default=defaults.DEFAULT_PORT, ge=0, le=65535)
    cache_dir: str = defaults.DEFAULT_CACHE_DIR
    max_cache_files: int = Field(default=defaults.DEFAULT_MAX_CACHE_FILES, ge=1)
    jpeg_quality: int = Field(default=defaults.DEFAULT_JPEG_QUALITY, ge=1, le=95)


class GCSConfig(BaseModel):
    """Object store access. Credentials come from ``credentials_file`` or ADC
    unless ``anonymous`` is set; ``user_project`` enables requester-pays billing.
    """

    project_id: str | None = None
    credentials_file: str | None = None
    user_project: str | None = None
    anonymous: bool = False
    base_url: str = defaults.DEFAULT_GCS_BASE_URL
    timeout_seconds: float = Field(default=defaults.DEFAULT_GCS_TIMEOUT_SECONDS, gt=0)


class StorageConfig(BaseModel):
    backend: StorageBackend = StorageBackend.GCS
    local_root: str | None = None


class AppConfig(BaseModel):
    """Top-level config file model.

    ``buckets`` maps public aliases to backing bucket names; ``assortments``
    maps an assortment name to ``{size name: "WxH"}``.
    """

    buckets: dict[str, str] = Field(default_factory=dict)
    assortments: dict[str, dict[str, str]] = Field(default_factory=dict)
    server: ServerConfig = Field(default_factory=ServerConfig)
    gcs: GCSConfig = Field(default_factory=GCSConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    log_level: str = defaults.DEFAULT_LOG_LEVEL

    def catalog(self) -> Catalog:
        """Immutable alias/assortment snapshot for the request resolver."""
        return Catalog(
            buckets=dict(self.buckets),
            assortments={name: dict(sizes) for name, sizes in self.assortments.items()},
        )


def validate_catalog(config: AppConfig) -> list[str]:
    """Return a list of problems with the catalog; empty when it is usable."""
    problems: list[str] = []
    if not config.buckets:
        problems.append("no bucket aliases configured")
    if not config.assortments:
        problems.append("no assortments configured")

    for alias, bucket in config.buckets.items():
        if not alias or "/" in alias:
            problems.append(f"bucket alias {alias!r} must be a single non-empty path segment")
        if not bucket:
            problems.append(f"bucket alias {alias!r} maps to an empty bucket name")

    for assortment, sizes in config.assortments.items():
        if not assortment or "/" in assortment:
            problems.append(f"assortment {assortment!r} must be a single non-empty path segment")
        for size_name, spec in sizes.items():
            try:
                parse_size(spec)
            except InvalidSizeSpecError as e:
                problems.append(f"{assortment}/{size_name}: {e.message}")
    return problems


def ensure_valid_catalog(config: AppConfig) -> None:
    problems = validate_catalog(config)
    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

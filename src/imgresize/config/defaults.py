"""Package-level default configuration values."""

from __future__ import annotations

from typing import Any

# Default server settings
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_CONFIG_PATH = "config.yaml"

# Default cache settings
DEFAULT_CACHE_DIR = "./cache"
DEFAULT_MAX_CACHE_FILES = 1000

# Default encoding settings
DEFAULT_JPEG_QUALITY = 85

# Default storage settings
DEFAULT_STORAGE_BACKEND = "gcs"
DEFAULT_GCS_BASE_URL = "https://storage.googleapis.com"
DEFAULT_GCS_TIMEOUT_SECONDS = 30.0

# Log level
DEFAULT_LOG_LEVEL = "INFO"


def get_defaults() -> dict[str, Any]:
    """Return all defaults as a nested dictionary for merging."""
    return {
        "buckets": {},
        "assortments": {},
        "server": {
            "host": DEFAULT_HOST,
            "port": DEFAULT_PORT,
            "cache_dir": DEFAULT_CACHE_DIR,
            "max_cache_files": DEFAULT_MAX_CACHE_FILES,
            "jpeg_quality": DEFAULT_JPEG_QUALITY,
        },
        "gcs": {
            "project_id": None,
            "credentials_file": None,
            "user_project": None,
            "anonymous": False,
            "base_url": DEFAULT_GCS_BASE_URL,
            "timeout_seconds": DEFAULT_GCS_TIMEOUT_SECONDS,
        },
        "storage": {
            "backend": DEFAULT_STORAGE_BACKEND,
            "local_root": None,
        },
        "log_level": DEFAULT_LOG_LEVEL,
    }

"""Configuration hierarchy — merges sources in priority order.

Precedence (later overrides earlier):
  1. Package defaults
  2. Config file       (--config, default ./config.yaml)
  3. Environment variables (IMGRESIZE_*, GOOGLE_CLOUD_PROJECT,
     GOOGLE_APPLICATION_CREDENTIALS)
  4. Runtime arguments (CLI options)
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from imgresize.config.defaults import get_defaults
from imgresize.config.loader import load_yaml
from imgresize.config.schema import AppConfig
from imgresize.errors.exceptions import ConfigError

logger = logging.getLogger(__name__)

# Map of environment variables to dotted config keys
_ENV_MAP: dict[str, str] = {
    "IMGRESIZE_HOST": "server.host",
    "IMGRESIZE_PORT": "server.port",
    "IMGRESIZE_CACHE_DIR": "server.cache_dir",
    "IMGRESIZE_MAX_CACHE_FILES": "server.max_cache_files",
    "IMGRESIZE_JPEG_QUALITY": "server.jpeg_quality",
    "IMGRESIZE_STORAGE_BACKEND": "storage.backend",
    "IMGRESIZE_LOCAL_ROOT": "storage.local_root",
    "IMGRESIZE_GCS_BASE_URL": "gcs.base_url",
    "IMGRESIZE_GCS_USER_PROJECT": "gcs.user_project",
    "IMGRESIZE_GCS_ANONYMOUS": "gcs.anonymous",
    "GOOGLE_CLOUD_PROJECT": "gcs.project_id",
    "GOOGLE_APPLICATION_CREDENTIALS": "gcs.credentials_file",
    "IMGRESIZE_LOG_LEVEL": "log_level",
}

# Map of runtime (CLI) argument names to dotted config keys
_RUNTIME_MAP: dict[str, str] = {
    "host": "server.host",
    "port": "server.port",
    "cache_dir": "server.cache_dir",
    "max_cache_files": "server.max_cache_files",
    "jpeg_quality": "server.jpeg_quality",
    "project_id": "gcs.project_id",
    "credentials_file": "gcs.credentials_file",
    "storage_backend": "storage.backend",
    "local_root": "storage.local_root",
    "log_level": "log_level",
}

# Keys that should be parsed as specific types
_TYPE_MAP: dict[str, type] = {
    "server.port": int,
    "server.max_cache_files": int,
    "server.jpeg_quality": int,
    "gcs.anonymous": bool,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def load_config_hierarchy(
    config_path: str | Path | None = None,
    **runtime_overrides: Any,
) -> AppConfig:
    """Load and merge configuration from all sources into a validated AppConfig.

    A missing ``config_path`` is an error; ``None`` skips the file layer.
    """
    config = get_defaults()

    # Layer 2: config file
    if config_path is not None:
        try:
            file_cfg = load_yaml(config_path)
        except FileNotFoundError as e:
            raise ConfigError(f"failed to read config: {e}") from e
        except ValueError as e:
            raise ConfigError(f"failed to parse config: {e}") from e
        _deep_update(config, file_cfg)

    # Layer 3: environment variables
    for key, value in _load_env_vars().items():
        _set_dotted(config, key, value)

    # Layer 4: runtime arguments (highest priority)
    # None means "not set"; it never overrides a lower layer
    for name, value in runtime_overrides.items():
        if value is None:
            continue
        dotted = _RUNTIME_MAP.get(name)
        if dotted is None:
            raise ConfigError(f"Unknown runtime override: {name}")
        _set_dotted(config, dotted, value)

    try:
        return AppConfig(**config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _load_env_vars() -> dict[str, Any]:
    """Read IMGRESIZE_* and GOOGLE_* environment variables."""
    result: dict[str, Any] = {}
    for env_key, config_key in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None or value == "":
            continue
        result[config_key] = _coerce_env_value(config_key, value)
    return result


def _coerce_env_value(key: str, value: str) -> Any:
    """Coerce an environment variable string to the appropriate type."""
    target_type = _TYPE_MAP.get(key)
    if target_type is bool:
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        logger.warning("Cannot convert env var for '%s' to bool: %s", key, value)
        return value
    if target_type:
        try:
            return target_type(value)
        except (ValueError, TypeError):
            logger.warning(
                "Cannot convert env var for '%s' to %s: %s", key, target_type.__name__, value
            )
            return value
    return value


def _deep_update(base: dict[str, Any], overlay: dict[str, Any]) -> None:
    for key, value in overlay.items():
        if value is None and isinstance(base.get(key), dict):
            continue  # empty YAML section
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            # Catalog tables replace rather than merge
            if key in ("buckets", "assortments"):
                base[key] = copy.deepcopy(value)
            else:
                _deep_update(base[key], value)
        else:
            base[key] = value


def _set_dotted(config: dict[str, Any], dotted: str, value: Any) -> None:
    *parents, leaf = dotted.split(".")
    node = config
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value

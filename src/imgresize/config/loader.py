"""YAML config loading and validation."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from imgresize.config.schema import AppConfig
from imgresize.errors.exceptions import ConfigError

_INT_TAG = "tag:yaml.org,2002:int"


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader that only reads plain decimal integers as ints.

    YAML 1.1 reads `0x800` as hex and `0755` as octal; in a config those are
    size specs such as "zero width, 800 high", so they stay strings.
    """


ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ConfigLoader.add_implicit_resolver(
    _INT_TAG, re.compile(r"^[-+]?(?:0|[1-9][0-9_]*)$"), list("-+0123456789")
)


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load any YAML file safely. An empty file is an empty mapping."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path) as f:
        try:
            raw = yaml.load(f, Loader=ConfigLoader)
        except yaml.YAMLError as e:
            raise ValueError(f"Malformed YAML in {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"Expected YAML mapping, got {type(raw).__name__} in {path}")

    return raw


def load_config_yaml(path: str | Path) -> AppConfig:
    """Load a config YAML file on its own (no env or defaults layering)."""
    try:
        raw = load_yaml(path)
    except FileNotFoundError as e:
        raise ConfigError(f"failed to read config: {e}") from e
    except ValueError as e:
        raise ConfigError(f"failed to parse config: {e}") from e

    try:
        return AppConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

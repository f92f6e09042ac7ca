"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- static defaults checked into the repo
  2. .env file           -- local overrides (not committed)
  3. Environment vars    -- set per shell / deployment

``load_config`` reads the YAML file, deep-merges values that were set
explicitly through the environment on top, and validates the result into
a :class:`Settings` instance.  Fields left at their pydantic default do
not clobber YAML values.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from refgraph.config.settings import Settings
from refgraph.utils.errors import ConfigurationError

DEFAULT_CONFIG_PATH = "config/config.yaml"


def load_config(path: str = DEFAULT_CONFIG_PATH) -> dict[str, Any]:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is
            treated as empty.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping,
            or an environment / .env value fails validation.
    """
    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                message=f"Invalid YAML: {exc}", source_name=str(config_path)
            ) from exc
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(
                message="Top-level YAML value must be a mapping",
                source_name=str(config_path),
            )
    else:
        yaml_config = {}

    try:
        settings = Settings()
    except ValidationError as exc:
        raise ConfigurationError(message=str(exc), source_name="environment") from exc
    explicit = settings.model_dump(include=settings.model_fields_set)
    env_overrides = {
        "data": {
            key: explicit[key]
            for key in ("matrix_source", "authors_source")
            if key in explicit
        },
        "graph": {
            key: explicit[key]
            for key in (
                "default_threshold",
                "max_threshold",
                "initial_active_count",
                "death_year_offset",
            )
            if key in explicit
        },
        "layout": {
            key: explicit[key]
            for key in ("min_node_radius", "max_node_radius")
            if key in explicit
        },
        "app": {key: explicit[key] for key in ("app_env", "log_level") if key in explicit},
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Flatten a sectioned config dict into a validated :class:`Settings`."""
    flat: dict[str, Any] = {}
    for section in ("data", "graph", "layout", "app"):
        values = config.get(section) or {}
        if not isinstance(values, dict):
            raise ConfigurationError(message=f"Section {section!r} must be a mapping")
        flat.update(values)
    try:
        return Settings(**flat)
    except ValidationError as exc:
        raise ConfigurationError(message=str(exc)) from exc


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value

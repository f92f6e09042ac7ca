"""Configuration module -- exports Settings and the YAML config loader."""

from refgraph.config.loader import load_config, settings_from_config
from refgraph.config.settings import Settings

__all__ = ["Settings", "load_config", "settings_from_config"]

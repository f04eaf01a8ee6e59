"""Configuration module for declutter."""

from declutter.config.loader import get_config_path, load_config, save_config
from declutter.config.schema import Config, DeclutterConfig

__all__ = ["Config", "DeclutterConfig", "get_config_path", "load_config", "save_config"]

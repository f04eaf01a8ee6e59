"""Configuration loading utilities."""

import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

from declutter.config.defaults import DEFAULT_FILTER, LEGACY_FILTER_KEYS, apply_missing_defaults
from declutter.config.schema import Config

CONFIG_VERSION = 2


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".declutter" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                raw = json.load(f)

            migrated_raw, changed = _migrate_config_with_change(raw)
            validated = Config.model_validate(migrated_raw)
            if changed:
                _atomic_write_config(path, validated)
            return validated
        except (json.JSONDecodeError, ValueError) as e:
            logger.warning("Failed to load config from {}: {}", path, e)
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    _atomic_write_config(path, config)


def _migrate_config(data: dict[str, Any]) -> dict[str, Any]:
    """Migration helper returning the migrated snake_case payload only."""
    migrated, _ = _migrate_config_with_change(data)
    return migrated


def _migrate_config_with_change(data: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """Migrate old config formats to current schema version.

    Version 1 files are the flat settings dump of the browser addon
    (``similarity_threshold``, ``repetitions_threshold``, ``ignore_mods`` ...).

    Returns:
        (migrated_snake_case_data, changed)
    """
    if not isinstance(data, dict):
        raise ValueError("Config root must be a JSON object")

    snake = convert_keys(data)
    version = snake.get("config_version")
    try:
        version_num = int(version) if version is not None else 1
    except (TypeError, ValueError):
        version_num = 1

    changed = False
    if version_num < CONFIG_VERSION:
        filter_cfg = snake.get("filter")
        if not isinstance(filter_cfg, dict):
            filter_cfg = {}

        known = set(DEFAULT_FILTER) | set(LEGACY_FILTER_KEYS)
        for key in [k for k in snake if k in known]:
            filter_cfg.setdefault(key, snake.pop(key))

        for legacy, current in LEGACY_FILTER_KEYS.items():
            if legacy in filter_cfg:
                value = filter_cfg.pop(legacy)
                filter_cfg.setdefault(current, value)

        snake["filter"] = filter_cfg
        snake["config_version"] = CONFIG_VERSION
        snake = apply_missing_defaults(snake)
        changed = True

    return snake, changed


def _atomic_write_config(path: Path, config: Config) -> None:
    """Atomically write config as camelCase JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(config.model_dump())
    tmp_name = f".{path.name}.tmp-{os.getpid()}"
    tmp_path = path.with_name(tmp_name)
    with open(tmp_path, "w") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp_path, path)


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])

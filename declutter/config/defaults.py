"""Centralized defaults for generated/migrated config files."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

DEFAULT_FILTER: dict[str, Any] = {
    "enabled": True,
    "similarity_threshold": 80,
    "repetition_threshold": 3,
    "ignore_moderators": True,
    "force_enabled_for_moderators": False,
    "cache_ttl_seconds": 30,
    "annotate_instead_of_hide": False,
    "annotation_color": "#FF0000",
    "partition_by_author": False,
}

# Setting names used by the browser addon this engine was extracted from.
LEGACY_FILTER_KEYS: dict[str, str] = {
    "repetitions_threshold": "repetition_threshold",
    "ignore_mods": "ignore_moderators",
    "force_enable_when_mod": "force_enabled_for_moderators",
    "cache_ttl": "cache_ttl_seconds",
    "highlight": "annotate_instead_of_hide",
    "highlight_color": "annotation_color",
    "per_user": "partition_by_author",
}


def apply_missing_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Fill absent filter keys (snake_case payload) without touching present ones."""
    merged = deepcopy(data)
    filter_cfg = merged.get("filter")
    if not isinstance(filter_cfg, dict):
        filter_cfg = {}
        merged["filter"] = filter_cfg
    for key, value in DEFAULT_FILTER.items():
        filter_cfg.setdefault(key, deepcopy(value))
    return merged

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

DEFAULT_SETTINGS: dict[str, Any] = {
    "source": {
        "url": "https://static.satisfactory-calculator.com/data/json/mapData/en-Stable.json",
        "params": {},
        "headers": {
            "Referer": "https://satisfactory-calculator.com/",
            "Accept": "application/json, text/javascript, */*; q=0.01",
        },
    },
    "http": {
        "timeout_seconds": 60,
        "user_agent": "",
        "max_retries": 3,
        "backoff_base_seconds": 0.5,
        "backoff_jitter_seconds": 0.25,
    },
    "categories": {
        "resources": "resource_nodes",
        "collectibles": "collectibles",
        "artifacts": "artifacts",
        "wells": "resource_wells",
    },
    "output": {
        "dir": "static/data",
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def load_settings(path: str | Path | None = None) -> dict[str, Any]:
    """Load the YAML settings file on top of DEFAULT_SETTINGS.

    With no path the defaults are returned as-is.
    """

    if path is None:
        return copy.deepcopy(DEFAULT_SETTINGS)

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError("settings.yaml must be a mapping/object")

    return _deep_merge(DEFAULT_SETTINGS, data)


def get_setting(settings: dict[str, Any], dotted_key: str, default: Any = None) -> Any:
    node: Any = settings
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return node

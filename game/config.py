"""Configuration loading from settings.yaml and .env."""

from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

DEFAULT_SETTINGS: dict[str, Any] = {
    "room": {
        "min_x": 50,
        "max_x": 750,
        "min_y": 200,
        "max_y": 450,
        "door_x": 700,
        "exit_x": 750,
    },
    "movement": {"speed": 5},
    "triggers": {"threshold": 60},
    "player": {"x": 100, "y": 300, "facing": "right"},
    "npcs": {
        "bat": {"x": 500, "y": 250, "visible": True},
        "delice": {"x": 220, "y": 420, "visible": True},
        "nienie": {"x": 700, "y": 300, "visible": False},
    },
    "furniture": {
        "wardrobe": {"x": 160, "y": 200},
        "bedsideTable": {"x": 320, "y": 230},
        "bed": {"x": 420, "y": 380},
    },
    "acts": {"max_act": 3},
    "dialogue": {"path": None},
    "storage": {"log_file": None},
}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def with_defaults(cfg: dict[str, Any] | None) -> dict[str, Any]:
    """Fill every section missing from ``cfg`` with the built-in settings.

    A section set to null in settings.yaml counts as missing.
    """
    cleaned = {key: value for key, value in (cfg or {}).items() if value is not None}
    return _merge(DEFAULT_SETTINGS, cleaned)


def load_config(
    config_dir: str | Path | None = None,
) -> dict:
    """Load settings.yaml and .env, return merged config dict."""
    if config_dir is None:
        config_dir = Path(__file__).resolve().parent.parent / "config"
    config_dir = Path(config_dir)

    # Load .env (silently skip if missing)
    load_dotenv(config_dir / ".env")

    settings_path = config_dir / "settings.yaml"
    if not settings_path.exists():
        raise FileNotFoundError(f"Config not found: {settings_path}")

    with open(settings_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config must be a mapping: {settings_path}")
    for section, value in raw.items():
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Config section '{section}' must be a mapping: {settings_path}")

    cfg = with_defaults(raw)
    cfg["_env"] = {
        "dialogues": os.getenv("REUNION_DIALOGUES", ""),
        "log_file": os.getenv("REUNION_LOG_FILE", ""),
    }

    return cfg

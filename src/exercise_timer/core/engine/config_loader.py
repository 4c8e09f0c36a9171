"""
YAML → typed settings loader.

Loads session settings from settings.yaml (bundled with the package) and
optionally merges user overrides from ~/.exercise-timer/settings.yaml.

Usage:
    from exercise_timer.core.engine.config_loader import load_generation_settings
    settings = load_generation_settings()
    settings.max_segment_seconds  # 120 unless overridden

If the bundled YAML cannot be parsed, the Python defaults from config.py
are used (no crash).  If the user override file has parse errors or
invalid values, a warning is issued and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from ..models import GenerationSettings

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} when it is missing or unreadable."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        warnings.warn(f"exercise-timer: ignoring {path} ({exc})", stacklevel=2)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    ref = importlib.resources.files("exercise_timer").joinpath("settings.yaml")
    with importlib.resources.as_file(ref) as p:
        return p if p.exists() else None


def get_user_dir() -> Path:
    """Return ~/.exercise-timer (may not exist)."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".exercise-timer"


def get_user_yaml_path() -> Path | None:
    """Return ~/.exercise-timer/settings.yaml if it exists, else None."""
    p = get_user_dir() / "settings.yaml"
    return p if p.exists() else None


def load_settings_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/exercise_timer/settings.yaml
    2. User override (``user_path`` or ~/.exercise-timer/settings.yaml)

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            config = _deep_merge(config, user_cfg)

    return config


def settings_from_dict(section: dict[str, Any]) -> GenerationSettings:
    """
    Build GenerationSettings from the ``session`` section of the YAML.

    Unknown keys are ignored; missing keys keep their defaults.

    Raises:
        ValueError: If a value has the wrong type or is out of range
    """
    known = {f.name for f in fields(GenerationSettings)}
    kwargs: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            continue
        kwargs[key] = float(value) if key == "sided_multiplier" else int(value)
    return GenerationSettings(**kwargs)


def load_generation_settings(user_path: Path | None = None) -> GenerationSettings:
    """
    Return the effective GenerationSettings.

    Falls back to the Python defaults when the merged YAML is invalid.
    """
    section = load_settings_config(user_path).get("session", {}) or {}
    try:
        return settings_from_dict(section)
    except (TypeError, ValueError) as exc:
        warnings.warn(
            f"exercise-timer: invalid session settings ({exc}); using defaults.",
            stacklevel=2,
        )
        return GenerationSettings()

"""Known style keys with per-appearance defaults and descriptions.

Defaults come from the bundled One Dark / One Light theme family; every color
either of them defines is treated as a schema-known key, in file order.
"""

from __future__ import annotations

import functools
import logging
from pathlib import Path
from typing import Any

import yaml

from themeedit.core.models import ThemeStyle
from themeedit.core.theme_parser import is_color_value, parse_theme_file
from themeedit.runtime_paths import data_path

logger = logging.getLogger(__name__)

FALLBACK_COLOR = "#808080"

# Groups handled structurally by the extractor rather than as flat keys.
STRUCTURED_KEYS: frozenset[str] = frozenset({"accents", "players", "syntax"})


def catalog_defaults_path() -> Path:
    """Theme family whose variants supply defaults for absent style colors."""
    return data_path("one.json")


def catalog_descriptions_path() -> Path:
    return data_path("descriptions.yaml")


def flatten_style_colors(style: ThemeStyle) -> dict[str, str]:
    """Flatten nested style objects into dotted keys.

    ``{"border": {"focused": "#fff"}}`` becomes ``{"border.focused": "#fff"}``.
    Arrays and non-color values are skipped.
    """
    result: dict[str, str] = {}

    def _walk(node: dict[str, Any], prefix: str) -> None:
        for key, value in node.items():
            full_key = f"{prefix}.{key}" if prefix else key
            if is_color_value(value):
                result[full_key] = value
            elif isinstance(value, dict) and key not in STRUCTURED_KEYS:
                _walk(value, full_key)

    _walk(style, "")
    return result


@functools.lru_cache(maxsize=1)
def _defaults_by_appearance() -> dict[str, dict[str, str]]:
    defaults: dict[str, dict[str, str]] = {"dark": {}, "light": {}}
    path = catalog_defaults_path()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("default theme catalog unreadable at %s: %s", path, exc)
        return defaults

    result = parse_theme_file(text)
    if not result.success:
        logger.warning("default theme catalog at %s is invalid: %s", path, result.error)
        return defaults

    for theme in result.data["themes"]:
        appearance = theme["appearance"]
        if not defaults[appearance]:
            defaults[appearance] = flatten_style_colors(theme["style"])
    return defaults


@functools.lru_cache(maxsize=1)
def _descriptions() -> dict[str, str]:
    path = catalog_descriptions_path()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("style key descriptions unavailable at %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}
    return {str(key): str(value) for key, value in data.items() if isinstance(value, str)}


@functools.lru_cache(maxsize=1)
def catalog_keys() -> tuple[str, ...]:
    """Every schema-known flat style key, in catalog order."""
    defaults = _defaults_by_appearance()
    keys = list(defaults["dark"])
    keys.extend(key for key in defaults["light"] if key not in defaults["dark"])
    return tuple(keys)


def get_default_color(key: str, appearance: str) -> str:
    """Default for ``key`` in the given appearance, or a neutral gray."""
    defaults = _defaults_by_appearance().get(appearance, {})
    return defaults.get(key, FALLBACK_COLOR)


def describe(key: str) -> str | None:
    return _descriptions().get(key)

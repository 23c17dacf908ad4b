"""Theme file parsing, validation and serialization."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping

import json5

from themeedit.core.color_conversion import is_valid_hex, normalize_hex
from themeedit.core.models import (
    APPEARANCES,
    ParseFailure,
    ParseSuccess,
    ParseThemeResult,
    ThemeFamily,
)

logger = logging.getLogger(__name__)

_JSON5_POSITION_RE = re.compile(r":(\d+)\s.*?column\s+(\d+)", re.IGNORECASE)
_JSON_POSITION_RE = re.compile(r"line\s+(\d+)\s+column\s+(\d+)", re.IGNORECASE)


class ThemeValidationError(ValueError):
    """Raised internally when a parsed document has the wrong shape."""


def is_color_value(value: object) -> bool:
    return isinstance(value, str) and is_valid_hex(value)


def normalize_color_value(value: Any) -> Any:
    """Canonicalize a hex literal; anything else passes through."""
    if not is_color_value(value):
        return value
    return normalize_hex(value)


def normalize_colors(value: Any) -> Any:
    """Return a copy of ``value`` with every hex literal canonicalized.

    Walks nested objects and arrays. Non-hex strings such as ``rgb(...)`` or
    named colors are kept exactly as written.
    """
    if isinstance(value, dict):
        return {key: normalize_colors(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_colors(item) for item in value]
    return normalize_color_value(value)


def parse_theme_file(content: str) -> ParseThemeResult:
    """Parse theme text, validate its structure and normalize its colors."""
    try:
        parsed = json5.loads(content)
    except ValueError as exc:
        line, column = _error_position(str(exc))
        logger.debug("theme text failed to parse: %s", exc)
        return ParseFailure(error=f"JSON parse error: {exc}", line=line, column=column)

    try:
        _validate_theme_family(parsed)
    except ThemeValidationError as exc:
        logger.debug("theme text has invalid structure: %s", exc)
        return ParseFailure(error=f"Invalid theme structure: {exc}")

    normalized = normalize_colors(parsed)
    return ParseSuccess(data=normalized, normalized=serialize_theme(normalized))


def serialize_theme(theme: ThemeFamily) -> str:
    """Serialize a theme family as 2-space indented JSON in insertion order."""
    return json.dumps(theme, indent=2, ensure_ascii=False)


def is_valid_theme_family(data: object) -> bool:
    try:
        _validate_theme_family(data)
    except ThemeValidationError:
        return False
    return True


def _validate_theme_family(data: object) -> None:
    if not isinstance(data, dict):
        raise ThemeValidationError("root must be an object")
    _required_str(data, "name", context="theme family")
    _required_str(data, "author", context="theme family")

    themes = data.get("themes")
    if not isinstance(themes, list):
        raise ThemeValidationError("field 'themes' must be an array")
    if not themes:
        raise ThemeValidationError("field 'themes' must contain at least one theme")
    for index, theme in enumerate(themes):
        _validate_theme(theme, index)


def _validate_theme(theme: object, index: int) -> None:
    context = f"themes[{index}]"
    if not isinstance(theme, dict):
        raise ThemeValidationError(f"{context} must be an object")
    _required_str(theme, "name", context=context)

    appearance = theme.get("appearance")
    if appearance not in APPEARANCES:
        raise ThemeValidationError(
            f"{context}: field 'appearance' must be 'dark' or 'light', got {appearance!r}"
        )
    if not isinstance(theme.get("style"), dict):
        raise ThemeValidationError(f"{context}: field 'style' must be an object")


def _required_str(data: Mapping[str, object], key: str, *, context: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ThemeValidationError(f"{context}: field {key!r} must be a string")
    return value


def _error_position(message: str) -> tuple[int | None, int | None]:
    for pattern in (_JSON5_POSITION_RE, _JSON_POSITION_RE):
        match = pattern.search(message)
        if match:
            return int(match.group(1)), int(match.group(2))
    return None, None

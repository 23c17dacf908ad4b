"""Flatten a theme variant's style map into addressable color entries."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from themeedit.core.catalog import catalog_keys, describe, get_default_color
from themeedit.core.color_conversion import colors_equal, is_supported_color
from themeedit.core.models import ColorEntry, ColorStats, ThemeStyle
from themeedit.core.path_locator import index_segment, join_path

STYLE_ROOT = "style"
_SYNTAX_FIELDS: tuple[str, ...] = ("color", "background_color")


def _entry(segments: list[str], key: str, value: str, *, defined: bool = True) -> ColorEntry:
    return ColorEntry(
        path=join_path(segments),
        segments=tuple(segments),
        key=key,
        value=value,
        defined=defined,
        description=describe(key),
    )


def extract_colors(style: ThemeStyle, base_path: str = STYLE_ROOT) -> list[ColorEntry]:
    """List every color present in ``style`` in document order.

    ``syntax.<name>.color`` maps to ``style/syntax/<name>/color``, accents to
    ``style/accents/[i]`` and player fields to ``style/players/[i]/<field>``.
    A named-accents object is flattened into its parent, so its keys are
    addressed as ``style/<name>``.
    """
    colors: list[ColorEntry] = []
    if not isinstance(style, Mapping):
        return colors

    def _walk(node: Mapping[str, Any], segments: list[str], key_prefix: str) -> None:
        for key, value in node.items():
            current = [*segments, key]
            label = f"{key_prefix}{key}"

            if is_supported_color(value):
                colors.append(_entry(current, label, value))
            elif key == "accents" and isinstance(value, list):
                for index, accent in enumerate(value):
                    if is_supported_color(accent):
                        colors.append(
                            _entry([*current, index_segment(index)], f"accents[{index}]", accent)
                        )
            elif key == "accents" and isinstance(value, Mapping):
                named = {name: item for name, item in value.items() if name not in node}
                _walk(named, segments, key_prefix)
            elif key == "syntax" and isinstance(value, Mapping):
                for token, highlight in value.items():
                    if not isinstance(highlight, Mapping):
                        continue
                    for field in _SYNTAX_FIELDS:
                        field_value = highlight.get(field)
                        if is_supported_color(field_value):
                            colors.append(
                                _entry([*current, token, field], f"{token}.{field}", field_value)
                            )
            elif key == "players" and isinstance(value, list):
                for index, player in enumerate(value):
                    if not isinstance(player, Mapping):
                        continue
                    for field, field_value in player.items():
                        if is_supported_color(field_value):
                            colors.append(
                                _entry(
                                    [*current, index_segment(index), field],
                                    f"players[{index}].{field}",
                                    field_value,
                                )
                            )
            elif isinstance(value, Mapping):
                _walk(value, current, f"{label}.")

    _walk(style, [base_path], "")
    return colors


def _written_keys(style: ThemeStyle) -> set[str]:
    """Dotted keys holding any non-null value, parseable as a color or not."""
    written: set[str] = set()
    if not isinstance(style, Mapping):
        return written

    def _walk(node: Mapping[str, Any], prefix: str) -> None:
        for key, value in node.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, Mapping):
                _walk(value, f"{full_key}.")
            elif value is not None:
                written.add(full_key)

    _walk(style, "")
    return written


def get_all_theme_colors(
    style: ThemeStyle,
    appearance: str,
    base_path: str = STYLE_ROOT,
) -> list[ColorEntry]:
    """Present colors followed by catalog keys the style does not define.

    Absent keys carry the appearance default and ``defined=False``.
    """
    entries = extract_colors(style, base_path)
    present = {entry.key for entry in entries} | _written_keys(style)
    for key in catalog_keys():
        if key in present:
            continue
        entries.append(
            _entry([base_path, key], key, get_default_color(key, appearance), defined=False)
        )
    return entries


def extract_colors_as_map(style: ThemeStyle, base_path: str = STYLE_ROOT) -> dict[str, str]:
    return {entry.path: entry.value for entry in extract_colors(style, base_path)}


def filter_colors(entries: Iterable[ColorEntry], term: str) -> list[ColorEntry]:
    """Case-insensitive search over path, key and value."""
    needle = term.strip().lower()
    if not needle:
        return list(entries)
    return [
        entry
        for entry in entries
        if needle in entry.path.lower()
        or needle in entry.key.lower()
        or needle in entry.value.lower()
    ]


def get_color_stats(style: ThemeStyle) -> ColorStats:
    colors = extract_colors(style)
    categories: dict[str, int] = {}
    for entry in colors:
        parts = entry.key.split(".")
        category = parts[0] if len(parts) > 1 else "other"
        categories[category] = categories.get(category, 0) + 1
    return ColorStats(
        total_colors=len(colors),
        unique_colors=len({entry.value.upper() for entry in colors}),
        colors_by_category=categories,
    )


def changed_paths(original: Mapping[str, str], entries: Iterable[ColorEntry]) -> set[str]:
    """Paths of defined entries that differ from ``original`` beyond rounding drift."""
    changed: set[str] = set()
    for entry in entries:
        if not entry.defined:
            continue
        before = original.get(entry.path)
        if before is None or not colors_equal(before, entry.value):
            changed.add(entry.path)
    return changed

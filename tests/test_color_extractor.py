"""Tests for flattening style maps into color entries."""

from __future__ import annotations

import copy

from themeedit.core.catalog import FALLBACK_COLOR, catalog_keys, describe, get_default_color
from themeedit.core.color_extractor import (
    changed_paths,
    extract_colors,
    extract_colors_as_map,
    filter_colors,
    get_all_theme_colors,
    get_color_stats,
)
from themeedit.core.document_mutator import update_color_at_path

STYLE = {
    "background.appearance": "opaque",
    "background": "#112233",
    "editor.background": "#445566",
    "border": {"focused": "#778899"},
    "accents": ["#AA0000", "#00AA00"],
    "players": [{"cursor": "#010101", "selection": "#02020280", "background": "not-a-color"}],
    "syntax": {
        "keyword": {"color": "#C678DD", "font_style": "italic"},
        "comment": {"color": "#5C6370", "background_color": "#00000000"},
    },
}


def _document(style: dict[str, object]) -> dict[str, object]:
    return {
        "name": "T",
        "author": "A",
        "themes": [{"name": "Dark", "appearance": "dark", "style": copy.deepcopy(style)}],
    }


class TestExtractColors:
    """Present colors in document order."""

    def test_paths_in_order(self):
        paths = [entry.path for entry in extract_colors(STYLE)]
        assert paths == [
            "style/background",
            "style/editor.background",
            "style/border/focused",
            "style/accents/[0]",
            "style/accents/[1]",
            "style/players/[0]/cursor",
            "style/players/[0]/selection",
            "style/syntax/keyword/color",
            "style/syntax/comment/color",
            "style/syntax/comment/background_color",
        ]

    def test_keys(self):
        keys = [entry.key for entry in extract_colors(STYLE)]
        assert keys[:4] == ["background", "editor.background", "border.focused", "accents[0]"]
        assert "players[0].cursor" in keys
        assert "keyword.color" in keys

    def test_segments_match_path(self):
        for entry in extract_colors(STYLE):
            assert "/".join(entry.segments) == entry.path
            assert entry.defined is True

    def test_scenario_single_entry(self):
        entries = extract_colors({"background": "#FFFFFF"})
        assert len(entries) == 1
        assert entries[0].path == "style/background"
        assert entries[0].value == "#FFFFFF"

    def test_functional_literals_extracted(self):
        entries = extract_colors({"text": "rgb(1, 2, 3)", "named": "red"})
        assert [entry.path for entry in entries] == ["style/text"]

    def test_named_accents_flattened(self):
        entries = extract_colors({"accents": {"red": "#FF0000", "background": "#000000"}, "background": "#111111"})
        mapping = {entry.path: entry.value for entry in entries}
        assert mapping == {"style/red": "#FF0000", "style/background": "#111111"}

    def test_non_mapping_style(self):
        assert extract_colors(None) == []  # type: ignore[arg-type]

    def test_as_map(self):
        mapping = extract_colors_as_map(STYLE)
        assert mapping["style/accents/[1]"] == "#00AA00"
        assert len(mapping) == 10

    def test_descriptions_attached(self):
        entry = extract_colors({"background": "#112233"})[0]
        assert entry.description == describe("background")
        assert entry.description


class TestPathSymmetry:
    """Every extracted path addresses the value it was extracted from."""

    def test_update_then_extract(self):
        document = _document(STYLE)
        for entry in extract_colors(document["themes"][0]["style"]):
            updated = update_color_at_path(document, 0, entry.path, "#ABCDEF")
            assert updated is not document
            mapping = extract_colors_as_map(updated["themes"][0]["style"])
            assert mapping[entry.path] == "#ABCDEF"

    def test_named_accent_update_then_extract(self):
        document = _document({"accents": {"red": "#FF0000"}})
        entry = extract_colors(document["themes"][0]["style"])[0]
        updated = update_color_at_path(document, 0, entry.path, "#00FF00")
        assert updated["themes"][0]["style"]["accents"]["red"] == "#00FF00"
        assert extract_colors_as_map(updated["themes"][0]["style"])["style/red"] == "#00FF00"


class TestAllThemeColors:
    """Catalog keys supplement the present colors."""

    def test_absent_keys_use_defaults(self):
        entries = get_all_theme_colors({"background": "#112233"}, "dark")
        assert entries[0].key == "background"
        assert entries[0].defined is True
        by_key = {entry.key: entry for entry in entries}
        assert by_key["text"].defined is False
        assert by_key["text"].value == get_default_color("text", "dark")
        assert by_key["text"].path == "style/text"

    def test_light_defaults_differ(self):
        dark = {entry.key: entry.value for entry in get_all_theme_colors({}, "dark")}
        light = {entry.key: entry.value for entry in get_all_theme_colors({}, "light")}
        assert dark["background"] != light["background"]

    def test_present_keys_not_duplicated(self):
        entries = get_all_theme_colors({"background": "#112233"}, "dark")
        keys = [entry.key for entry in entries]
        assert keys.count("background") == 1
        assert len(keys) == len(set(keys))

    def test_unparseable_value_not_replaced_by_default(self):
        entries = get_all_theme_colors({"background": "red", "text": "#112233"}, "dark")
        keys = [entry.key for entry in entries]
        assert "background" not in keys
        assert keys.count("text") == 1

    def test_nested_unparseable_value_not_replaced_by_default(self):
        entries = get_all_theme_colors({"editor": {"background": "transparent"}}, "dark")
        assert "editor.background" not in [entry.key for entry in entries]

    def test_null_value_offers_default(self):
        entries = get_all_theme_colors({"background": None}, "dark")
        matches = [entry for entry in entries if entry.key == "background"]
        assert len(matches) == 1
        assert matches[0].defined is False

    def test_catalog_covers_common_keys(self):
        keys = catalog_keys()
        assert "background" in keys
        assert "editor.background" in keys
        assert "background.appearance" not in keys

    def test_defaults_are_canonical_hex(self):
        assert get_default_color("background", "dark") == "#3B414DFF"
        assert get_default_color("text", "light") == "#242529FF"

    def test_unknown_key_falls_back(self):
        assert get_default_color("no.such.key", "dark") == FALLBACK_COLOR
        assert describe("no.such.key") is None


class TestFilteringAndStats:
    """Search, statistics and change detection."""

    def test_filter_case_insensitive(self):
        entries = extract_colors(STYLE)
        assert [entry.key for entry in filter_colors(entries, "EDITOR")] == ["editor.background"]
        assert [entry.path for entry in filter_colors(entries, "aa0000")] == ["style/accents/[0]"]
        assert len(filter_colors(entries, "  ")) == len(entries)

    def test_stats(self):
        stats = get_color_stats(STYLE)
        assert stats.total_colors == 10
        assert stats.unique_colors == 10
        assert stats.colors_by_category["comment"] == 2
        assert stats.colors_by_category["other"] == 3
        assert stats.colors_by_category["editor"] == 1

    def test_changed_paths_ignores_rounding_drift(self):
        original = extract_colors_as_map(STYLE)
        style = copy.deepcopy(STYLE)
        style["background"] = "#112234"
        style["editor.background"] = "#FFFFFF"
        entries = get_all_theme_colors(style, "dark")
        assert changed_paths(original, entries) == {"style/editor.background"}

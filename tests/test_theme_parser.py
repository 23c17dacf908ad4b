"""Tests for theme file parsing, validation and serialization."""

from __future__ import annotations

import json

import pytest

from themeedit.core.theme_parser import (
    is_valid_theme_family,
    normalize_colors,
    parse_theme_file,
    serialize_theme,
)

JSON5_THEME = """
// Authored theme with comments and trailing commas
{
  "$schema": "https://zed.dev/schema/themes/v0.2.0.json",
  name: "Test Family",
  author: "tests",
  themes: [
    {
      name: "Test Dark",
      appearance: "dark",
      style: {
        "background": "#abc",
        "editor.background": "#a1b2c3d4",
        "text": "rgb(1, 2, 3)",
        "border": {"focused": "#fff"},
        "accents": ["#123", "#456789"],
        "syntax": {
          "keyword": {"color": "#ff0000aa", "font_style": null, "font_weight": 700},
        },
        /* block comment */
      },
    },
  ],
}
"""


def _family(**style: object) -> dict[str, object]:
    return {
        "name": "T",
        "author": "A",
        "themes": [{"name": "Dark", "appearance": "dark", "style": dict(style)}],
    }


class TestParseThemeFile:
    """Parsing permissive theme text."""

    def test_json5_features_accepted(self):
        result = parse_theme_file(JSON5_THEME)
        assert result.success is True
        style = result.data["themes"][0]["style"]
        assert style["background"] == "#AABBCC"
        assert style["editor.background"] == "#A1B2C3D4"
        assert style["border"]["focused"] == "#FFFFFF"
        assert style["accents"] == ["#112233", "#456789"]
        assert style["syntax"]["keyword"]["color"] == "#FF0000AA"
        assert style["syntax"]["keyword"]["font_weight"] == 700

    def test_non_hex_literals_kept_verbatim(self):
        result = parse_theme_file(JSON5_THEME)
        assert result.data["themes"][0]["style"]["text"] == "rgb(1, 2, 3)"

    def test_extra_top_level_keys_preserved(self):
        result = parse_theme_file(JSON5_THEME)
        assert result.data["$schema"] == "https://zed.dev/schema/themes/v0.2.0.json"

    def test_normalized_text_is_two_space_json(self):
        result = parse_theme_file(json.dumps(_family(background="#fff")))
        assert result.normalized == json.dumps(result.data, indent=2, ensure_ascii=False)
        assert '\n  "author": "A",' in result.normalized

    def test_scenario_background_uppercased(self):
        text = '{"name":"T","author":"A","themes":[{"name":"Dark","appearance":"dark","style":{"background":"#fff"}}]}'
        result = parse_theme_file(text)
        assert result.success is True
        assert result.data["themes"][0]["style"]["background"] == "#FFFFFF"

    def test_round_trip(self):
        first = parse_theme_file(JSON5_THEME)
        second = parse_theme_file(serialize_theme(first.data))
        assert second.success is True
        assert second.data == first.data
        assert second.normalized == first.normalized

    def test_syntax_error(self):
        result = parse_theme_file('{"name": "T",')
        assert result.success is False
        assert result.error.startswith("JSON parse error:")

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"author": "A", "themes": [{"name": "D", "appearance": "dark", "style": {}}]},
            {"name": "T", "themes": [{"name": "D", "appearance": "dark", "style": {}}]},
            {"name": "T", "author": "A", "themes": []},
            {"name": "T", "author": "A", "themes": {}},
            {"name": "T", "author": "A", "themes": [{"appearance": "dark", "style": {}}]},
            {"name": "T", "author": "A", "themes": [{"name": "D", "appearance": "dim", "style": {}}]},
            {"name": "T", "author": "A", "themes": [{"name": "D", "appearance": "dark", "style": []}]},
            {"name": "T", "author": "A", "themes": ["not-an-object"]},
        ],
    )
    def test_invalid_structure(self, data):
        result = parse_theme_file(json.dumps(data))
        assert result.success is False
        assert result.error.startswith("Invalid theme structure:")
        assert is_valid_theme_family(data) is False

    def test_invalid_appearance_named_in_error(self):
        data = _family()
        data["themes"][0]["appearance"] = "dim"
        result = parse_theme_file(json.dumps(data))
        assert "themes[0]" in result.error
        assert "'dim'" in result.error


class TestSerializeTheme:
    """Serialization of documents."""

    def test_key_order_follows_insertion(self):
        data = _family(zeta="#000000", alpha="#FFFFFF")
        text = serialize_theme(data)
        assert text.index('"zeta"') < text.index('"alpha"')
        assert text.index('"name"') < text.index('"author"') < text.index('"themes"')

    def test_non_ascii_kept(self):
        data = _family()
        data["author"] = "Zoë"
        assert '"author": "Zoë"' in serialize_theme(data)

    def test_normalize_colors_does_not_mutate_input(self):
        data = _family(background="#abc")
        normalized = normalize_colors(data)
        assert data["themes"][0]["style"]["background"] == "#abc"
        assert normalized["themes"][0]["style"]["background"] == "#AABBCC"

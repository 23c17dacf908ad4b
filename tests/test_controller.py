"""Tests for the Qt editor controller and its live-edit debounce."""

from __future__ import annotations

import json

import pytest
from PySide6.QtTest import QTest

from themeedit.config.settings import EditorPreferences
from themeedit.editor.controller import ThemeEditorController

THEME_TEXT = json.dumps(
    {
        "name": "T",
        "author": "A",
        "themes": [
            {"name": "Dark", "appearance": "dark", "style": {"background": "#000001", "accents": ["#aaa", "#bbb"]}},
            {"name": "Light", "appearance": "light", "style": {"background": "#000002"}},
        ],
    }
)


@pytest.fixture
def controller(qapp):
    controller = ThemeEditorController(EditorPreferences(live_edit_debounce_ms=50))
    assert controller.load(THEME_TEXT, "theme.json")
    return controller


class TestDebounce:
    """Live edits commit once after the timer elapses."""

    def test_live_edits_coalesce(self, controller):
        for value in ("#101010", "#202020", "#303030", "#404040"):
            controller.live_edit("style/background", value)
        assert controller.live_edit_pending is True
        assert len(controller.state.history) == 1
        assert controller.state.current_theme["style"]["background"] == "#404040"

        QTest.qWait(300)

        assert controller.live_edit_pending is False
        assert len(controller.state.history) == 2
        assert controller.state.history[-1]["themes"][0]["style"]["background"] == "#404040"
        assert controller.state.pending_live_value is None

    def test_undo_stops_timer_and_flushes(self, controller):
        controller.live_edit("style/background", "#101010")
        controller.undo()
        assert controller.live_edit_pending is False
        assert controller.state.history_index == 0
        QTest.qWait(150)
        assert len(controller.state.history) == 2
        assert controller.state.history_index == 0

    def test_load_cancels_pending_commit(self, controller):
        controller.live_edit("style/background", "#101010")
        assert controller.load(THEME_TEXT, "other.json")
        assert controller.live_edit_pending is False
        QTest.qWait(150)
        assert len(controller.state.history) == 1
        assert controller.state.file_name == "other.json"

    def test_close_cancels_pending_commit(self, controller):
        controller.live_edit("style/background", "#101010")
        controller.close()
        assert controller.live_edit_pending is False
        QTest.qWait(150)
        assert controller.state.document is None

    def test_commit_stops_timer(self, controller):
        controller.live_edit("style/background", "#101010")
        controller.commit("style/background", "#202020")
        assert controller.live_edit_pending is False
        assert len(controller.state.history) == 2


class TestControllerSignals:
    """Signals and derived views."""

    def test_state_changed_emitted(self, controller):
        seen = []
        controller.state_changed.connect(seen.append)
        controller.commit("style/background", "#123456")
        assert len(seen) == 1
        assert seen[0] is controller.state

    def test_noop_emits_nothing(self, controller):
        seen = []
        controller.state_changed.connect(seen.append)
        controller.commit("style/missing/deep", "#123456")
        controller.undo()
        assert seen == []

    def test_failed_load_reports_error(self, controller):
        errors = []
        controller.error_occurred.connect(errors.append)
        assert controller.load("{", "broken.json") is False
        assert errors and errors[0].startswith("JSON parse error:")
        assert controller.state.file_name == "theme.json"
        controller.clear_error()
        assert controller.state.error is None

    def test_preferences_seed_display_state(self, qapp):
        controller = ThemeEditorController(EditorPreferences(color_format="hsl", dark_mode=False))
        assert controller.state.color_display_format == "hsl"
        assert controller.state.dark_mode is False
        assert controller.colors() == []

    def test_select_at_offset_switches_variant(self, controller):
        text = controller.state.serialized
        path = controller.select_at_offset(text.index("#000002"))
        assert path == "style/background"
        assert controller.state.active_theme_index == 1
        assert controller.state.selected_color_path == "style/background"

    def test_select_at_offset_array_accent(self, controller):
        text = controller.state.serialized
        assert controller.select_at_offset(text.index("#BBBBBB")) == "style/accents/[1]"
        assert controller.state.active_theme_index == 0

    def test_colors_and_original_colors(self, controller):
        controller.commit("style/background", "#FFFFFF")
        entries = controller.colors()
        assert entries[0].path == "style/background"
        assert entries[0].value == "#FFFFFF"
        assert any(not entry.defined for entry in entries)
        assert controller.original_colors()["style/background"] == "#000001"

    def test_add_color_and_redo(self, controller):
        controller.add_color("style/text", "#EEEEEE")
        assert controller.state.selected_color_path == "style/text"
        controller.undo()
        assert controller.state.can_redo
        controller.redo()
        assert controller.state.current_theme["style"]["text"] == "#EEEEEE"

    def test_mark_saved_and_display_settings(self, controller):
        controller.commit("style/background", "#FFFFFF")
        controller.mark_saved("handle")
        assert controller.state.dirty is False
        assert controller.state.file_handle == "handle"
        controller.set_color_format("rgb")
        controller.set_dark_mode(False)
        controller.set_active_theme(1)
        controller.select_color("style/background")
        assert controller.state.color_display_format == "rgb"
        assert controller.state.dark_mode is False
        assert controller.state.selected_color_path == "style/background"

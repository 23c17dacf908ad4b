"""Qt-facing editor controller with debounced live edits."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal

from themeedit.config.settings import EditorPreferences
from themeedit.core.color_extractor import extract_colors_as_map, get_all_theme_colors
from themeedit.core.history import (
    AddColor,
    ClearError,
    Close,
    Commit,
    EditorState,
    FlushLive,
    LiveEdit,
    Load,
    MarkSaved,
    Redo,
    SelectColor,
    SetActiveTheme,
    SetColorFormat,
    SetDarkMode,
    Undo,
    reduce,
)
from themeedit.core.models import ColorEntry
from themeedit.core.path_locator import PathLike, build_json_path, normalize_color_path

logger = logging.getLogger(__name__)


class ThemeEditorController(QObject):
    """Owns one editor state and the single-shot timer that commits live edits."""

    state_changed = Signal(object)  # EditorState
    error_occurred = Signal(str)

    def __init__(
        self,
        preferences: EditorPreferences | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        prefs = preferences or EditorPreferences()
        self._state = EditorState(
            color_display_format=prefs.color_format,
            dark_mode=prefs.dark_mode,
        )
        self._live_timer = QTimer(self)
        self._live_timer.setSingleShot(True)
        self._live_timer.setInterval(max(0, prefs.live_edit_debounce_ms))
        self._live_timer.timeout.connect(self._on_live_timeout)

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def live_edit_pending(self) -> bool:
        return self._live_timer.isActive()

    def dispatch(self, event: object) -> EditorState:
        previous = self._state
        self._state = reduce(previous, event)
        if self._state.pending_live_value is None:
            self._live_timer.stop()
        if self._state is not previous:
            self.state_changed.emit(self._state)
        return self._state

    # -- file lifecycle --

    def load(self, text: str, file_name: str | None = None, handle: object = None) -> bool:
        """Load theme text; on failure the previous document stays open."""
        state = self.dispatch(Load(text, file_name, handle))
        if state.error is not None:
            logger.warning("could not load %s: %s", file_name or "<text>", state.error)
            self.error_occurred.emit(state.error)
            return False
        logger.info(
            "loaded %s with %d theme(s)",
            file_name or "<text>",
            len(state.document["themes"]),
        )
        return True

    def close(self) -> None:
        self.dispatch(Close())

    def mark_saved(self, handle: object = None) -> None:
        self.dispatch(MarkSaved(handle))

    # -- editing --

    def commit(self, path: PathLike, value: str) -> None:
        self.dispatch(Commit(path, value))

    def live_edit(self, path: PathLike, value: str) -> None:
        """Show ``value`` now; record it in history once edits go quiet."""
        state = self.dispatch(LiveEdit(path, value))
        if state.pending_live_value is not None:
            self._live_timer.start()

    def flush_live_edit(self) -> None:
        self.dispatch(FlushLive())

    def add_color(self, path: PathLike, value: str) -> None:
        self.dispatch(AddColor(path, value))

    def undo(self) -> None:
        self.dispatch(Undo())

    def redo(self) -> None:
        self.dispatch(Redo())

    # -- selection and display --

    def set_active_theme(self, index: int) -> None:
        self.dispatch(SetActiveTheme(index))

    def select_color(self, path: str | None) -> None:
        self.dispatch(SelectColor(path))

    def select_at_offset(self, offset: int) -> str:
        """Select the color under ``offset`` in the serialized document text."""
        normalized = normalize_color_path(build_json_path(self._state.serialized, offset))
        if normalized.theme_index is not None and normalized.theme_index != self._state.active_theme_index:
            self.set_active_theme(normalized.theme_index)
        self.select_color(normalized.path)
        return normalized.path

    def set_color_format(self, color_format: str) -> None:
        self.dispatch(SetColorFormat(color_format))

    def set_dark_mode(self, enabled: bool) -> None:
        self.dispatch(SetDarkMode(enabled))

    def clear_error(self) -> None:
        self.dispatch(ClearError())

    # -- derived views --

    def colors(self) -> list[ColorEntry]:
        theme = self._state.current_theme
        if theme is None:
            return []
        return get_all_theme_colors(theme["style"], theme["appearance"])

    def original_colors(self) -> dict[str, str]:
        if not self._state.history:
            return {}
        themes = self._state.history[0]["themes"]
        index = self._state.active_theme_index
        if not 0 <= index < len(themes):
            return {}
        return extract_colors_as_map(themes[index]["style"])

    def _on_live_timeout(self) -> None:
        logger.debug("committing debounced live edit")
        self.flush_live_edit()

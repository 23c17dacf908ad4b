"""Editor state and the reducer driving load, edit, undo and redo.

``reduce(state, event)`` is pure: it never mutates ``state`` and never
schedules anything. Debouncing of live edits lives in
:class:`themeedit.editor.controller.ThemeEditorController`, which feeds
``FlushLive`` back in when its timer fires.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable

from themeedit.core.document_mutator import add_color, update_color_at_path
from themeedit.core.models import ThemeFamily
from themeedit.core.path_locator import PathLike, join_path, split_path
from themeedit.core.theme_parser import parse_theme_file, serialize_theme

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


@dataclass(frozen=True, slots=True)
class PendingEdit:
    """A live edit shown in the document but not yet in history."""

    path: PathLike
    value: str


@dataclass(frozen=True, slots=True)
class EditorState:
    """Everything the editor knows about the open document."""

    document: ThemeFamily | None = None
    history: tuple[ThemeFamily, ...] = ()
    history_index: int = -1
    pending_live_value: PendingEdit | None = None
    dirty: bool = False
    original_text: str = ""
    file_name: str | None = None
    file_handle: Any = None
    active_theme_index: int = 0
    selected_color_path: str | None = None
    color_display_format: str = "hex"
    dark_mode: bool = True
    error: str | None = None

    @property
    def is_loaded(self) -> bool:
        return self.document is not None

    @property
    def can_undo(self) -> bool:
        return self.history_index > 0 or self.pending_live_value is not None

    @property
    def can_redo(self) -> bool:
        return self.pending_live_value is None and self.history_index < len(self.history) - 1

    @property
    def current_theme(self) -> dict[str, Any] | None:
        if self.document is None:
            return None
        themes = self.document.get("themes", [])
        if 0 <= self.active_theme_index < len(themes):
            return themes[self.active_theme_index]
        return None

    @property
    def serialized(self) -> str:
        return serialize_theme(self.document) if self.document is not None else ""


# -- events --


@dataclass(frozen=True, slots=True)
class Load:
    text: str
    file_name: str | None = None
    handle: Any = None


@dataclass(frozen=True, slots=True)
class Close:
    pass


@dataclass(frozen=True, slots=True)
class Commit:
    path: PathLike
    value: str


@dataclass(frozen=True, slots=True)
class LiveEdit:
    path: PathLike
    value: str


@dataclass(frozen=True, slots=True)
class FlushLive:
    pass


@dataclass(frozen=True, slots=True)
class Undo:
    pass


@dataclass(frozen=True, slots=True)
class Redo:
    pass


@dataclass(frozen=True, slots=True)
class AddColor:
    path: PathLike
    value: str


@dataclass(frozen=True, slots=True)
class MarkSaved:
    handle: Any = None


@dataclass(frozen=True, slots=True)
class SetActiveTheme:
    index: int


@dataclass(frozen=True, slots=True)
class SelectColor:
    path: str | None


@dataclass(frozen=True, slots=True)
class SetColorFormat:
    color_format: str


@dataclass(frozen=True, slots=True)
class SetDarkMode:
    enabled: bool


@dataclass(frozen=True, slots=True)
class ClearError:
    pass


# -- helpers --


def _same_path(first: PathLike, second: PathLike) -> bool:
    return split_path(first) == split_path(second)


def _push_snapshot(state: EditorState, snapshot: ThemeFamily) -> EditorState:
    history = list(state.history[: state.history_index + 1])
    history.append(snapshot)
    overflow = len(history) - MAX_HISTORY
    if overflow > 0:
        logger.debug("history full; evicting %d oldest snapshot(s)", overflow)
        history = history[overflow:]
    return replace(
        state,
        document=snapshot,
        history=tuple(history),
        history_index=len(history) - 1,
        pending_live_value=None,
        dirty=snapshot != history[0],
    )


def _commit(
    state: EditorState,
    path: PathLike,
    value: str,
    mutate: Callable[[ThemeFamily, int, PathLike, str], ThemeFamily] = update_color_at_path,
) -> EditorState:
    base = state.history[state.history_index]
    updated = mutate(base, state.active_theme_index, path, value)
    if updated is base:
        logger.debug("color path %r not found; nothing committed", path)
        if state.pending_live_value is None:
            return state
        return replace(state, document=base, pending_live_value=None)
    return _push_snapshot(state, updated)


def _flush(state: EditorState) -> EditorState:
    pending = state.pending_live_value
    if pending is None:
        return state
    return _commit(state, pending.path, pending.value)


# -- handlers --


def _on_load(state: EditorState, event: Load) -> EditorState:
    result = parse_theme_file(event.text)
    if not result.success:
        return replace(state, error=result.error)
    return replace(
        state,
        document=result.data,
        history=(result.data,),
        history_index=0,
        pending_live_value=None,
        dirty=False,
        original_text=result.normalized,
        file_name=event.file_name,
        file_handle=event.handle,
        active_theme_index=0,
        selected_color_path=None,
        error=None,
    )


def _on_close(state: EditorState, event: Close) -> EditorState:
    return EditorState(
        color_display_format=state.color_display_format,
        dark_mode=state.dark_mode,
    )


def _on_commit(state: EditorState, event: Commit) -> EditorState:
    if not state.is_loaded:
        return state
    pending = state.pending_live_value
    if pending is not None and not _same_path(pending.path, event.path):
        state = _flush(state)
    return _commit(state, event.path, event.value)


def _on_live_edit(state: EditorState, event: LiveEdit) -> EditorState:
    if not state.is_loaded:
        return state
    pending = state.pending_live_value
    if pending is not None and not _same_path(pending.path, event.path):
        state = _flush(state)
    base = state.history[state.history_index]
    updated = update_color_at_path(base, state.active_theme_index, event.path, event.value)
    if updated is base:
        return state
    return replace(state, document=updated, pending_live_value=PendingEdit(event.path, event.value))


def _on_flush_live(state: EditorState, event: FlushLive) -> EditorState:
    if not state.is_loaded:
        return state
    return _flush(state)


def _on_undo(state: EditorState, event: Undo) -> EditorState:
    if not state.is_loaded:
        return state
    state = _flush(state)
    if state.history_index <= 0:
        return state
    index = state.history_index - 1
    return replace(
        state,
        document=state.history[index],
        history_index=index,
        dirty=index != 0,
    )


def _on_redo(state: EditorState, event: Redo) -> EditorState:
    if not state.is_loaded:
        return state
    state = _flush(state)
    if state.history_index >= len(state.history) - 1:
        return state
    index = state.history_index + 1
    return replace(
        state,
        document=state.history[index],
        history_index=index,
        dirty=True,
    )


def _on_add_color(state: EditorState, event: AddColor) -> EditorState:
    if not state.is_loaded:
        return state
    state = _flush(state)
    committed = _commit(state, event.path, event.value, mutate=add_color)
    selected = event.path if isinstance(event.path, str) else join_path(event.path)
    return replace(committed, selected_color_path=selected)


def _on_mark_saved(state: EditorState, event: MarkSaved) -> EditorState:
    if not state.is_loaded:
        return state
    state = _flush(state)
    return replace(
        state,
        dirty=False,
        file_handle=event.handle if event.handle is not None else state.file_handle,
        original_text=serialize_theme(state.document),
    )


def _on_set_active_theme(state: EditorState, event: SetActiveTheme) -> EditorState:
    if not state.is_loaded:
        return state
    if not 0 <= event.index < len(state.document["themes"]):
        return state
    state = _flush(state)
    return replace(state, active_theme_index=event.index, selected_color_path=None)


def _on_select_color(state: EditorState, event: SelectColor) -> EditorState:
    state = _flush(state) if state.is_loaded else state
    return replace(state, selected_color_path=event.path)


def _on_set_color_format(state: EditorState, event: SetColorFormat) -> EditorState:
    return replace(state, color_display_format=event.color_format)


def _on_set_dark_mode(state: EditorState, event: SetDarkMode) -> EditorState:
    return replace(state, dark_mode=event.enabled)


def _on_clear_error(state: EditorState, event: ClearError) -> EditorState:
    return replace(state, error=None)


_HANDLERS: dict[type, Callable[[EditorState, Any], EditorState]] = {
    Load: _on_load,
    Close: _on_close,
    Commit: _on_commit,
    LiveEdit: _on_live_edit,
    FlushLive: _on_flush_live,
    Undo: _on_undo,
    Redo: _on_redo,
    AddColor: _on_add_color,
    MarkSaved: _on_mark_saved,
    SetActiveTheme: _on_set_active_theme,
    SelectColor: _on_select_color,
    SetColorFormat: _on_set_color_format,
    SetDarkMode: _on_set_dark_mode,
    ClearError: _on_clear_error,
}


def reduce(state: EditorState, event: object) -> EditorState:
    """Apply one event to ``state`` and return the resulting state."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        logger.debug("ignoring unknown editor event %r", event)
        return state
    return handler(state, event)

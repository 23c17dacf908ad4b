"""Application settings via QSettings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from PySide6.QtCore import QSettings

from themeedit.core.models import COLOR_FORMATS

DEFAULT_COLOR_FORMAT = "hex"
DEFAULT_LIVE_EDIT_DEBOUNCE_MS = 800
_MIN_DEBOUNCE_MS = 0
_MAX_DEBOUNCE_MS = 10_000


@dataclass(frozen=True, slots=True)
class EditorPreferences:
    """Initial values injected into an editor; not part of document state."""

    color_format: str = DEFAULT_COLOR_FORMAT
    dark_mode: bool = True
    editor_theme: str = ""
    live_edit_debounce_ms: int = DEFAULT_LIVE_EDIT_DEBOUNCE_MS


def normalize_color_format(value: str | None) -> str:
    fmt = (value or "").strip().lower()
    return fmt if fmt in COLOR_FORMATS else DEFAULT_COLOR_FORMAT


class AppSettings:
    """Wraps QSettings for persistent app configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("ThemeEdit", "ThemeEdit")

    # -- display --

    @property
    def color_format(self) -> str:
        raw = self._qs.value("ui/color_format", DEFAULT_COLOR_FORMAT, type=str)
        return normalize_color_format(raw)

    @color_format.setter
    def color_format(self, value: str) -> None:
        self._qs.setValue("ui/color_format", normalize_color_format(value))

    @property
    def dark_mode(self) -> bool:
        return self._qs.value("ui/dark_mode", True, type=bool)

    @dark_mode.setter
    def dark_mode(self, value: bool) -> None:
        self._qs.setValue("ui/dark_mode", bool(value))

    @property
    def editor_theme(self) -> str:
        raw = self._qs.value("ui/editor_theme", "", type=str)
        return (raw or "").strip()

    @editor_theme.setter
    def editor_theme(self, value: str) -> None:
        self._qs.setValue("ui/editor_theme", (value or "").strip())

    # -- editing --

    @property
    def live_edit_debounce_ms(self) -> int:
        raw = self._qs.value("editor/live_edit_debounce_ms", DEFAULT_LIVE_EDIT_DEBOUNCE_MS, type=int)
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return DEFAULT_LIVE_EDIT_DEBOUNCE_MS
        return max(_MIN_DEBOUNCE_MS, min(_MAX_DEBOUNCE_MS, value))

    @live_edit_debounce_ms.setter
    def live_edit_debounce_ms(self, value: int) -> None:
        self._qs.setValue(
            "editor/live_edit_debounce_ms",
            max(_MIN_DEBOUNCE_MS, min(_MAX_DEBOUNCE_MS, int(value))),
        )

    def preferences(self) -> EditorPreferences:
        return EditorPreferences(
            color_format=self.color_format,
            dark_mode=self.dark_mode,
            editor_theme=self.editor_theme,
            live_edit_debounce_ms=self.live_edit_debounce_ms,
        )

    # -- helpers --

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "themeedit"

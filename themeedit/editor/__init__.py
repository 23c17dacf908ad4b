"""Qt editor controller exports."""

from themeedit.editor.controller import ThemeEditorController

__all__ = ["ThemeEditorController"]

"""Theme color engine exports."""

from themeedit.core.color_conversion import format_color_as, is_valid_hex, parse_color, to_rgb
from themeedit.core.color_extractor import extract_colors_as_map, get_all_theme_colors
from themeedit.core.document_mutator import add_color, has_color_at_path, update_color_at_path
from themeedit.core.history import MAX_HISTORY, EditorState, reduce
from themeedit.core.models import ColorEntry, NormalizedPath, ParseFailure, ParseSuccess
from themeedit.core.path_locator import build_json_path, normalize_color_path
from themeedit.core.theme_parser import parse_theme_file, serialize_theme

__all__ = [
    "MAX_HISTORY",
    "ColorEntry",
    "EditorState",
    "NormalizedPath",
    "ParseFailure",
    "ParseSuccess",
    "add_color",
    "build_json_path",
    "extract_colors_as_map",
    "format_color_as",
    "get_all_theme_colors",
    "has_color_at_path",
    "is_valid_hex",
    "normalize_color_path",
    "parse_color",
    "parse_theme_file",
    "reduce",
    "serialize_theme",
    "to_rgb",
    "update_color_at_path",
]

"""Command-line bootstrap for headless theme editing."""

from __future__ import annotations

import argparse
import logging
from logging.handlers import RotatingFileHandler
import sys
from pathlib import Path
from typing import Sequence

from themeedit import __version__
from themeedit.config.settings import AppSettings
from themeedit.core.color_conversion import format_color_as, parse_color, to_hex
from themeedit.core.color_extractor import extract_colors, filter_colors, get_all_theme_colors
from themeedit.core.document_mutator import has_color_at_path
from themeedit.core.history import AddColor, Commit, EditorState, Load, SetActiveTheme, reduce
from themeedit.core.models import COLOR_FORMATS, ColorEntry
from themeedit.core.path_locator import build_json_path, normalize_color_path
from themeedit.core.theme_parser import parse_theme_file
from themeedit.errors import (
    ErrorCode,
    ThemeEditError,
    classify_exception,
    format_error_for_user,
    theme_error_from_message,
)
from themeedit.runtime_paths import is_frozen, package_root


def _configure_startup_logger(settings: AppSettings) -> logging.Logger:
    logger = logging.getLogger("themeedit.startup")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    log_dir = settings.app_data_dir / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / "startup.log",
        maxBytes=512_000,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise classify_exception(exc, path=path) from exc


def _write_text(path: Path, text: str) -> None:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise classify_exception(exc, path=path) from exc


def _load_state(path: Path) -> EditorState:
    state = reduce(EditorState(), Load(_read_text(path), path.name))
    if state.error is not None:
        raise theme_error_from_message(state.error, path=path)
    return state


def _select_variant(state: EditorState, index: int, path: Path) -> EditorState:
    themes = state.document["themes"]
    if not 0 <= index < len(themes):
        raise ThemeEditError(
            ErrorCode.VARIANT_NOT_FOUND,
            path=path,
            details={"index": index, "variants": len(themes)},
        )
    return state if index == 0 else reduce(state, SetActiveTheme(index))


def _render_value(entry: ColorEntry, fmt: str) -> str:
    parsed = parse_color(entry.value)
    return format_color_as(parsed, fmt) if parsed is not None else entry.value


# -- commands --


def _cmd_colors(args: argparse.Namespace, settings: AppSettings, logger: logging.Logger) -> int:
    path = Path(args.file)
    state = _select_variant(_load_state(path), args.theme, path)
    theme = state.current_theme
    if args.all:
        entries = get_all_theme_colors(theme["style"], theme["appearance"])
    else:
        entries = extract_colors(theme["style"])
    if args.filter:
        entries = filter_colors(entries, args.filter)
    fmt = args.format or settings.color_format
    for entry in entries:
        marker = "" if entry.defined else "  (default)"
        print(f"{entry.path}\t{_render_value(entry, fmt)}{marker}")
    logger.info("listed %d colors from %s", len(entries), path)
    return 0


def _cmd_set(args: argparse.Namespace, settings: AppSettings, logger: logging.Logger) -> int:
    path = Path(args.file)
    value = to_hex(args.value)
    if value is None:
        raise ThemeEditError(ErrorCode.COLOR_INVALID, details={"value": args.value})
    normalized = normalize_color_path(args.path)
    theme_index = args.theme if normalized.theme_index is None else normalized.theme_index
    state = _select_variant(_load_state(path), theme_index, path)
    target = normalized.path
    missing = ThemeEditError(
        ErrorCode.COLOR_PATH_NOT_FOUND,
        path=path,
        details={"color_path": target, "theme": theme_index},
    )
    if args.create:
        updated = reduce(state, AddColor(target, value))
    elif has_color_at_path(state.document, theme_index, target):
        updated = reduce(state, Commit(target, value))
    else:
        raise missing
    if updated.history_index == state.history_index:
        raise missing
    output = Path(args.output) if args.output else path
    _write_text(output, updated.serialized + "\n")
    logger.info("set %s=%s in %s", target, value, output)
    return 0


def _cmd_normalize(args: argparse.Namespace, settings: AppSettings, logger: logging.Logger) -> int:
    path = Path(args.file)
    result = parse_theme_file(_read_text(path))
    if not result.success:
        raise theme_error_from_message(result.error, path=path)
    if args.output:
        _write_text(Path(args.output), result.normalized + "\n")
        logger.info("normalized %s into %s", path, args.output)
    else:
        print(result.normalized)
    return 0


def _cmd_path(args: argparse.Namespace, settings: AppSettings, logger: logging.Logger) -> int:
    text = _read_text(Path(args.file))
    normalized = normalize_color_path(build_json_path(text, args.offset))
    theme = "" if normalized.theme_index is None else f"\ttheme={normalized.theme_index}"
    print(f"{normalized.path}{theme}")
    return 0


def _cmd_convert(args: argparse.Namespace, settings: AppSettings, logger: logging.Logger) -> int:
    parsed = parse_color(args.color)
    if parsed is None:
        raise ThemeEditError(ErrorCode.COLOR_INVALID, details={"value": args.color})
    print(format_color_as(parsed, args.format or settings.color_format))
    if not parsed.in_gamut:
        print("warning: color is outside the sRGB gamut and was clamped", file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="themeedit", description="Inspect and edit theme colors.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    colors = sub.add_parser("colors", help="list the colors of one theme variant")
    colors.add_argument("file")
    colors.add_argument("--theme", type=int, default=0, help="variant index (default 0)")
    colors.add_argument("--all", action="store_true", help="include catalog colors the theme omits")
    colors.add_argument("--filter", default="", help="case-insensitive search term")
    colors.add_argument("--format", choices=COLOR_FORMATS, default=None)
    colors.set_defaults(handler=_cmd_colors)

    set_cmd = sub.add_parser("set", help="replace an existing color and save")
    set_cmd.add_argument("file")
    set_cmd.add_argument("path", help="color path, e.g. style/syntax/keyword/color")
    set_cmd.add_argument("value", help="hex, rgb(), hsl() or oklch() literal")
    set_cmd.add_argument("--theme", type=int, default=0)
    set_cmd.add_argument("--output", default=None, help="write here instead of FILE")
    set_cmd.add_argument(
        "--create",
        action="store_true",
        help="add the color, and any missing parent objects, when PATH does not exist",
    )
    set_cmd.set_defaults(handler=_cmd_set)

    normalize = sub.add_parser("normalize", help="print canonical JSON with normalized hex colors")
    normalize.add_argument("file")
    normalize.add_argument("--output", default=None)
    normalize.set_defaults(handler=_cmd_normalize)

    path_cmd = sub.add_parser("path", help="show the color path at a character offset")
    path_cmd.add_argument("file")
    path_cmd.add_argument("offset", type=int)
    path_cmd.set_defaults(handler=_cmd_path)

    convert = sub.add_parser("convert", help="convert a color literal between formats")
    convert.add_argument("color")
    convert.add_argument("--format", choices=COLOR_FORMATS, default=None)
    convert.set_defaults(handler=_cmd_convert)

    return parser


def run_app(argv: Sequence[str] | None = None, settings: AppSettings | None = None) -> int:
    """Parse arguments and run one command."""
    args = build_parser().parse_args(argv)
    settings = settings or AppSettings()
    logger = _configure_startup_logger(settings)
    logger.info("startup mode frozen=%s package_root=%s command=%s", is_frozen(), package_root(), args.command)
    try:
        return args.handler(args, settings, logger)
    except ThemeEditError as exc:
        logger.warning("%s failed: %s", args.command, exc.to_dict())
        print(format_error_for_user(exc), file=sys.stderr)
        return 1

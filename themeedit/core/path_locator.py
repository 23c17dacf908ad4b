"""Color path helpers and text-offset path reconstruction.

Paths address values inside a theme document. Segments are joined with ``/``;
array positions are written ``[n]``. Dots are literal characters inside a
key, so ``style/editor.background`` is two segments.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Sequence, Union

from themeedit.core.models import NormalizedPath

PATH_SEPARATOR = "/"

_INDEX_SEGMENT_RE = re.compile(r"^\[(\d+)\]$")
_THEME_PREFIX_RE = re.compile(r"^themes/\[(\d+)\]/")
_LEGACY_THEME_PREFIX = "themes/"
_ACCENTS_PREFIX = "style/accents/"
_PRIMITIVE_START = frozenset("-0123456789tfnTFNI+.")

PathLike = Union[str, Sequence[str]]


def index_segment(index: int) -> str:
    return f"[{index}]"


def parse_index_segment(segment: str) -> int | None:
    """Return the array index a ``[n]`` segment names, else ``None``."""
    match = _INDEX_SEGMENT_RE.match(segment)
    if not match:
        return None
    return int(match.group(1))


def split_path(path: PathLike) -> list[str]:
    """Split a canonical path string; segment sequences pass through."""
    if isinstance(path, str):
        return [segment for segment in path.split(PATH_SEPARATOR) if segment]
    return [str(segment) for segment in path]


def join_path(segments: Sequence[str]) -> str:
    return PATH_SEPARATOR.join(segments)


def normalize_color_path(path: str) -> NormalizedPath:
    """Turn a document-level path into a theme-relative one.

    ``themes/[2]/style/background`` becomes ``style/background`` with theme
    index 2; the legacy ``themes/`` prefix is dropped with no index. Named
    accents (``style/accents/<name>``) are flattened into ``style/<name>``;
    indexed accents (``style/accents/[n]``) are kept.
    """
    theme_index: int | None = None
    match = _THEME_PREFIX_RE.match(path)
    if match:
        theme_index = int(match.group(1))
        path = path[match.end():]
    elif path.startswith(_LEGACY_THEME_PREFIX):
        path = path[len(_LEGACY_THEME_PREFIX):]

    if path.startswith(_ACCENTS_PREFIX):
        rest = path[len(_ACCENTS_PREFIX):]
        first = rest.split(PATH_SEPARATOR, 1)[0]
        if first and parse_index_segment(first) is None:
            path = f"style/{rest}"

    return NormalizedPath(path=path, theme_index=theme_index)


@dataclass(slots=True)
class _ObjectScope:
    expecting_key: bool = True


@dataclass(slots=True)
class _ArrayScope:
    index: int = 0


class _PathScanner:
    """Forward scanner tracking the structural path up to an offset."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._segments: list[str] = []
        self._scopes: list[_ObjectScope | _ArrayScope] = []
        self._restore: list[int] = []
        self._pending_key: str | None = None

    def _current(self) -> _ObjectScope | _ArrayScope | None:
        return self._scopes[-1] if self._scopes else None

    def _start_value(self) -> None:
        restore_length = len(self._segments)
        if self._pending_key is not None:
            self._segments.append(self._pending_key)
            self._pending_key = None
        scope = self._current()
        if isinstance(scope, _ArrayScope):
            self._segments.append(index_segment(scope.index))
        self._restore.append(restore_length)

    def _end_value(self) -> None:
        if self._restore:
            del self._segments[self._restore.pop():]

    def _skip_comment(self, start: int) -> int:
        """Index just past a comment opening at ``start``, or ``start`` if none."""
        text = self._text
        if text.startswith("//", start):
            end = text.find("\n", start + 2)
            return len(text) if end < 0 else end + 1
        if text.startswith("/*", start):
            end = text.find("*/", start + 2)
            return len(text) if end < 0 else end + 2
        return start

    def _skip_trivia(self, start: int) -> int:
        text = self._text
        i = start
        while i < len(text):
            if text[i].isspace():
                i += 1
                continue
            after = self._skip_comment(i)
            if after == i:
                break
            i = after
        return i

    def _string_end(self, start: int) -> int:
        """Index of the quote closing the string opened at ``start``, or -1."""
        text = self._text
        quote = text[start]
        i = start + 1
        while i < len(text):
            char = text[i]
            if char == "\\":
                i += 2
                continue
            if char == quote:
                return i
            i += 1
        return -1

    def _identifier_end(self, start: int) -> int:
        text = self._text
        i = start
        while i < len(text) and (text[i].isalnum() or text[i] in "_$"):
            i += 1
        return i

    def _followed_by_colon(self, close: int) -> bool:
        if close < 0:
            return False
        i = self._skip_trivia(close + 1)
        return i < len(self._text) and self._text[i] == ":"

    def _expecting_key(self) -> bool:
        scope = self._current()
        return isinstance(scope, _ObjectScope) and scope.expecting_key

    def _is_bare_key(self, start: int) -> bool:
        """True when an unquoted JSON5 key followed by a colon starts here."""
        char = self._text[start]
        if not (char.isalpha() or char in "_$") or not self._expecting_key():
            return False
        return self._followed_by_colon(self._identifier_end(start) - 1)

    def _set_key(self, key: str) -> None:
        self._pending_key = key
        scope = self._current()
        if isinstance(scope, _ObjectScope):
            scope.expecting_key = False

    def scan(self, offset: int) -> list[str]:
        text = self._text
        limit = min(max(offset, 0), len(text))
        in_string = False
        quote = '"'
        string_is_key = False
        key_start = -1
        in_primitive = False

        i = 0
        while i < limit:
            char = text[i]

            if in_string:
                if char == "\\":
                    i += 2
                    continue
                if char == quote:
                    in_string = False
                    if string_is_key:
                        self._set_key(_unescape_key(text[key_start:i], quote))
                    else:
                        self._end_value()
                i += 1
                continue

            if in_primitive:
                if char in ",}]" or char.isspace() or self._skip_comment(i) != i:
                    in_primitive = False
                    self._end_value()
                else:
                    i += 1
                    continue

            skipped = self._skip_comment(i)
            if skipped != i:
                i = skipped
                continue

            if char in "\"'":
                string_is_key = self._expecting_key() and self._followed_by_colon(self._string_end(i))
                if not string_is_key:
                    self._start_value()
                in_string = True
                quote = char
                key_start = i + 1
            elif char in "{[":
                self._start_value()
                self._scopes.append(_ObjectScope() if char == "{" else _ArrayScope())
            elif char in "}]":
                if self._scopes:
                    self._scopes.pop()
                self._end_value()
            elif char == ",":
                scope = self._current()
                if isinstance(scope, _ArrayScope):
                    scope.index += 1
                elif isinstance(scope, _ObjectScope):
                    scope.expecting_key = True
                self._pending_key = None
            elif self._is_bare_key(i):
                end = self._identifier_end(i)
                if end > limit:
                    break
                self._set_key(text[i:end])
                i = end
                continue
            elif char in _PRIMITIVE_START:
                self._start_value()
                in_primitive = True
            i += 1

        segments = list(self._segments)
        if self._pending_key is not None:
            segments.append(self._pending_key)
        return segments


def _unescape_key(raw: str, quote: str = '"') -> str:
    if quote == "'":
        raw = raw.replace("\\'", "'").replace('\\"', '"').replace('"', '\\"')
    try:
        return json.loads(f'"{raw}"')
    except ValueError:
        return raw


def build_json_segments(text: str, offset: int) -> list[str]:
    """Reconstruct the segment list addressing the value at ``offset``."""
    return _PathScanner(text).scan(offset)


def build_json_path(text: str, offset: int) -> str:
    """Reconstruct the canonical path of the value at ``offset`` in ``text``."""
    return join_path(build_json_segments(text, offset))

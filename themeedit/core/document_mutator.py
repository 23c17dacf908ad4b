"""Immutable color updates addressed by color paths."""

from __future__ import annotations

import copy
import logging
from typing import Any

from themeedit.core.models import ThemeFamily
from themeedit.core.path_locator import PathLike, parse_index_segment, split_path

logger = logging.getLogger(__name__)


def _variant(document: ThemeFamily, variant_index: int) -> dict[str, Any] | None:
    themes = document.get("themes") if isinstance(document, dict) else None
    if not isinstance(themes, list) or not 0 <= variant_index < len(themes):
        return None
    variant = themes[variant_index]
    return variant if isinstance(variant, dict) else None


def _unflatten_accents(variant: dict[str, Any], segments: list[str]) -> list[str]:
    """Point ``style/<name>`` at ``style/accents/<name>`` for named accents."""
    if len(segments) != 2 or segments[0] != "style":
        return segments
    style = variant.get("style")
    if not isinstance(style, dict) or segments[1] in style:
        return segments
    accents = style.get("accents")
    if isinstance(accents, dict) and segments[1] in accents:
        return ["style", "accents", segments[1]]
    return segments


def _child(node: Any, segment: str) -> Any:
    index = parse_index_segment(segment)
    if index is not None:
        if isinstance(node, list) and index < len(node):
            return node[index]
        return None
    if isinstance(node, dict):
        return node.get(segment)
    return None


def _assign(node: Any, segment: str, value: Any) -> bool:
    index = parse_index_segment(segment)
    if index is not None:
        if isinstance(node, list) and index < len(node):
            node[index] = value
            return True
        return False
    if isinstance(node, dict):
        node[segment] = value
        return True
    return False


def _apply(
    document: ThemeFamily,
    variant_index: int,
    path: PathLike,
    new_value: str,
    *,
    create_missing: bool,
) -> ThemeFamily:
    segments = split_path(path)
    if not segments:
        return document
    variant = _variant(document, variant_index)
    if variant is None:
        logger.debug("no theme variant at index %s", variant_index)
        return document
    segments = _unflatten_accents(variant, segments)

    updated = copy.deepcopy(document)
    current: Any = updated["themes"][variant_index]
    for segment in segments[:-1]:
        child = _child(current, segment)
        creatable = isinstance(current, dict) and parse_index_segment(segment) is None
        if child is None and create_missing and creatable:
            child = {}
            current[segment] = child
        if not isinstance(child, (dict, list)):
            logger.debug("color path %r does not resolve at %r", "/".join(segments), segment)
            return document
        current = child

    if not _assign(current, segments[-1], new_value):
        logger.debug("color path %r has no assignable leaf", "/".join(segments))
        return document
    return updated


def update_color_at_path(
    document: ThemeFamily,
    variant_index: int,
    path: PathLike,
    new_value: str,
) -> ThemeFamily:
    """Return a copy of ``document`` with the color at ``path`` replaced.

    ``path`` is relative to the variant (``style/...``) and may be a string or
    a segment sequence; use a sequence when a key contains ``/``. When the
    path does not resolve, ``document`` itself is returned, so callers detect
    a miss by identity.
    """
    return _apply(document, variant_index, path, new_value, create_missing=False)


def add_color(
    document: ThemeFamily,
    variant_index: int,
    path: PathLike,
    value: str,
) -> ThemeFamily:
    """Like :func:`update_color_at_path`, creating missing parent objects."""
    return _apply(document, variant_index, path, value, create_missing=True)


def has_color_at_path(document: ThemeFamily, variant_index: int, path: PathLike) -> bool:
    """True when ``path`` names an existing non-container value in the variant.

    Null values count, since a null style key is an unset color slot.
    """
    segments = split_path(path)
    variant = _variant(document, variant_index)
    if not segments or variant is None:
        return False
    segments = _unflatten_accents(variant, segments)
    parent: Any = variant
    for segment in segments[:-1]:
        parent = _child(parent, segment)
        if not isinstance(parent, (dict, list)):
            return False
    leaf = segments[-1]
    index = parse_index_segment(leaf)
    if index is not None:
        present = isinstance(parent, list) and index < len(parent)
    else:
        present = isinstance(parent, dict) and leaf in parent
    return present and not isinstance(_child(parent, leaf), (dict, list))

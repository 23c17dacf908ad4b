"""Locate bundled package data from a source checkout or a frozen build."""

from __future__ import annotations

from pathlib import Path
import sys


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def package_root() -> Path:
    """Directory holding the package's ``data`` folder.

    Frozen builds unpack under ``sys._MEIPASS``, with or without a nested
    ``themeedit`` directory depending on how the data files were collected.
    """
    meipass = getattr(sys, "_MEIPASS", None) if is_frozen() else None
    if not meipass:
        return Path(__file__).resolve().parent
    nested = Path(meipass) / "themeedit"
    return nested if nested.exists() else Path(meipass)


def data_path(*parts: str) -> Path:
    return package_root().joinpath("data", *parts)

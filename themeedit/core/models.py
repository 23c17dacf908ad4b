"""Theme editor core models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

Appearance = Literal["dark", "light"]
ColorFormat = Literal["hex", "rgb", "hsl", "oklch"]

COLOR_FORMATS: tuple[str, ...] = ("hex", "rgb", "hsl", "oklch")
APPEARANCES: tuple[str, ...] = ("dark", "light")

# A theme family is kept as the plain JSON tree the author wrote.
ThemeFamily = dict[str, Any]
ThemeStyle = dict[str, Any]


@dataclass(frozen=True, slots=True)
class RgbColor:
    """Integer RGB channels (0-255) with alpha in [0, 1]."""

    r: int
    g: int
    b: int
    alpha: float = 1.0


@dataclass(frozen=True, slots=True)
class HslColor:
    """HSL with hue in degrees and saturation/lightness in percent."""

    h: int
    s: int
    l: int
    alpha: float = 1.0


@dataclass(frozen=True, slots=True)
class HsvColor:
    """HSV with hue in degrees and saturation/value in percent."""

    h: int
    s: int
    v: int
    alpha: float = 1.0


@dataclass(frozen=True, slots=True)
class OklchColor:
    """OKLCH with lightness in [0, 1], chroma >= 0 and hue in degrees."""

    l: float
    c: float
    h: float
    alpha: float = 1.0


@dataclass(frozen=True, slots=True)
class ParsedColor:
    """A color literal resolved into every display representation."""

    hex: str
    rgb: RgbColor
    hsl: HslColor
    hsv: HsvColor
    oklch: OklchColor
    alpha: float
    in_gamut: bool


@dataclass(frozen=True, slots=True)
class ParseSuccess:
    """A theme file that parsed and validated."""

    data: ThemeFamily
    normalized: str
    success: Literal[True] = True


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """A theme file that failed to parse or validate."""

    error: str
    line: int | None = None
    column: int | None = None
    success: Literal[False] = False


ParseThemeResult = Union[ParseSuccess, ParseFailure]


@dataclass(frozen=True, slots=True)
class ColorEntry:
    """One color slot of a theme variant, flattened for listing."""

    path: str
    segments: tuple[str, ...]
    key: str
    value: str
    defined: bool = True
    description: str | None = None


@dataclass(frozen=True, slots=True)
class ColorStats:
    """Summary counts for a style map."""

    total_colors: int
    unique_colors: int
    colors_by_category: dict[str, int]


@dataclass(frozen=True, slots=True)
class NormalizedPath:
    """A theme-relative color path plus the variant it was found in, if known."""

    path: str
    theme_index: int | None

"""Color conversion between hex, RGB, HSL, HSV and OKLCH.

Hex strings are the storage form; every other representation is derived on
demand for display and editing. OKLab math follows Björn Ottosson's published
matrices with the standard sRGB transfer function.
"""

from __future__ import annotations

import colorsys
import math
import re
from dataclasses import dataclass

from themeedit.core.models import (
    HslColor,
    HsvColor,
    OklchColor,
    ParsedColor,
    RgbColor,
)

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_COLOR_RE = re.compile(r"^\s*(rgba?|hsla?|oklch)\(\s*(.*?)\s*\)\s*$", re.IGNORECASE)
_NUMBER_RE = re.compile(r"^([+-]?(?:\d+\.?\d*|\.\d+)(?:e[+-]?\d+)?)(%|deg)?$", re.IGNORECASE)

_GAMUT_EPSILON = 1e-6
_GAMUT_SEARCH_STEPS = 24
_FALLBACK_HEX = "#000000"


@dataclass(frozen=True, slots=True)
class _Rgba:
    """Floating point sRGB channels in [0, 1]."""

    r: float
    g: float
    b: float
    a: float = 1.0


# ---------------------------------------------------------------------------
# Precision
# ---------------------------------------------------------------------------


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to(value: float, decimals: int) -> float:
    """Round to ``decimals`` places, halves rounding up."""
    factor = 10 ** decimals
    return _round_half_up(value * factor) / factor


def round_rgb(value: float) -> int:
    return _round_half_up(max(0.0, min(255.0, value)))


def round_hue(value: float) -> int:
    return _round_half_up(value % 360) % 360


def round_percent(value: float) -> int:
    return _round_half_up(max(0.0, min(100.0, value)))


def round_oklch_l(value: float) -> float:
    return round_to(max(0.0, min(1.0, value)), 3)


def round_oklch_c(value: float) -> float:
    return round_to(max(0.0, value), 3)


def round_oklch_h(value: float) -> float:
    return round_to(value % 360, 1) % 360


def round_alpha(value: float) -> float:
    return round_to(max(0.0, min(1.0, value)), 2)


# ---------------------------------------------------------------------------
# Hex
# ---------------------------------------------------------------------------


def is_valid_hex(value: object) -> bool:
    return isinstance(value, str) and bool(_HEX_COLOR_RE.match(value))


def normalize_hex(value: str) -> str:
    """Expand short hex forms and uppercase; invalid input is returned as is."""
    if not is_valid_hex(value):
        return value
    digits = value[1:]
    if len(digits) in (3, 4):
        digits = "".join(ch * 2 for ch in digits)
    return f"#{digits.upper()}"


def extract_alpha_from_hex(value: str) -> float:
    normalized = normalize_hex(value)
    if is_valid_hex(normalized) and len(normalized) == 9:
        return round_alpha(int(normalized[7:9], 16) / 255)
    return 1.0


def _hex_to_rgba(value: str) -> _Rgba | None:
    if not is_valid_hex(value):
        return None
    normalized = normalize_hex(value)
    r = int(normalized[1:3], 16) / 255
    g = int(normalized[3:5], 16) / 255
    b = int(normalized[5:7], 16) / 255
    a = int(normalized[7:9], 16) / 255 if len(normalized) == 9 else 1.0
    return _Rgba(r, g, b, a)


def _rgba_to_hex(color: _Rgba, *, include_alpha: bool = True) -> str:
    channels = [round_rgb(color.r * 255), round_rgb(color.g * 255), round_rgb(color.b * 255)]
    if include_alpha and color.a < 1:
        channels.append(round_rgb(color.a * 255))
    return "#" + "".join(f"{channel:02X}" for channel in channels)


# ---------------------------------------------------------------------------
# OKLab / OKLCH
# ---------------------------------------------------------------------------


def _srgb_to_linear(channel: float) -> float:
    magnitude = abs(channel)
    if magnitude <= 0.04045:
        return channel / 12.92
    return math.copysign(((magnitude + 0.055) / 1.055) ** 2.4, channel)


def _linear_to_srgb(channel: float) -> float:
    magnitude = abs(channel)
    if magnitude <= 0.0031308:
        return channel * 12.92
    return math.copysign(1.055 * magnitude ** (1 / 2.4) - 0.055, channel)


def _cbrt(value: float) -> float:
    return math.copysign(abs(value) ** (1 / 3), value)


def linear_srgb_to_oklab(r: float, g: float, b: float) -> tuple[float, float, float]:
    l = 0.4122214708 * r + 0.5363325363 * g + 0.0514459929 * b
    m = 0.2119034982 * r + 0.6806995451 * g + 0.1073969566 * b
    s = 0.0883024619 * r + 0.2817188376 * g + 0.6299787005 * b

    l_, m_, s_ = _cbrt(l), _cbrt(m), _cbrt(s)

    return (
        0.2104542553 * l_ + 0.7936177850 * m_ - 0.0040720468 * s_,
        1.9779984951 * l_ - 2.4285922050 * m_ + 0.4505937099 * s_,
        0.0259040371 * l_ + 0.7827717662 * m_ - 0.8086757660 * s_,
    )


def oklab_to_linear_srgb(L: float, a: float, b: float) -> tuple[float, float, float]:
    l_ = L + 0.3963377774 * a + 0.2158037573 * b
    m_ = L - 0.1055613458 * a - 0.0638541728 * b
    s_ = L - 0.0894841775 * a - 1.2914855480 * b

    l, m, s = l_ ** 3, m_ ** 3, s_ ** 3

    return (
        +4.0767416621 * l - 3.3077115913 * m + 0.2309699292 * s,
        -1.2684380046 * l + 2.6097574011 * m - 0.3413193965 * s,
        -0.0041960863 * l - 0.7034186147 * m + 1.7076147010 * s,
    )


def srgb_to_oklch(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert gamma-encoded sRGB channels in [0, 1] to unrounded OKLCH."""
    L, a, ok_b = linear_srgb_to_oklab(_srgb_to_linear(r), _srgb_to_linear(g), _srgb_to_linear(b))
    chroma = math.hypot(a, ok_b)
    hue = math.degrees(math.atan2(ok_b, a)) % 360 if chroma > 1e-7 else 0.0
    return L, chroma, hue


def _oklch_to_srgb_unclamped(l: float, c: float, h: float) -> tuple[float, float, float]:
    radians = math.radians(h % 360)
    lr, lg, lb = oklab_to_linear_srgb(l, c * math.cos(radians), c * math.sin(radians))
    return _linear_to_srgb(lr), _linear_to_srgb(lg), _linear_to_srgb(lb)


def _channels_in_gamut(channels: tuple[float, ...]) -> bool:
    return all(-_GAMUT_EPSILON <= channel <= 1 + _GAMUT_EPSILON for channel in channels)


def oklch_to_srgb(l: float, c: float, h: float) -> tuple[tuple[float, float, float], bool]:
    """Convert OKLCH to clamped sRGB channels.

    Returns the channels and an ``out_of_gamut`` flag that is set whenever
    clamping was needed to land inside [0, 1].
    """
    channels = _oklch_to_srgb_unclamped(l, c, h)
    out_of_gamut = not _channels_in_gamut(channels)
    clamped = tuple(max(0.0, min(1.0, channel)) for channel in channels)
    return clamped, out_of_gamut  # type: ignore[return-value]


def is_oklch_in_gamut(l: float, c: float, h: float) -> bool:
    return _channels_in_gamut(_oklch_to_srgb_unclamped(l, c, h))


def gamut_map_oklch(l: float, c: float, h: float) -> tuple[float, float, float]:
    """Reduce chroma at fixed lightness and hue until the color fits sRGB."""
    if l >= 1:
        return 1.0, 0.0, h
    if l <= 0:
        return 0.0, 0.0, h
    if is_oklch_in_gamut(l, c, h):
        return l, c, h
    low, high = 0.0, max(0.0, c)
    for _ in range(_GAMUT_SEARCH_STEPS):
        mid = (low + high) / 2
        if is_oklch_in_gamut(l, mid, h):
            low = mid
        else:
            high = mid
    return l, low, h


# ---------------------------------------------------------------------------
# Functional literals
# ---------------------------------------------------------------------------


def _split_arguments(body: str) -> tuple[list[str], str | None] | None:
    alpha_token: str | None = None
    if "/" in body:
        main, alpha_part = body.split("/", 1)
        alpha_token = alpha_part.strip()
        if not alpha_token or "/" in alpha_token:
            return None
    else:
        main = body
    tokens = [token for token in re.split(r"[\s,]+", main.strip()) if token]
    if alpha_token is None and len(tokens) == 4:
        alpha_token = tokens.pop()
    if len(tokens) != 3:
        return None
    return tokens, alpha_token


def _parse_number(token: str) -> tuple[float, str] | None:
    match = _NUMBER_RE.match(token.strip())
    if not match:
        return None
    return float(match.group(1)), (match.group(2) or "").lower()


def _parse_alpha(token: str | None) -> float | None:
    if token is None:
        return 1.0
    parsed = _parse_number(token)
    if parsed is None:
        return None
    value, unit = parsed
    if unit == "deg":
        return None
    if unit == "%":
        value /= 100
    return max(0.0, min(1.0, value))


def _parse_rgb_args(tokens: list[str]) -> tuple[float, float, float] | None:
    channels: list[float] = []
    for token in tokens:
        parsed = _parse_number(token)
        if parsed is None or parsed[1] == "deg":
            return None
        value, unit = parsed
        channel = value / 100 if unit == "%" else value / 255
        channels.append(max(0.0, min(1.0, channel)))
    return channels[0], channels[1], channels[2]


def _parse_hsl_args(tokens: list[str]) -> tuple[float, float, float] | None:
    hue = _parse_number(tokens[0])
    sat = _parse_number(tokens[1])
    light = _parse_number(tokens[2])
    if hue is None or sat is None or light is None:
        return None
    if hue[1] == "%" or sat[1] == "deg" or light[1] == "deg":
        return None
    s = max(0.0, min(100.0, sat[0]))
    l = max(0.0, min(100.0, light[0]))
    return colorsys.hls_to_rgb((hue[0] % 360) / 360, l / 100, s / 100)


def _parse_oklch_args(tokens: list[str]) -> tuple[float, float, float] | None:
    light = _parse_number(tokens[0])
    chroma = _parse_number(tokens[1])
    hue = _parse_number(tokens[2])
    if light is None or chroma is None or hue is None:
        return None
    if light[1] == "deg" or chroma[1] == "deg" or hue[1] == "%":
        return None
    l = light[0] / 100 if light[1] == "%" else light[0]
    # 100% chroma is 0.4 in CSS Color 4.
    c = chroma[0] * 0.4 / 100 if chroma[1] == "%" else chroma[0]
    return l, max(0.0, c), hue[0]


def _parse_functional(value: str) -> tuple[_Rgba, bool] | None:
    match = _FUNC_COLOR_RE.match(value)
    if not match:
        return None
    name = match.group(1).lower()
    split = _split_arguments(match.group(2))
    if split is None:
        return None
    tokens, alpha_token = split
    alpha = _parse_alpha(alpha_token)
    if alpha is None:
        return None

    if name in ("rgb", "rgba"):
        channels = _parse_rgb_args(tokens)
        if channels is None:
            return None
        return _Rgba(*channels, a=alpha), True
    if name in ("hsl", "hsla"):
        channels = _parse_hsl_args(tokens)
        if channels is None:
            return None
        return _Rgba(*channels, a=alpha), True

    lch = _parse_oklch_args(tokens)
    if lch is None:
        return None
    in_gamut = is_oklch_in_gamut(*lch)
    (r, g, b), _ = oklch_to_srgb(*gamut_map_oklch(*lch))
    return _Rgba(r, g, b, alpha), in_gamut


def _to_rgba(value: str) -> tuple[_Rgba, bool] | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    rgba = _hex_to_rgba(stripped)
    if rgba is not None:
        return rgba, True
    return _parse_functional(stripped)


# ---------------------------------------------------------------------------
# Conversions from the internal record
# ---------------------------------------------------------------------------


def _rgb_values(color: _Rgba) -> RgbColor:
    return RgbColor(
        r=round_rgb(color.r * 255),
        g=round_rgb(color.g * 255),
        b=round_rgb(color.b * 255),
        alpha=round_alpha(color.a),
    )


def _hsl_values(color: _Rgba) -> HslColor:
    h, l, s = colorsys.rgb_to_hls(color.r, color.g, color.b)
    return HslColor(
        h=round_hue(h * 360),
        s=round_percent(s * 100),
        l=round_percent(l * 100),
        alpha=round_alpha(color.a),
    )


def _hsv_values(color: _Rgba) -> HsvColor:
    h, s, v = colorsys.rgb_to_hsv(color.r, color.g, color.b)
    return HsvColor(
        h=round_hue(h * 360),
        s=round_percent(s * 100),
        v=round_percent(v * 100),
        alpha=round_alpha(color.a),
    )


def _oklch_values(color: _Rgba) -> OklchColor:
    l, c, h = srgb_to_oklch(color.r, color.g, color.b)
    return OklchColor(
        l=round_oklch_l(l),
        c=round_oklch_c(c),
        h=round_oklch_h(h),
        alpha=round_alpha(color.a),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_color(value: str) -> ParsedColor | None:
    """Parse a hex or functional color literal into every representation.

    Returns ``None`` for anything unsupported (named colors, malformed
    literals); callers display the raw string instead.
    """
    resolved = _to_rgba(value)
    if resolved is None:
        return None
    rgba, in_gamut = resolved
    stripped = value.strip()
    hex_value = normalize_hex(stripped) if is_valid_hex(stripped) else _rgba_to_hex(rgba)
    return ParsedColor(
        hex=hex_value,
        rgb=_rgb_values(rgba),
        hsl=_hsl_values(rgba),
        hsv=_hsv_values(rgba),
        oklch=_oklch_values(rgba),
        alpha=round_alpha(rgba.a),
        in_gamut=in_gamut,
    )


def is_supported_color(value: object) -> bool:
    """True for any hex or functional literal :func:`parse_color` accepts."""
    return isinstance(value, str) and _to_rgba(value) is not None


def to_rgb(value: str) -> RgbColor | None:
    resolved = _to_rgba(value)
    if resolved is None:
        return None
    return _rgb_values(resolved[0])


def to_hex(value: str, *, include_alpha: bool = True) -> str | None:
    """Convert any supported literal to canonical hex."""
    resolved = _to_rgba(value)
    if resolved is None:
        return None
    return _rgba_to_hex(resolved[0], include_alpha=include_alpha)


def colors_equal(first: str, second: str, *, tolerance: int = 3, alpha_tolerance: float = 0.02) -> bool:
    """Compare two literals allowing for format round-trip drift."""
    a = to_rgb(first)
    b = to_rgb(second)
    if a is None or b is None:
        return normalize_hex(first.strip()).lower() == normalize_hex(second.strip()).lower()
    return (
        abs(a.r - b.r) <= tolerance
        and abs(a.g - b.g) <= tolerance
        and abs(a.b - b.b) <= tolerance
        and abs(a.alpha - b.alpha) < alpha_tolerance
    )


def color_to_hex(color: ParsedColor) -> str:
    """Render a parsed color as hex, with an alpha byte only when translucent."""
    base = color.hex[:7]
    if color.alpha < 1:
        return f"{base}{round_rgb(color.alpha * 255):02X}"
    return base


def rgb_to_hex(r: float, g: float, b: float, a: float = 1.0) -> str:
    return _rgba_to_hex(_Rgba(r / 255, g / 255, b / 255, max(0.0, min(1.0, a))))


def hex_to_rgb(value: str) -> RgbColor | None:
    rgba = _hex_to_rgba(value)
    return _rgb_values(rgba) if rgba is not None else None


def hsl_to_hex(h: float, s: float, l: float, a: float = 1.0) -> str:
    s = max(0.0, min(100.0, s))
    l = max(0.0, min(100.0, l))
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360, l / 100, s / 100)
    return _rgba_to_hex(_Rgba(r, g, b, max(0.0, min(1.0, a))))


def hex_to_hsl(value: str) -> HslColor | None:
    rgba = _hex_to_rgba(value)
    return _hsl_values(rgba) if rgba is not None else None


def hsv_to_hex(h: float, s: float, v: float, a: float = 1.0) -> str:
    s = max(0.0, min(100.0, s))
    v = max(0.0, min(100.0, v))
    r, g, b = colorsys.hsv_to_rgb((h % 360) / 360, s / 100, v / 100)
    return _rgba_to_hex(_Rgba(r, g, b, max(0.0, min(1.0, a))))


def hex_to_hsv(value: str) -> HsvColor | None:
    rgba = _hex_to_rgba(value)
    return _hsv_values(rgba) if rgba is not None else None


def oklch_to_hex(l: float, c: float, h: float, a: float = 1.0) -> str:
    """Convert OKLCH to hex, gamut mapping by chroma reduction."""
    (r, g, b), _ = oklch_to_srgb(*gamut_map_oklch(l, max(0.0, c), h))
    return _rgba_to_hex(_Rgba(r, g, b, max(0.0, min(1.0, a))))


def hex_to_oklch(value: str) -> OklchColor | None:
    rgba = _hex_to_rgba(value)
    return _oklch_values(rgba) if rgba is not None else None


def _format_alpha(alpha: float) -> str:
    return f"{round_alpha(alpha):g}"


def format_color_as(color: ParsedColor, fmt: str) -> str:
    """Render a parsed color as ``hex``, ``rgb``, ``hsl`` or ``oklch`` text."""
    translucent = color.alpha < 1
    if fmt == "rgb":
        rgb = color.rgb
        if translucent:
            return f"rgba({rgb.r}, {rgb.g}, {rgb.b}, {_format_alpha(color.alpha)})"
        return f"rgb({rgb.r}, {rgb.g}, {rgb.b})"
    if fmt == "hsl":
        hsl = color.hsl
        text = f"hsl({hsl.h:03d} {hsl.s}% {hsl.l}%"
        return text + (f" / {_format_alpha(color.alpha)})" if translucent else ")")
    if fmt == "oklch":
        lch = color.oklch
        text = f"oklch({lch.l:.3f} {lch.c:.3f} {lch.h:.1f}"
        return text + (f" / {_format_alpha(color.alpha)})" if translucent else ")")
    return color.hex

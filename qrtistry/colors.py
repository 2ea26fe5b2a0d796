"""Color resolution: solid fills, gradient interpolation and contrast checks."""

import math

from qrtistry.errors import ConfigValidationError
from qrtistry.style import RGB, GradientFill, GradientType, SolidFill


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------

def _clamp01(t: float) -> float:
    return 0.0 if t < 0.0 else 1.0 if t > 1.0 else t


def lerp_rgb(color_a: RGB, color_b: RGB, t: float) -> RGB:
    """Per-channel linear blend, ``t=0`` gives *color_a*, ``t=1`` gives *color_b*.

    Channels are rounded to the nearest integer, which keeps the result
    monotonic in *t* and inside ``[min(a, b), max(a, b)]`` per channel.
    """
    t = _clamp01(t)
    return tuple(
        min(255, max(0, round(a + (b - a) * t)))
        for a, b in zip(color_a, color_b)
    )


def gradient_factor(gradient_type: GradientType, u: float, v: float) -> float:
    """Blend factor in [0, 1] for normalized position ``(u, v)``."""
    if gradient_type is GradientType.HORIZONTAL:
        t = u
    elif gradient_type is GradientType.VERTICAL:
        t = v
    elif gradient_type is GradientType.DIAGONAL:
        t = (u + v) / 2.0
    elif gradient_type is GradientType.RADIAL:
        t = min(1.0, 2.0 * math.hypot(u - 0.5, v - 0.5))
    else:
        raise ValueError(f"unhandled gradient type {gradient_type!r}")
    return _clamp01(t)


def resolve_color(fill: SolidFill | GradientFill, u: float, v: float, dark: bool = True) -> RGB:
    """Concrete color for a dark (or light) element centred at ``(u, v)``."""
    if not dark:
        return fill.background
    if isinstance(fill, SolidFill):
        return fill.foreground
    if isinstance(fill, GradientFill):
        return lerp_rgb(fill.color_a, fill.color_b, gradient_factor(fill.gradient_type, u, v))
    raise TypeError(f"unhandled fill {type(fill).__name__}")


# ---------------------------------------------------------------------------
# WCAG contrast ratio
# ---------------------------------------------------------------------------

def _linearize(channel: int) -> float:
    c = channel / 255.0
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def _luminance(rgb: tuple[int, ...]) -> float:
    r, g, b = [_linearize(ch) for ch in rgb[:3]]
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def check_contrast(fg: tuple[int, ...], bg: tuple[int, ...]) -> float:
    """WCAG contrast ratio between two RGB colours (1.0 - 21.0)."""
    l1 = _luminance(fg)
    l2 = _luminance(bg)
    if l1 < l2:
        l1, l2 = l2, l1
    return (l1 + 0.05) / (l2 + 0.05)


def parse_hex_color(s: str) -> RGB:
    """Parse ``'#RRGGBB'`` / ``'RRGGBB'`` (or the short ``'#RGB'``) into a tuple."""
    raw = s.strip().lstrip("#")
    if len(raw) == 3:
        raw = "".join(ch * 2 for ch in raw)
    if len(raw) != 6:
        raise ConfigValidationError("color", f"{s!r} is not a hex color")
    try:
        return tuple(int(raw[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        raise ConfigValidationError("color", f"{s!r} is not a hex color") from None

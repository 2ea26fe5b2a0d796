"""Style configuration: module/eye shapes, fills, overlays and validated defaults.

A ``StyleConfig`` is immutable and fully validated when constructed, so the
render pipeline never meets an out-of-range value half-way through painting.
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum

from PIL import Image

from qrtistry.errors import ConfigValidationError
from qrtistry.logging import get_logger

log = get_logger("style")

RGB = tuple[int, int, int]

WHITE: RGB = (255, 255, 255)
BLACK: RGB = (0, 0, 0)

OUTPUT_SIZE_RANGE = (128, 2048)
BORDER_RANGE = (0, 10)
LOGO_SIZE_RANGE = (0.05, 0.35)
CORNER_RADIUS_RANGE = (0.0, 0.5)

# WCAG ratio under which dark/light colors are reported as hard to scan
MIN_SCAN_CONTRAST = 3.0


class ModuleShape(Enum):
    SQUARE = "square"
    CIRCLE = "circle"
    ROUNDED_SQUARE = "rounded_square"
    DOTS = "dots"


class EyeShape(Enum):
    STANDARD = "standard"
    CIRCLE = "circle"
    ROUNDED_SQUARE = "rounded_square"
    FLOWER = "flower"
    DIAMOND = "diamond"


class GradientType(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    DIAGONAL = "diagonal"
    RADIAL = "radial"


# ---------------------------------------------------------------------------
# Field validation helpers
# ---------------------------------------------------------------------------

def check_color(name: str, value) -> RGB:
    """Validate an ``[R, G, B]`` triple of ints in 0-255 and return it as a tuple."""
    if isinstance(value, (str, bytes)) or not hasattr(value, "__len__") or len(value) != 3:
        raise ConfigValidationError(name, f"expected [R, G, B], got {value!r}")
    channels = []
    for ch in value:
        if isinstance(ch, bool) or not isinstance(ch, int):
            raise ConfigValidationError(name, f"channel {ch!r} is not an integer")
        if not 0 <= ch <= 255:
            raise ConfigValidationError(name, f"channel {ch} outside 0-255")
        channels.append(ch)
    return tuple(channels)


def check_fraction(name: str, value, lo: float, hi: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigValidationError(name, f"expected a number, got {value!r}")
    value = float(value)
    if not lo <= value <= hi:
        raise ConfigValidationError(name, f"{value} outside [{lo}, {hi}]")
    return value


def check_image(name: str, image):
    if image is not None and min(image.size) == 0:
        raise ConfigValidationError(name, f"image has no pixels: {image.size[0]}x{image.size[1]}")


def check_int(name: str, value, lo: int, hi: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigValidationError(name, f"expected an integer, got {value!r}")
    if not lo <= value <= hi:
        raise ConfigValidationError(name, f"{value} outside [{lo}, {hi}]")
    return value


def check_enum(name: str, value, enum_cls):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ConfigValidationError(name, f"{value!r} is not one of: {choices}") from None


# ---------------------------------------------------------------------------
# Fills
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SolidFill:
    """Single dark color on a single light color."""

    foreground: RGB = BLACK
    background: RGB = WHITE

    def __post_init__(self):
        fg = check_color("foreground", self.foreground)
        bg = check_color("background", self.background)
        if fg == bg:
            raise ConfigValidationError("foreground", "identical to background, symbol would be invisible")
        object.__setattr__(self, "foreground", fg)
        object.__setattr__(self, "background", bg)


@dataclass(frozen=True)
class GradientFill:
    """Dark modules blend from ``color_a`` to ``color_b``; light areas use ``background``."""

    gradient_type: GradientType = GradientType.HORIZONTAL
    color_a: RGB = BLACK
    color_b: RGB = (100, 100, 255)
    background: RGB = WHITE

    def __post_init__(self):
        object.__setattr__(self, "gradient_type", check_enum("gradient_type", self.gradient_type, GradientType))
        a = check_color("color_a", self.color_a)
        b = check_color("color_b", self.color_b)
        bg = check_color("background", self.background)
        if a == bg and b == bg:
            raise ConfigValidationError("color_a", "both gradient stops equal the background")
        object.__setattr__(self, "color_a", a)
        object.__setattr__(self, "color_b", b)
        object.__setattr__(self, "background", bg)

    @property
    def foreground(self) -> RGB:
        """Start stop, used where a single dark color is needed."""
        return self.color_a


Fill = SolidFill | GradientFill


# ---------------------------------------------------------------------------
# Optional overlays
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LogoOverlay:
    """Centered logo. ``image`` may be ``None`` when loaded from a preset."""

    image: Image.Image | None = field(default=None, compare=False, repr=False)
    size_fraction: float = 0.2

    def __post_init__(self):
        check_image("logo.image", self.image)
        object.__setattr__(self, "size_fraction", check_fraction("logo.size_fraction", self.size_fraction, *LOGO_SIZE_RANGE))


@dataclass(frozen=True)
class BackgroundOverlay:
    """Background image blended beneath the symbol at ``opacity``."""

    image: Image.Image | None = field(default=None, compare=False, repr=False)
    opacity: float = 0.3

    def __post_init__(self):
        check_image("background.image", self.image)
        object.__setattr__(self, "opacity", check_fraction("background.opacity", self.opacity, 0.0, 1.0))


# ---------------------------------------------------------------------------
# StyleConfig
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StyleConfig:
    """Every styling choice for one render."""

    module_shape: ModuleShape = ModuleShape.SQUARE
    corner_radius: float = 0.3
    eye_shape: EyeShape = EyeShape.STANDARD
    fill: Fill = field(default_factory=SolidFill)
    eye_color: RGB | None = None
    logo: LogoOverlay | None = None
    background: BackgroundOverlay | None = None
    qr_opacity: float = 1.0
    border_modules: int = 2
    output_size_pixels: int = 512

    def __post_init__(self):
        set_ = object.__setattr__
        set_(self, "module_shape", check_enum("module_shape", self.module_shape, ModuleShape))
        set_(self, "eye_shape", check_enum("eye_shape", self.eye_shape, EyeShape))
        set_(self, "corner_radius", check_fraction("corner_radius", self.corner_radius, *CORNER_RADIUS_RANGE))
        if not isinstance(self.fill, (SolidFill, GradientFill)):
            raise ConfigValidationError("fill", f"expected SolidFill or GradientFill, got {type(self.fill).__name__}")
        if self.eye_color is not None:
            set_(self, "eye_color", check_color("eye_color", self.eye_color))
        if self.logo is not None and not isinstance(self.logo, LogoOverlay):
            raise ConfigValidationError("logo", f"expected LogoOverlay, got {type(self.logo).__name__}")
        if self.background is not None and not isinstance(self.background, BackgroundOverlay):
            raise ConfigValidationError("background", f"expected BackgroundOverlay, got {type(self.background).__name__}")
        set_(self, "qr_opacity", check_fraction("qr_opacity", self.qr_opacity, 0.0, 1.0))
        set_(self, "border_modules", check_int("border_modules", self.border_modules, *BORDER_RANGE))
        set_(self, "output_size_pixels", check_int("output_size_pixels", self.output_size_pixels, *OUTPUT_SIZE_RANGE))
        self._warn_low_contrast()

    def _warn_low_contrast(self):
        from qrtistry.colors import check_contrast

        bg = self.fill.background
        darks = [self.fill.foreground]
        if isinstance(self.fill, GradientFill):
            darks.append(self.fill.color_b)
        if self.eye_color is not None:
            darks.append(self.eye_color)
        worst = min(check_contrast(c, bg) for c in darks)
        if worst < MIN_SCAN_CONTRAST:
            log.warning("Contrast ratio %.1f:1 is below %.1f:1, scannability at risk", worst, MIN_SCAN_CONTRAST)

    def replace(self, **changes) -> "StyleConfig":
        """Validated copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    def with_logo(self, image: Image.Image | None, size_fraction: float | None = None) -> "StyleConfig":
        """Attach a decoded logo, keeping the configured size unless one is given."""
        if size_fraction is None:
            size_fraction = self.logo.size_fraction if self.logo else LogoOverlay.size_fraction
        return self.replace(logo=LogoOverlay(image=image, size_fraction=size_fraction))

    def with_background(self, image: Image.Image | None, opacity: float | None = None) -> "StyleConfig":
        """Attach a decoded background image, keeping the configured opacity unless one is given."""
        if opacity is None:
            opacity = self.background.opacity if self.background else BackgroundOverlay.opacity
        return self.replace(background=BackgroundOverlay(image=image, opacity=opacity))


def default_style() -> StyleConfig:
    """Startup defaults: 512px, 2-module border, black squares on white."""
    return StyleConfig()


# ---------------------------------------------------------------------------
# Named color schemes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ColorPreset:
    name: str
    fg: RGB
    bg: RGB


COLOR_PRESETS: tuple[ColorPreset, ...] = (
    ColorPreset("Classic", (0, 0, 0), (255, 255, 255)),
    ColorPreset("Ocean", (0, 119, 182), (224, 247, 250)),
    ColorPreset("Sunset", (255, 87, 34), (255, 243, 224)),
    ColorPreset("Forest", (27, 94, 32), (232, 245, 233)),
    ColorPreset("Purple", (123, 31, 162), (243, 229, 245)),
    ColorPreset("Rose", (194, 24, 91), (252, 228, 236)),
    ColorPreset("Night", (255, 255, 255), (33, 33, 33)),
    ColorPreset("Cyber", (0, 255, 255), (10, 10, 40)),
)


def apply_preset(style: StyleConfig, name: str) -> StyleConfig:
    """Copy of *style* with a solid fill taken from the named color preset."""
    for preset in COLOR_PRESETS:
        if preset.name.lower() == name.lower():
            return style.replace(fill=SolidFill(foreground=preset.fg, background=preset.bg))
    known = ", ".join(p.name for p in COLOR_PRESETS)
    raise ConfigValidationError("preset", f"unknown preset {name!r} (known: {known})")

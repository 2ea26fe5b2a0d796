"""Style presets: flat JSON documents mirroring StyleConfig.

Presets are portable: they never carry filesystem paths or image data. A
preset that had a logo or background stores only its size/opacity plus a
``has_logo`` / ``has_background`` flag; loading it yields overlays with
``image=None`` until the caller attaches decoded images.
"""

import json
from datetime import datetime
from pathlib import Path

from qrtistry.errors import ConfigValidationError, PresetError
from qrtistry.logging import audit, get_logger, trace
from qrtistry.style import (
    BackgroundOverlay,
    EyeShape,
    GradientFill,
    GradientType,
    LogoOverlay,
    ModuleShape,
    SolidFill,
    StyleConfig,
    default_style,
)

log = get_logger("presets")

PRESET_VERSION = 1


def style_to_dict(style: StyleConfig) -> dict:
    """Flat JSON-ready dict for *style*."""
    fill = style.fill
    gradient = fill if isinstance(fill, GradientFill) else None
    return {
        "preset_version": PRESET_VERSION,
        "module_shape": style.module_shape.value,
        "corner_radius": style.corner_radius,
        "eye_shape": style.eye_shape.value,
        "fill_kind": "gradient" if gradient else "solid",
        "foreground": list(fill.foreground),
        "background": list(fill.background),
        "gradient_type": gradient.gradient_type.value if gradient else GradientType.HORIZONTAL.value,
        "color_a": list(gradient.color_a) if gradient else list(fill.foreground),
        "color_b": list(gradient.color_b) if gradient else list(GradientFill.color_b),
        "eye_color": list(style.eye_color) if style.eye_color is not None else None,
        "has_logo": style.logo is not None,
        "logo_size": style.logo.size_fraction if style.logo else LogoOverlay.size_fraction,
        "has_background": style.background is not None,
        "background_opacity": style.background.opacity if style.background else BackgroundOverlay.opacity,
        "qr_opacity": style.qr_opacity,
        "border_modules": style.border_modules,
        "output_size_pixels": style.output_size_pixels,
    }


def style_from_dict(data: dict) -> StyleConfig:
    """Build a validated StyleConfig; missing keys take ``default_style()`` values.

    Raises:
        PresetError: *data* is not a JSON object or has an unknown ``fill_kind``,
            a non-boolean flag or a non-integer ``preset_version``.
        ConfigValidationError: a value is out of range.
    """
    if not isinstance(data, dict):
        raise PresetError(f"preset must be a JSON object, got {type(data).__name__}")
    d = style_to_dict(default_style())
    d.update({k: v for k, v in data.items() if k in d})
    for flag in ("has_logo", "has_background"):
        if not isinstance(d[flag], bool):
            raise PresetError(f"{flag} must be true or false, got {d[flag]!r}")
    version = d["preset_version"]
    if not isinstance(version, int) or isinstance(version, bool):
        raise PresetError(f"preset_version must be an integer, got {version!r}")

    kind = d["fill_kind"]
    if kind == "solid":
        fill = SolidFill(foreground=d["foreground"], background=d["background"])
    elif kind == "gradient":
        fill = GradientFill(
            gradient_type=d["gradient_type"],
            color_a=d["color_a"],
            color_b=d["color_b"],
            background=d["background"],
        )
    else:
        raise PresetError(f"unknown fill_kind {kind!r}")

    return StyleConfig(
        module_shape=d["module_shape"],
        corner_radius=d["corner_radius"],
        eye_shape=d["eye_shape"],
        fill=fill,
        eye_color=d["eye_color"],
        logo=LogoOverlay(size_fraction=d["logo_size"]) if d["has_logo"] else None,
        background=BackgroundOverlay(opacity=d["background_opacity"]) if d["has_background"] else None,
        qr_opacity=d["qr_opacity"],
        border_modules=d["border_modules"],
        output_size_pixels=d["output_size_pixels"],
    )


def dumps_preset(style: StyleConfig) -> str:
    return json.dumps(style_to_dict(style), indent=2)


def loads_preset(text: str) -> StyleConfig:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PresetError(f"preset is not valid JSON: {exc}") from exc
    return style_from_dict(data)


@trace
def save_preset(style: StyleConfig, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_preset(style), encoding="utf-8")
    audit("preset.saved", logger=log, path=str(path))
    return path


@trace
def load_preset(path: str | Path) -> StyleConfig:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PresetError(f"cannot read preset {path}: {exc}") from exc
    try:
        style = loads_preset(text)
    except ConfigValidationError as exc:
        raise PresetError(f"invalid preset {path}: {exc}") from exc
    audit("preset.loaded", logger=log, path=str(path))
    return style


def preset_filename(prefix: str, now: datetime, suffix: str = ".json") -> str:
    """Timestamped file name, e.g. ``qr_preset_20240131_154500.json``."""
    return f"{prefix}_{now.strftime('%Y%m%d_%H%M%S')}{suffix}"

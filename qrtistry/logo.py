"""Logo compositing: scale a decoded logo into a centred box and blend it on top."""

from PIL import Image

from qrtistry.compositing import Canvas, composite_over, image_to_planes
from qrtistry.logging import audit, get_logger, trace
from qrtistry.style import LogoOverlay

log = get_logger("logo")


def logo_box(canvas_size: int, size_fraction: float) -> tuple[int, int, int]:
    """``(x0, y0, side)`` of the square logo box centred on the canvas."""
    side = int(canvas_size * size_fraction)
    offset = (canvas_size - side) // 2
    return offset, offset, side


def _scale_preserving_aspect(original_size: tuple[int, int], target: int) -> tuple[int, int]:
    """Scale (w, h) so the larger dimension equals *target*, preserving aspect."""
    w, h = original_size
    aspect = w / h
    if aspect >= 1:
        return target, max(1, round(target / aspect))
    return max(1, round(target * aspect)), target


@trace
def composite_logo(canvas: Canvas, overlay: LogoOverlay) -> tuple[int, int, int, int] | None:
    """Alpha-blend the logo over *canvas* in place using its own alpha channel.

    The logo is fitted inside the centred ``size_fraction * size`` box and
    nothing outside that box is modified. Nothing is cleared beneath the
    logo; callers pick an error-correction level that tolerates it.

    Returns:
        The ``(x, y, w, h)`` pixel box actually painted, or ``None`` when the
        overlay carries no decoded image.
    """
    if overlay.image is None:
        log.debug("logo configured without image data, skipping")
        return None

    bx, by, side = logo_box(canvas.size, overlay.size_fraction)
    logo = overlay.image.convert("RGBA")
    new_w, new_h = _scale_preserving_aspect(logo.size, side)
    resized = logo.resize((new_w, new_h), Image.LANCZOS)

    x_off = bx + (side - new_w) // 2
    y_off = by + (side - new_h) // 2
    rgb, alpha = image_to_planes(resized)
    composite_over(canvas, rgb, alpha, x_off, y_off)

    audit("logo.composited", logger=log,
          canvas=f"{canvas.size}x{canvas.size}",
          logo_size=f"{new_w}x{new_h}",
          offset=f"{x_off},{y_off}",
          size_fraction=overlay.size_fraction)
    return x_off, y_off, new_w, new_h

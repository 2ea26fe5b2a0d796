"""Base canvas and background-image blending."""

from PIL import Image

from qrtistry.compositing import Canvas, composite_over, image_to_planes
from qrtistry.logging import audit, get_logger, trace
from qrtistry.style import BackgroundOverlay, StyleConfig

log = get_logger("background")


def base_canvas(style: StyleConfig) -> Canvas:
    """Opaque canvas filled with the fill's light color."""
    return Canvas(style.output_size_pixels, style.fill.background)


@trace
def blend_background(canvas: Canvas, overlay: BackgroundOverlay) -> bool:
    """Resize the background to the canvas and blend it over the base at ``opacity``.

    Resampling is bilinear and therefore deterministic. The image's own
    alpha is multiplied by ``opacity``, so ``opacity=0`` leaves the canvas
    untouched and ``opacity=1`` fully replaces it wherever the image is opaque.

    Returns:
        True if anything was painted.
    """
    if overlay.image is None:
        log.debug("background configured without image data, skipping")
        return False
    if overlay.opacity <= 0.0:
        return False

    resized = overlay.image.convert("RGBA").resize((canvas.size, canvas.size), Image.BILINEAR)
    rgb, alpha = image_to_planes(resized)
    composite_over(canvas, rgb, alpha * overlay.opacity)

    audit("background.blended", logger=log,
          source=f"{overlay.image.size[0]}x{overlay.image.size[1]}",
          canvas=f"{canvas.size}x{canvas.size}",
          opacity=overlay.opacity)
    return True

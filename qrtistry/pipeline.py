"""Render pipeline: boolean module matrix + StyleConfig -> RGBA image.

Stage order is fixed:

    validate -> layout -> [background] -> modules + eyes -> [logo] -> image

Validation and layout failures are raised before any pixel work. The
pipeline reads no clock, randomness or files, holds no shared state and
allocates a fresh canvas per call, so it is safe to call repeatedly (or
from a worker thread) and the same inputs always give the same pixels.
"""

from dataclasses import dataclass

import numpy as np
from PIL import Image

from qrtistry.background import base_canvas, blend_background
from qrtistry.colors import resolve_color
from qrtistry.compositing import composite_over
from qrtistry.errors import ConfigValidationError, MatrixError, RenderError
from qrtistry.eyes import eye_origins, is_eye_module, paint_eyes
from qrtistry.geometry import Layout, compute_layout
from qrtistry.logging import audit, get_logger, trace
from qrtistry.logo import composite_logo
from qrtistry.shapes import SymbolLayer, paint_module
from qrtistry.style import StyleConfig

log = get_logger("pipeline")

SUPERSAMPLE_RANGE = (1, 8)
DEFAULT_SUPERSAMPLE = 4


@dataclass
class RenderedImage:
    """Output of one render.

    ``image`` is a Pillow ``RGBA`` image: straight (non-premultiplied)
    alpha, 8 bits per channel, R, G, B, A order, sRGB.
    """

    image: Image.Image
    layout: Layout

    @property
    def size(self) -> tuple[int, int]:
        return self.image.size

    def to_array(self) -> np.ndarray:
        """Fresh ``uint8`` array of shape ``(size, size, 4)``."""
        return np.array(self.image, dtype=np.uint8)


def as_matrix(modules) -> np.ndarray:
    """Validate a square boolean module matrix and return it as a numpy array."""
    try:
        arr = np.asarray(modules, dtype=bool)
    except (TypeError, ValueError) as exc:
        raise MatrixError(f"module matrix is not a rectangular grid: {exc}") from exc
    if arr.ndim != 2 or arr.size == 0:
        raise MatrixError(f"module matrix must be a non-empty 2-D grid, got shape {arr.shape}")
    if arr.shape[0] != arr.shape[1]:
        raise MatrixError(f"module matrix must be square, got {arr.shape[0]}x{arr.shape[1]}")
    return arr


class RenderPipeline:
    """Styled-symbol renderer.

    Args:
        supersample: Anti-aliasing samples per pixel axis. 1 samples pixel
            centres only (hard edges); the default 4 gives 16 coverage levels.
    """

    def __init__(self, supersample: int = DEFAULT_SUPERSAMPLE):
        lo, hi = SUPERSAMPLE_RANGE
        if isinstance(supersample, bool) or not isinstance(supersample, int) or not lo <= supersample <= hi:
            raise ConfigValidationError("supersample", f"{supersample!r} outside [{lo}, {hi}]")
        self.supersample = supersample

    @trace
    def render(self, modules, style: StyleConfig) -> RenderedImage:
        """Render *modules* (``True`` = dark) with *style*.

        Raises:
            MatrixError: matrix empty, ragged or not square.
            ConfigValidationError: *style* is not a StyleConfig.
            DegenerateModuleSizeError: output too small for the matrix + border.
            RenderError: unexpected failure once painting started.
        """
        matrix = as_matrix(modules)
        if not isinstance(style, StyleConfig):
            raise ConfigValidationError("style", f"expected StyleConfig, got {type(style).__name__}")
        n = matrix.shape[0]
        layout = compute_layout(n, style.border_modules, style.output_size_pixels)

        try:
            image = self._paint(matrix, style, layout)
        except Exception as exc:
            raise RenderError(f"render failed after layout: {exc}") from exc

        audit("symbol.rendered", logger=log,
              modules=f"{n}x{n}",
              canvas=f"{layout.canvas_size}x{layout.canvas_size}",
              module_px=round(layout.module_size, 3),
              shape=style.module_shape.value,
              eyes=style.eye_shape.value,
              fill=type(style.fill).__name__,
              logo=style.logo is not None and style.logo.image is not None,
              background=style.background is not None and style.background.image is not None,
              supersample=self.supersample)
        return RenderedImage(image=image, layout=layout)

    def _paint(self, matrix: np.ndarray, style: StyleConfig, layout: Layout) -> Image.Image:
        canvas = base_canvas(style)
        if style.background is not None:
            blend_background(canvas, style.background)

        layer = SymbolLayer(layout.canvas_size)
        origins = eye_origins(layout.matrix_size)
        for row, col in zip(*np.nonzero(matrix)):
            row, col = int(row), int(col)
            if is_eye_module(row, col, origins):
                continue
            u, v = layout.normalized_center(row, col)
            color = resolve_color(style.fill, u, v)
            paint_module(layer, layout, row, col, style.module_shape, color,
                         self.supersample, corner_radius=style.corner_radius)
        if origins:
            paint_eyes(layer, layout, style, matrix, origins, self.supersample)

        rgb, alpha = layer.planes(style.qr_opacity)
        composite_over(canvas, rgb, alpha)

        if style.logo is not None:
            composite_logo(canvas, style.logo)
        return canvas.to_image()


def render(modules, style: StyleConfig | None = None, supersample: int = DEFAULT_SUPERSAMPLE) -> RenderedImage:
    """One-shot render; *style* defaults to a fresh ``default_style()``."""
    if style is None:
        from qrtistry.style import default_style

        style = default_style()
    return RenderPipeline(supersample=supersample).render(modules, style)

"""Module-to-pixel layout.

The module size is kept fractional (``output / (n + 2 * border)``) and every
module owns the exact float rectangle ``[(border + c) * m, (border + c + 1) * m)``.
Neighbouring rectangles share edges, so rasterizing by coverage tiles the
symbol without seams whatever the rounding of ``m``.
"""

import math
from dataclasses import dataclass

from qrtistry.errors import DegenerateModuleSizeError
from qrtistry.logging import audit, get_logger, trace

log = get_logger("geometry")


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def x1(self) -> float:
        return self.x + self.w

    @property
    def y1(self) -> float:
        return self.y + self.h


@dataclass(frozen=True)
class Layout:
    """Pixel geometry for one (matrix size, border, output size) triple."""

    matrix_size: int
    border: int
    canvas_size: int
    module_size: float

    @property
    def symbol_origin(self) -> float:
        """Pixel offset of module (0, 0), i.e. the quiet-zone width."""
        return self.border * self.module_size

    @property
    def symbol_extent(self) -> float:
        """Pixel width of the drawable area, excluding the quiet zone."""
        return self.matrix_size * self.module_size

    def module_rect(self, row: int, col: int) -> Rect:
        m = self.module_size
        return Rect(x=(self.border + col) * m, y=(self.border + row) * m, w=m, h=m)

    def region_rect(self, row: int, col: int, rows: int, cols: int) -> Rect:
        """Float rectangle spanning a block of ``rows x cols`` modules."""
        m = self.module_size
        return Rect(x=(self.border + col) * m, y=(self.border + row) * m, w=cols * m, h=rows * m)

    def pixel_span(self, rect: Rect) -> tuple[int, int, int, int]:
        """Integer pixel bounds ``(x0, y0, x1, y1)`` touched by *rect*, clipped to the canvas."""
        x0 = max(0, math.floor(rect.x))
        y0 = max(0, math.floor(rect.y))
        x1 = min(self.canvas_size, math.ceil(rect.x1))
        y1 = min(self.canvas_size, math.ceil(rect.y1))
        return x0, y0, x1, y1

    def normalized_center(self, row: int, col: int) -> tuple[float, float]:
        """Module centre as ``(u, v)`` in [0, 1], relative to the drawable area."""
        n = self.matrix_size
        return (col + 0.5) / n, (row + 0.5) / n


@trace
def compute_layout(matrix_size: int, border: int, output_size: int) -> Layout:
    """Lay out an ``matrix_size``-wide symbol with *border* quiet modules on an
    ``output_size`` square canvas.

    Raises:
        DegenerateModuleSizeError: if a module would be smaller than one pixel.
    """
    module_size = output_size / (matrix_size + 2 * border)
    if module_size < 1.0:
        raise DegenerateModuleSizeError(matrix_size, border, output_size)

    layout = Layout(
        matrix_size=matrix_size,
        border=border,
        canvas_size=output_size,
        module_size=module_size,
    )
    audit("geometry.layout", logger=log,
          modules=f"{matrix_size}x{matrix_size}", border=border,
          canvas=f"{output_size}x{output_size}", module_px=round(module_size, 3))
    return layout

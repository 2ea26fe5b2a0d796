"""Module shape rasterizer.

Shapes are inside-tests over local coordinates. A pixel's coverage is the
fraction of its ``supersample x supersample`` sample points that fall inside
the shape *and* inside the owning rectangle (half-open), so modules never
bleed into neighbours and shared edge pixels split exactly between them.
``supersample=1`` samples pixel centres only, giving hard edges.
"""

import numpy as np

from qrtistry.geometry import Layout
from qrtistry.style import RGB, ModuleShape

DOT_RADIUS = 0.4


# ---------------------------------------------------------------------------
# Inside-test primitives (vectorised over numpy coordinate grids)
# ---------------------------------------------------------------------------

def disc(x, y, cx: float, cy: float, r: float):
    return (x - cx) ** 2 + (y - cy) ** 2 <= r * r


def rounded_box(x, y, cx: float, cy: float, half: float, radius: float):
    """Square ``[c - half, c + half)`` on both axes with corners rounded by *radius*.

    Half-open, so module-aligned boxes cover exactly their modules.
    """
    radius = min(radius, half)
    dx = np.maximum(np.abs(x - cx) - (half - radius), 0.0)
    dy = np.maximum(np.abs(y - cy) - (half - radius), 0.0)
    in_box = (x >= cx - half) & (x < cx + half) & (y >= cy - half) & (y < cy + half)
    return in_box & (dx * dx + dy * dy <= radius * radius)


def diamond(x, y, cx: float, cy: float, r: float):
    """Square rotated 45 degrees whose vertices lie *r* from the centre."""
    return np.abs(x - cx) + np.abs(y - cy) <= r


def module_inside(shape: ModuleShape, corner_radius: float):
    """Inside-test for *shape* in module-local unit coordinates."""
    if shape is ModuleShape.SQUARE:
        return lambda x, y: np.ones(np.broadcast(x, y).shape, dtype=bool)
    if shape is ModuleShape.CIRCLE:
        return lambda x, y: disc(x, y, 0.5, 0.5, 0.5)
    if shape is ModuleShape.ROUNDED_SQUARE:
        return lambda x, y: rounded_box(x, y, 0.5, 0.5, 0.5, corner_radius)
    if shape is ModuleShape.DOTS:
        return lambda x, y: disc(x, y, 0.5, 0.5, DOT_RADIUS)
    raise ValueError(f"unhandled module shape {shape!r}")


# ---------------------------------------------------------------------------
# Coverage sampling
# ---------------------------------------------------------------------------

def _sample_axis(p0: int, p1: int, supersample: int) -> np.ndarray:
    offsets = (np.arange(supersample) + 0.5) / supersample
    return (np.arange(p0, p1)[:, None] + offsets[None, :]).ravel()


def _owned_axis(samples: np.ndarray, module_size: float, origin: int, units: int):
    """Local coordinates of *samples* and whether each falls in ``[origin, origin + units)``.

    Ownership is decided on the integer cell index, so every sample belongs
    to exactly one module whatever the float rounding of the boundaries.
    """
    g = samples / module_size
    cell = np.floor(g)
    owned = (cell >= origin) & (cell < origin + units)
    return g - origin, owned


def shape_coverage(
    layout: Layout,
    row: int,
    col: int,
    units: int,
    inside,
    supersample: int,
) -> tuple[tuple[int, int, int, int], np.ndarray]:
    """Pixel span and coverage in [0, 1] of *inside* over a ``units x units`` block.

    The block's top-left module is ``(row, col)``; *inside* receives local
    coordinates in module units, ``[0, units)`` on both axes.
    """
    span = layout.pixel_span(layout.region_rect(row, col, units, units))
    x0, y0, x1, y1 = span
    w, h = x1 - x0, y1 - y0
    if w <= 0 or h <= 0:
        return span, np.zeros((max(h, 0), max(w, 0)))

    m = layout.module_size
    lx, own_x = _owned_axis(_sample_axis(x0, x1, supersample), m, layout.border + col, units)
    ly, own_y = _owned_axis(_sample_axis(y0, y1, supersample), m, layout.border + row, units)

    mask = own_y[:, None] & own_x[None, :] & inside(lx[None, :], ly[:, None])
    return span, mask.reshape(h, supersample, w, supersample).mean(axis=(1, 3))


# ---------------------------------------------------------------------------
# Symbol layer
# ---------------------------------------------------------------------------

class SymbolLayer:
    """Accumulates coverage and coverage-weighted color for every dark element.

    Elements own disjoint float rectangles, so summed coverage never exceeds
    one and a pixel split between two neighbours ends up with their
    coverage-weighted average color.
    """

    def __init__(self, size: int):
        self.size = size
        self.coverage = np.zeros((size, size), dtype=np.float64)
        self.weighted = np.zeros((size, size, 3), dtype=np.float64)

    def add(self, span: tuple[int, int, int, int], coverage: np.ndarray, color: RGB) -> None:
        x0, y0, x1, y1 = span
        self.coverage[y0:y1, x0:x1] += coverage
        self.weighted[y0:y1, x0:x1] += coverage[..., None] * np.asarray(color, dtype=np.float64)

    def planes(self, opacity: float = 1.0) -> tuple[np.ndarray, np.ndarray]:
        """``(rgb, alpha)`` ready for :func:`qrtistry.compositing.composite_over`."""
        cov = np.minimum(self.coverage, 1.0)
        safe = np.where(self.coverage > 0.0, self.coverage, 1.0)
        rgb = self.weighted / safe[..., None]
        return rgb, cov * opacity


def paint_module(
    layer: SymbolLayer,
    layout: Layout,
    row: int,
    col: int,
    shape: ModuleShape,
    color: RGB,
    supersample: int,
    corner_radius: float = 0.3,
) -> None:
    """Rasterize one dark module into *layer*."""
    span, cov = shape_coverage(layout, row, col, 1, module_inside(shape, corner_radius), supersample)
    layer.add(span, cov, color)

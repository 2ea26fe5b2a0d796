"""Finder-pattern ("eye") styling.

Each of the three 7x7 corner regions is painted in its own uniform color and
eye shape, replacing whatever the module rasterizer would have drawn there.
Only the region's dark modules are painted, one cell at a time, so the
1:1:3:1:1 finder grid that scanners look for is kept whatever the shape.
"""

import numpy as np

from qrtistry.colors import gradient_factor, lerp_rgb
from qrtistry.geometry import Layout
from qrtistry.shapes import SymbolLayer, diamond, module_inside, shape_coverage
from qrtistry.style import RGB, EyeShape, GradientFill, ModuleShape, SolidFill, StyleConfig

EYE_SIZE = 7
MIN_MATRIX_FOR_EYES = 2 * EYE_SIZE

_CENTRE = EYE_SIZE / 2.0
# Flower petals alternate circles with squares rounded by this fraction
EYE_CORNER_FRACTION = 0.3
# Diamond facet: |dx| + |dy| <= this, clipped to the cell, so neighbours still join
DIAMOND_FACET = 0.7


def eye_origins(matrix_size: int) -> list[tuple[int, int]]:
    """(row, col) of the top-left module of each eye: TL, TR, BL.

    Matrices narrower than two eyes side by side have no eyes: for
    ``7 <= N < 14`` the three regions would overlap, so every module there
    falls back to the module shape. Real symbols are at least 21 wide.
    """
    if matrix_size < MIN_MATRIX_FOR_EYES:
        return []
    far = matrix_size - EYE_SIZE
    return [(0, 0), (0, far), (far, 0)]


def is_eye_module(row: int, col: int, origins: list[tuple[int, int]]) -> bool:
    return any(
        r0 <= row < r0 + EYE_SIZE and c0 <= col < c0 + EYE_SIZE
        for r0, c0 in origins
    )


def eye_module_inside(shape: EyeShape, rel_row: int, rel_col: int, corner_radius: float = 0.3):
    """Inside-test for one dark eye module in module-local unit coordinates.

    *rel_row*, *rel_col* locate the module within its eye (0-6); only the
    flower pattern depends on them.
    """
    if shape is EyeShape.STANDARD:
        return module_inside(ModuleShape.SQUARE, corner_radius)
    if shape is EyeShape.CIRCLE:
        return module_inside(ModuleShape.CIRCLE, corner_radius)
    if shape is EyeShape.ROUNDED_SQUARE:
        return module_inside(ModuleShape.ROUNDED_SQUARE, corner_radius)
    if shape is EyeShape.FLOWER:
        petal = ModuleShape.CIRCLE if (rel_row + rel_col) % 2 == 0 else ModuleShape.ROUNDED_SQUARE
        return module_inside(petal, EYE_CORNER_FRACTION)
    if shape is EyeShape.DIAMOND:
        return lambda x, y: diamond(x, y, 0.5, 0.5, DIAMOND_FACET)
    raise ValueError(f"unhandled eye shape {shape!r}")


def eye_color(style: StyleConfig, origin: tuple[int, int], matrix_size: int) -> RGB:
    """Uniform color of the eye at *origin*: override, else the fill's dark color.

    Gradients are sampled once, at the eye's centre.
    """
    if style.eye_color is not None:
        return style.eye_color
    fill = style.fill
    if isinstance(fill, SolidFill):
        return fill.foreground
    if isinstance(fill, GradientFill):
        r0, c0 = origin
        u = (c0 + _CENTRE) / matrix_size
        v = (r0 + _CENTRE) / matrix_size
        return lerp_rgb(fill.color_a, fill.color_b, gradient_factor(fill.gradient_type, u, v))
    raise TypeError(f"unhandled fill {type(fill).__name__}")


def paint_eyes(
    layer: SymbolLayer,
    layout: Layout,
    style: StyleConfig,
    matrix: np.ndarray,
    origins: list[tuple[int, int]],
    supersample: int,
) -> None:
    """Rasterize the dark modules of every eye region into *layer*."""
    for origin in origins:
        r0, c0 = origin
        color = eye_color(style, origin, layout.matrix_size)
        block = matrix[r0:r0 + EYE_SIZE, c0:c0 + EYE_SIZE]
        for rel_row, rel_col in zip(*np.nonzero(block)):
            rel_row, rel_col = int(rel_row), int(rel_col)
            inside = eye_module_inside(style.eye_shape, rel_row, rel_col, style.corner_radius)
            span, cov = shape_coverage(layout, r0 + rel_row, c0 + rel_col, 1, inside, supersample)
            layer.add(span, cov, color)

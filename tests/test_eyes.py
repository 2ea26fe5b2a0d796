import numpy as np
import pytest

from conftest import finder_matrix
from qrtistry.colors import lerp_rgb
from qrtistry.eyes import (
    EYE_SIZE,
    eye_color,
    eye_module_inside,
    eye_origins,
    is_eye_module,
    paint_eyes,
)
from qrtistry.geometry import compute_layout
from qrtistry.pipeline import render
from qrtistry.shapes import SymbolLayer, paint_module
from qrtistry.style import (
    EyeShape,
    GradientFill,
    GradientType,
    ModuleShape,
    SolidFill,
    StyleConfig,
)


def test_eye_origins():
    assert eye_origins(21) == [(0, 0), (0, 14), (14, 0)]
    assert eye_origins(14) == [(0, 0), (0, 7), (7, 0)]


@pytest.mark.parametrize("n", range(1, 14))
def test_small_matrices_have_no_eyes(n):
    # from 7 up to 13 the three regions would overlap
    assert eye_origins(n) == []


def test_is_eye_module():
    origins = eye_origins(21)
    assert is_eye_module(0, 0, origins)
    assert is_eye_module(6, 20, origins)
    assert is_eye_module(20, 6, origins)
    assert not is_eye_module(7, 7, origins)
    assert not is_eye_module(20, 20, origins)
    assert not is_eye_module(0, 7, origins)


@pytest.mark.parametrize("shape", list(EyeShape))
def test_eye_module_reaches_its_edges(shape):
    # neighbouring eye modules must join so the finder ring stays solid
    for rel_row, rel_col in [(0, 0), (0, 1)]:
        inside = eye_module_inside(shape, rel_row, rel_col)
        assert inside(0.5, 0.5)
        assert inside(0.01, 0.5)
        assert inside(0.5, 0.99)


@pytest.mark.parametrize("shape,filled", [
    (EyeShape.STANDARD, True),
    (EyeShape.CIRCLE, False),
    (EyeShape.ROUNDED_SQUARE, False),
    (EyeShape.FLOWER, False),
    (EyeShape.DIAMOND, False),
])
def test_eye_module_corners(shape, filled):
    assert bool(eye_module_inside(shape, 0, 0)(0.02, 0.02)) is filled


def test_flower_alternates_petals():
    circle = eye_module_inside(EyeShape.FLOWER, 0, 0)
    rounded = eye_module_inside(EyeShape.FLOWER, 0, 1)
    # a point past the disc but inside the rounded square
    x, y = 0.08, 0.2
    assert not circle(x, y)
    assert rounded(x, y)
    assert not eye_module_inside(EyeShape.FLOWER, 1, 1)(x, y)


@pytest.mark.parametrize("shape", list(EyeShape))
def test_eye_stays_inside_its_region(shape):
    layout = compute_layout(21, 2, 256)
    style = StyleConfig(eye_shape=shape, output_size_pixels=256)
    origins = eye_origins(21)
    layer = SymbolLayer(256)
    paint_eyes(layer, layout, style, finder_matrix(21), origins, 4)

    allowed = np.zeros((256, 256), dtype=bool)
    for r0, c0 in origins:
        x0, y0, x1, y1 = layout.pixel_span(layout.region_rect(r0, c0, EYE_SIZE, EYE_SIZE))
        allowed[y0:y1, x0:x1] = True
    assert layer.coverage[~allowed].sum() == 0.0
    assert layer.coverage.max() <= 1.0


def test_eye_color_override_wins():
    style = StyleConfig(eye_color=(200, 0, 0))
    assert eye_color(style, (0, 0), 21) == (200, 0, 0)


def test_eye_color_uses_solid_foreground():
    style = StyleConfig(fill=SolidFill((0, 0, 90), (255, 255, 255)))
    assert eye_color(style, (0, 14), 21) == (0, 0, 90)


def test_gradient_eye_is_sampled_at_its_centre():
    a, b = (0, 0, 0), (0, 0, 255)
    style = StyleConfig(fill=GradientFill(GradientType.HORIZONTAL, a, b))
    assert eye_color(style, (0, 0), 21) == lerp_rgb(a, b, 3.5 / 21)
    assert eye_color(style, (0, 14), 21) == lerp_rgb(a, b, 17.5 / 21)


def _eye_interior(result, origin):
    layout = result.layout
    x0, y0, x1, y1 = layout.pixel_span(layout.region_rect(*origin, EYE_SIZE, EYE_SIZE))
    return result.to_array()[y0 + 1:y1 - 1, x0 + 1:x1 - 1]


@pytest.mark.parametrize("eye_shape", list(EyeShape))
def test_eyes_ignore_module_shape_and_fill(eye_shape):
    matrix = finder_matrix(21)
    base = StyleConfig(eye_shape=eye_shape, eye_color=(20, 60, 20), output_size_pixels=256)
    variants = [
        base,
        base.replace(module_shape=ModuleShape.CIRCLE),
        base.replace(module_shape=ModuleShape.DOTS, fill=SolidFill((120, 0, 0), (255, 255, 255))),
        base.replace(module_shape=ModuleShape.ROUNDED_SQUARE,
                     fill=GradientFill(GradientType.RADIAL, (0, 0, 200), (200, 0, 200))),
    ]
    results = [render(matrix, style) for style in variants]
    for origin in eye_origins(21):
        reference = _eye_interior(results[0], origin)
        for other in results[1:]:
            assert np.array_equal(_eye_interior(other, origin), reference)




@pytest.mark.parametrize("shape", list(EyeShape))
def test_light_eye_modules_are_not_painted(shape):
    layout = compute_layout(21, 2, 256)
    style = StyleConfig(eye_shape=shape, output_size_pixels=256)
    layer = SymbolLayer(256)
    paint_eyes(layer, layout, style, np.zeros((21, 21), dtype=bool), eye_origins(21), 4)
    assert layer.coverage.sum() == 0.0


@pytest.mark.parametrize("shape", list(EyeShape))
def test_finder_gap_keeps_background(shape):
    style = StyleConfig(eye_shape=shape, output_size_pixels=256)
    result = render(finder_matrix(21), style)
    arr = result.to_array()
    layout = result.layout
    for r0, c0 in eye_origins(21):
        # the light ring between the outer ring and the centre block
        for rel_row, rel_col in [(1, 3), (3, 1), (5, 3), (3, 5)]:
            rect = layout.module_rect(r0 + rel_row, c0 + rel_col)
            cx, cy = int(rect.x + rect.w / 2), int(rect.y + rect.h / 2)
            assert tuple(arr[cy, cx]) == (255, 255, 255, 255)


def test_standard_eyes_match_square_modules():
    matrix = finder_matrix(21)
    layout = compute_layout(21, 2, 256)
    origins = eye_origins(21)
    eyes = SymbolLayer(256)
    paint_eyes(eyes, layout, StyleConfig(output_size_pixels=256), matrix, origins, 4)
    squares = SymbolLayer(256)
    for r0, c0 in origins:
        for r in range(r0, r0 + EYE_SIZE):
            for c in range(c0, c0 + EYE_SIZE):
                if matrix[r, c]:
                    paint_module(squares, layout, r, c, ModuleShape.SQUARE, (0, 0, 0), 4)
    assert np.array_equal(eyes.coverage, squares.coverage)

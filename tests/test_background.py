import numpy as np
import pytest

from conftest import solid_image
from qrtistry.background import base_canvas, blend_background
from qrtistry.compositing import Canvas, composite_over
from qrtistry.style import BackgroundOverlay, GradientFill, StyleConfig


@pytest.fixture
def black_bg():
    return solid_image((40, 30), (0, 0, 0, 255))


def test_base_canvas_uses_fill_background():
    style = StyleConfig(fill=GradientFill("radial", (0, 0, 0), (0, 0, 255), (250, 240, 230)),
                        output_size_pixels=128)
    canvas = base_canvas(style)
    assert canvas.size == 128
    assert np.all(canvas.rgb == (250, 240, 230))
    assert np.all(canvas.alpha == 1.0)


def test_zero_opacity_is_a_no_op(black_bg):
    canvas = Canvas(128, (255, 255, 255))
    assert blend_background(canvas, BackgroundOverlay(image=black_bg, opacity=0.0)) is False
    assert np.all(canvas.rgb == 255)


def test_missing_image_is_a_no_op():
    canvas = Canvas(128, (255, 255, 255))
    assert blend_background(canvas, BackgroundOverlay(opacity=0.9)) is False
    assert np.all(canvas.rgb == 255)


def test_full_opacity_replaces_base(black_bg):
    canvas = Canvas(128, (255, 255, 255))
    assert blend_background(canvas, BackgroundOverlay(image=black_bg, opacity=1.0)) is True
    assert np.allclose(canvas.rgb, 0.0)
    assert np.all(canvas.alpha == 1.0)


def test_half_opacity_blends(black_bg):
    canvas = Canvas(128, (255, 255, 255))
    blend_background(canvas, BackgroundOverlay(image=black_bg, opacity=0.5))
    assert np.allclose(canvas.rgb, 127.5)


def test_background_alpha_is_respected():
    canvas = Canvas(64, (255, 255, 255))
    clear = solid_image((64, 64), (0, 0, 0, 0))
    blend_background(canvas, BackgroundOverlay(image=clear, opacity=1.0))
    assert np.all(canvas.rgb == 255)


def test_over_operator_on_transparent_destination():
    canvas = Canvas(2, (0, 0, 0), alpha=0.0)
    composite_over(canvas, np.full((2, 2, 3), 200.0), np.full((2, 2), 0.5))
    assert np.allclose(canvas.rgb, 200.0)
    assert np.allclose(canvas.alpha, 0.5)

import pytest

from qrtistry.errors import DegenerateModuleSizeError, GeometryError
from qrtistry.geometry import compute_layout


def test_fractional_module_size():
    layout = compute_layout(21, 2, 256)
    assert layout.module_size == pytest.approx(10.24)
    assert layout.canvas_size == 256
    assert layout.symbol_origin == pytest.approx(20.48)
    assert layout.symbol_extent == pytest.approx(215.04)


def test_module_rect_follows_border_offset():
    layout = compute_layout(21, 4, 512)
    m = 512 / 29
    rect = layout.module_rect(3, 5)
    assert rect.x == pytest.approx((4 + 5) * m)
    assert rect.y == pytest.approx((4 + 3) * m)
    assert rect.w == pytest.approx(m) and rect.h == pytest.approx(m)


def test_neighbouring_modules_share_edges():
    layout = compute_layout(25, 3, 300)
    for c in range(24):
        a = layout.module_rect(0, c)
        b = layout.module_rect(0, c + 1)
        assert a.x1 == pytest.approx(b.x)


def test_last_module_ends_at_quiet_zone():
    layout = compute_layout(21, 2, 256)
    last = layout.module_rect(20, 20)
    assert last.x1 == pytest.approx(256 - 2 * 10.24)


def test_pixel_span_covers_partial_pixels():
    layout = compute_layout(21, 2, 256)
    assert layout.pixel_span(layout.module_rect(0, 0)) == (20, 20, 31, 31)


def test_pixel_span_is_clipped_to_canvas():
    layout = compute_layout(21, 0, 256)
    x0, y0, x1, y1 = layout.pixel_span(layout.region_rect(14, 14, 7, 7))
    assert x1 == 256 and y1 == 256


def test_normalized_center():
    layout = compute_layout(21, 2, 256)
    assert layout.normalized_center(0, 0) == pytest.approx((0.5 / 21, 0.5 / 21))
    assert layout.normalized_center(10, 20) == pytest.approx((20.5 / 21, 10.5 / 21))


def test_degenerate_module_size_is_rejected():
    with pytest.raises(DegenerateModuleSizeError) as exc:
        compute_layout(177, 10, 128)
    err = exc.value
    assert isinstance(err, GeometryError)
    assert err.matrix_size == 177 and err.border == 10 and err.output_size == 128
    assert err.module_size < 1


def test_exactly_one_pixel_modules_are_allowed():
    layout = compute_layout(108, 10, 128)
    assert layout.module_size == 1.0

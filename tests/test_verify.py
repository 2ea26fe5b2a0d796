import sys

import pytest
from PIL import Image

from qrtistry.encoder import encode_matrix
from qrtistry.pipeline import render
from qrtistry.style import EyeShape, SolidFill, StyleConfig
from qrtistry.verify import _flatten, scan_opencv, scan_pyzbar, verify


def test_flatten_composites_onto_white():
    img = Image.new("RGBA", (2, 2), (0, 0, 0, 0))
    assert _flatten(img).getpixel((0, 0)) == (255, 255, 255)
    assert _flatten(img).mode == "RGB"


def test_missing_decoder_is_reported(monkeypatch):
    monkeypatch.setitem(sys.modules, "cv2", None)
    result = scan_opencv(Image.new("RGB", (64, 64), "white"))
    assert result.success is False
    assert result.decoder == "opencv"
    assert result.error.startswith("decoder unavailable")


def test_verify_returns_one_result_per_decoder(monkeypatch):
    monkeypatch.setitem(sys.modules, "cv2", None)
    monkeypatch.setitem(sys.modules, "pyzbar", None)
    monkeypatch.setitem(sys.modules, "pyzbar.pyzbar", None)
    results = verify(Image.new("RGB", (64, 64), "white"), expected_data="x")
    assert [r.decoder for r in results] == ["pyzbar/zbar", "opencv"]
    assert not any(r.success for r in results)


def test_rendered_symbol_decodes_with_opencv():
    pytest.importorskip("cv2")
    image = render(encode_matrix("HELLO QRTISTRY", ecc="M"), StyleConfig(border_modules=4)).image
    result = scan_opencv(image)
    assert result.success, result.error
    assert result.decoded_data == "HELLO QRTISTRY"


def test_styled_symbol_decodes_with_opencv():
    pytest.importorskip("cv2")
    style = StyleConfig(module_shape="rounded_square", eye_shape="rounded_square",
                        fill=SolidFill((20, 40, 120), (255, 255, 255)),
                        border_modules=4)
    image = render(encode_matrix("https://example.com", ecc="H"), style).image
    assert scan_opencv(image).decoded_data == "https://example.com"


@pytest.mark.parametrize("eye_shape", list(EyeShape))
def test_every_eye_shape_decodes_with_opencv(eye_shape):
    pytest.importorskip("cv2")
    style = StyleConfig(eye_shape=eye_shape, border_modules=4)
    image = render(encode_matrix("https://example.com", ecc="H"), style).image
    result = scan_opencv(image)
    assert result.success, result.error
    assert result.decoded_data == "https://example.com"


def test_data_mismatch_fails():
    pytest.importorskip("cv2")
    image = render(encode_matrix("HELLO", ecc="M"), StyleConfig(border_modules=4)).image
    results = verify(image, expected_data="GOODBYE")
    opencv = next(r for r in results if r.decoder == "opencv")
    assert opencv.success is False
    assert "Data mismatch" in opencv.error


def test_pyzbar_decodes_when_available():
    pytest.importorskip("pyzbar.pyzbar")
    image = render(encode_matrix("HELLO", ecc="M"), StyleConfig(border_modules=4)).image
    result = scan_pyzbar(image)
    assert result.decoded_data == "HELLO"

"""Scan verification: decode a rendered image with the available QR decoders.

Decoders are imported lazily; one that is not installed is reported as a
failed ScanResult carrying the import error rather than aborting the check.
"""

import time
from dataclasses import dataclass

import numpy as np
from PIL import Image

from qrtistry.logging import audit, get_logger, trace

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single scan attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


def _flatten(image: Image.Image) -> Image.Image:
    """Drop alpha onto white: decoders expect an opaque image."""
    if image.mode in ("RGBA", "LA"):
        base = Image.new("RGB", image.size, (255, 255, 255))
        base.paste(image, mask=image.getchannel("A"))
        return base
    return image.convert("RGB")


def _finish(decoder: str, start: float, data: str | None = None, error: str | None = None) -> ScanResult:
    elapsed = (time.perf_counter() - start) * 1000
    if data:
        audit("scan.verified", logger=log, decoder=decoder, success=True,
              time_ms=round(elapsed, 1), data=data[:80])
        return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=decoder)
    error = error or "No QR code detected"
    audit("scan.verified", logger=log, decoder=decoder, success=False,
          time_ms=round(elapsed, 1), error=error)
    return ScanResult(success=False, decode_time_ms=elapsed, decoder=decoder, error=error)


@trace
def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Scan with pyzbar (wraps ZBar)."""
    start = time.perf_counter()
    try:
        from pyzbar.pyzbar import decode as pyzbar_decode
    except ImportError as e:
        return _finish("pyzbar/zbar", start, error=f"decoder unavailable: {e}")
    try:
        results = pyzbar_decode(_flatten(image))
    except Exception as e:
        return _finish("pyzbar/zbar", start, error=str(e))
    data = results[0].data.decode("utf-8", errors="replace") if results else None
    return _finish("pyzbar/zbar", start, data=data)


@trace
def scan_opencv(image: Image.Image) -> ScanResult:
    """Scan with OpenCV's built-in QR detector."""
    start = time.perf_counter()
    try:
        import cv2
    except ImportError as e:
        return _finish("opencv", start, error=f"decoder unavailable: {e}")
    try:
        gray = cv2.cvtColor(np.array(_flatten(image)), cv2.COLOR_RGB2GRAY)
        data, _points, _ = cv2.QRCodeDetector().detectAndDecode(gray)
    except Exception as e:
        return _finish("opencv", start, error=str(e))
    return _finish("opencv", start, data=data or None)


@trace
def verify(image: Image.Image, expected_data: str | None = None) -> list[ScanResult]:
    """Run every decoder on *image*.

    Args:
        image: Rendered symbol.
        expected_data: If given, a decode returning different data counts as a failure.

    Returns:
        One ScanResult per decoder.
    """
    results = []
    for scanner in (scan_pyzbar, scan_opencv):
        result = scanner(image)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{expected_data}'"
        results.append(result)
    return results

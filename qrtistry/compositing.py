"""Float working canvas and the straight-alpha "over" operator.

Pixels are held as float64 RGB in 0-255 plus a separate alpha plane in
0-1 and only quantised to 8 bits once, when the final image is produced.
"""

import numpy as np
from PIL import Image

from qrtistry.style import RGB


class Canvas:
    """Square RGBA working buffer owned by a single render."""

    def __init__(self, size: int, color: RGB, alpha: float = 1.0):
        self.size = size
        self.rgb = np.empty((size, size, 3), dtype=np.float64)
        self.rgb[...] = color
        self.alpha = np.full((size, size), float(alpha), dtype=np.float64)

    def to_image(self) -> Image.Image:
        """Quantise to an 8-bit straight-alpha RGBA Pillow image."""
        out = np.empty((self.size, self.size, 4), dtype=np.uint8)
        out[..., :3] = np.clip(np.rint(self.rgb), 0, 255)
        out[..., 3] = np.clip(np.rint(self.alpha * 255.0), 0, 255)
        return Image.fromarray(out)


def composite_over(
    canvas: Canvas,
    src_rgb: np.ndarray,
    src_alpha: np.ndarray,
    x0: int = 0,
    y0: int = 0,
) -> None:
    """Composite a source patch over *canvas* in place, top-left at ``(x0, y0)``.

    ``a_out = a_s + a_d * (1 - a_s)``;
    ``rgb_out = (rgb_s * a_s + rgb_d * a_d * (1 - a_s)) / a_out``.
    Pixels outside the patch are untouched; pixels with ``a_s == 0`` keep
    their exact destination value.
    """
    h, w = src_alpha.shape
    region = (slice(y0, y0 + h), slice(x0, x0 + w))
    dst_rgb = canvas.rgb[region]
    dst_a = canvas.alpha[region]

    a_s = np.clip(src_alpha, 0.0, 1.0)
    keep = dst_a * (1.0 - a_s)
    a_out = a_s + keep

    touched = a_s > 0.0
    safe = np.where(a_out > 0.0, a_out, 1.0)
    blended = (src_rgb * a_s[..., None] + dst_rgb * keep[..., None]) / safe[..., None]

    dst_rgb[touched] = blended[touched]
    dst_a[touched] = a_out[touched]


def image_to_planes(image: Image.Image) -> tuple[np.ndarray, np.ndarray]:
    """Split a Pillow image into float RGB (0-255) and alpha (0-1) planes."""
    arr = np.asarray(image.convert("RGBA"), dtype=np.float64)
    return arr[..., :3], arr[..., 3] / 255.0

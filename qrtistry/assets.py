"""Image codec boundary: decode logo/background bytes and encode PNG output."""

import io
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from qrtistry.errors import AssetDecodeError
from qrtistry.logging import audit, get_logger, trace

log = get_logger("assets")


@trace
def decode_image(data: bytes, name: str = "<bytes>") -> Image.Image:
    """Decode image bytes into a fully loaded RGBA Pillow image.

    Raises:
        AssetDecodeError: bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise AssetDecodeError(f"cannot decode image {name}: {exc}") from exc


def load_image(path: str | Path) -> Image.Image:
    """Read and decode an image file (logo or background)."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise AssetDecodeError(f"cannot read image {path}: {exc}") from exc
    return decode_image(data, name=str(path))


def encode_png(image: Image.Image) -> bytes:
    """Lossless PNG bytes of *image*."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@trace
def save_png(image: Image.Image, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(encode_png(image))
    audit("image.saved", logger=log, path=str(path), size=f"{image.size[0]}x{image.size[1]}")
    return path

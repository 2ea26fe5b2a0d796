import numpy as np
import pytest
from PIL import Image

from qrtistry.eyes import eye_origins


def finder_matrix(n: int = 21, fill=None) -> np.ndarray:
    """Deterministic n x n matrix with real finder patterns in the three corners.

    Non-finder modules follow *fill(r, c)*, defaulting to a fixed pseudo-pattern.
    """
    if fill is None:
        fill = lambda r, c: (r * 7 + c * 3) % 5 < 2
    m = np.array([[bool(fill(r, c)) for c in range(n)] for r in range(n)])
    for r0, c0 in eye_origins(n):
        for r in range(7):
            for c in range(7):
                ring = r in (0, 6) or c in (0, 6)
                pupil = 2 <= r <= 4 and 2 <= c <= 4
                m[r0 + r, c0 + c] = ring or pupil
    return m


@pytest.fixture
def matrix21():
    return finder_matrix(21)


@pytest.fixture
def dark_matrix21():
    return finder_matrix(21, fill=lambda r, c: True)


def solid_image(size, color, mode="RGBA") -> Image.Image:
    return Image.new(mode, size, color)


@pytest.fixture
def red_logo():
    return solid_image((64, 64), (255, 0, 0, 255))


@pytest.fixture
def clear_logo():
    return solid_image((64, 64), (255, 0, 0, 0))

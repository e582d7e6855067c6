"""
Pytest configuration and fixtures for PixelFX tests
"""

import io
import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image

# Make the repository root importable when the package is not installed
sys.path.insert(0, str(Path(__file__).parent.parent))


def to_png_bytes(array: np.ndarray) -> bytes:
    """Encode a uint8 array (H, W) or (H, W, C) as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(np.asarray(array, dtype=np.uint8)).save(buffer, format="PNG")
    return buffer.getvalue()


def from_png_bytes(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def make_png():
    """Factory fixture turning arrays into PNG bytes"""
    return to_png_bytes


@pytest.fixture
def read_png():
    """Factory fixture turning PNG bytes back into a loaded PIL image"""
    return from_png_bytes


@pytest.fixture
def step_array():
    """8x6 luminance image: left half 50, right half 200"""
    array = np.full((6, 8), 50, dtype=np.uint8)
    array[:, 4:] = 200
    return array


@pytest.fixture
def boundary_5x5():
    """5x5 image: 0 on columns 0-1, 128 on the boundary column, 255 on columns 3-4"""
    array = np.zeros((5, 5), dtype=np.uint8)
    array[:, 2] = 128
    array[:, 3:] = 255
    return array


@pytest.fixture
def overflow_3x3():
    """3x3 image whose single interior pixel has gx = 360, gy = 0"""
    array = np.zeros((3, 3), dtype=np.uint8)
    array[:, 2] = 90
    return array


@pytest.fixture
def rgba_image():
    """Small colourful RGBA test image"""
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(12, 10, 4), dtype=np.uint8)

"""
-------
conftest.py
-------
Shared pytest fixtures: small RGBA buffers and image files on disk.
"""

import numpy as np
import pytest
from PIL import Image

from photoframe.models.image_model import PixelBuffer


# -----------------------------------------------------------------------------
# Buffers
# -----------------------------------------------------------------------------
@pytest.fixture
def gray_buffer() -> PixelBuffer:
    """4x4 opaque mid-gray (128, 128, 128, 255)."""
    return PixelBuffer.blank(4, 4, (128, 128, 128, 255))


@pytest.fixture
def gray_square() -> PixelBuffer:
    """64x64 opaque mid-gray, large enough for raster effects."""
    return PixelBuffer.blank(64, 64, (128, 128, 128, 255))


@pytest.fixture
def color_buffer() -> PixelBuffer:
    """32x24 random colours with random alpha, fixed seed."""
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8))


@pytest.fixture
def ramp_buffer() -> PixelBuffer:
    """256x1 horizontal ramp 0..255 in all channels, opaque."""
    ramp = np.arange(256, dtype=np.uint8)
    arr = np.empty((1, 256, 4), dtype=np.uint8)
    arr[..., 0] = ramp
    arr[..., 1] = ramp
    arr[..., 2] = ramp
    arr[..., 3] = 255
    return PixelBuffer(arr)


@pytest.fixture
def portrait_buffer() -> PixelBuffer:
    """100 wide x 200 tall opaque image with a diagonal pattern."""
    y, x = np.indices((200, 100))
    arr = np.empty((200, 100, 4), dtype=np.uint8)
    arr[..., 0] = (x * 2) % 256
    arr[..., 1] = y % 256
    arr[..., 2] = (x + y) % 256
    arr[..., 3] = 255
    return PixelBuffer(arr)


# -----------------------------------------------------------------------------
# Files
# -----------------------------------------------------------------------------
@pytest.fixture
def gray_png(tmp_path):
    """Opaque 40x30 gray PNG written to a temp dir."""
    path = tmp_path / "gray.png"
    Image.new("RGB", (40, 30), (128, 128, 128)).save(path)
    return path

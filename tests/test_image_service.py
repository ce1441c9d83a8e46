"""
test_image_service.py
---------------------
Decode and encode adapters.
"""

import numpy as np
import pytest
from PIL import Image

from photoframe.models.image_model import PixelBuffer
from photoframe.services.image_service import ImageService


@pytest.fixture
def images():
    return ImageService()


def test_load_converts_to_rgba(images, gray_png):
    data = images.load_image(gray_png)
    assert (data.width, data.height) == (40, 30)
    assert data.mode == "RGB"
    assert data.buffer.size == (40, 30)
    assert np.all(data.buffer.pixels[..., 3] == 255)
    assert tuple(data.buffer.pixels[0, 0]) == (128, 128, 128, 255)
    assert data.size_bytes and data.size_bytes > 0


def test_missing_file_raises(images, tmp_path):
    with pytest.raises(FileNotFoundError):
        images.load_image(tmp_path / "nope.png")


def test_directory_is_not_a_file(images, tmp_path):
    with pytest.raises(FileNotFoundError):
        images.load_image(tmp_path)


def test_non_image_raises_value_error(images, tmp_path):
    bogus = tmp_path / "notes.png"
    bogus.write_text("not an image")
    with pytest.raises(ValueError):
        images.load_image(bogus)


def test_save_png_keeps_alpha(images, tmp_path, color_buffer):
    path = images.save_image(color_buffer, tmp_path / "out" / "nested" / "x.png")
    assert path.exists()
    assert images.load_image(path).buffer == color_buffer


def test_save_jpeg_drops_alpha(images, tmp_path, color_buffer):
    path = images.save_image(color_buffer, tmp_path / "x.jpg", quality=90)
    with Image.open(path) as saved:
        assert saved.mode == "RGB"
        assert saved.size == color_buffer.size


def test_save_round_trips_blank(images, tmp_path):
    buf = PixelBuffer.blank(8, 8, (1, 2, 3, 255))
    path = images.save_image(buf, tmp_path / "b.png")
    assert images.load_image(path).buffer == buf

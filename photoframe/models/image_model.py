"""Модели данных для изображений.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
- Буфер пикселей принадлежит вызову конвейера, который его создал;
  этапы обработки читают один буфер и возвращают новый.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image

RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """RGBA-растр 8 бит на канал.

    Fields:
        pixels: массив формы (height, width, 4), dtype uint8.
    """
    pixels: np.ndarray

    def __post_init__(self) -> None:
        arr = self.pixels
        if not isinstance(arr, np.ndarray) or arr.dtype != np.uint8:
            raise ValueError("PixelBuffer expects a uint8 numpy array")
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"PixelBuffer expects shape (H, W, 4), got {arr.shape}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_array(cls, arr: np.ndarray) -> "PixelBuffer":
        """Копирует массив (H, W, 3|4) в новый буфер; RGB получает непрозрачную альфу."""
        arr = np.asarray(arr)
        if arr.ndim != 3 or arr.shape[2] not in (3, 4):
            raise ValueError(f"Expected an (H, W, 3) or (H, W, 4) array, got {arr.shape}")
        if arr.dtype != np.uint8:
            raise ValueError(f"Expected uint8 samples, got {arr.dtype}")
        if arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(np.ascontiguousarray(arr).copy())

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls(np.array(rgba, dtype=np.uint8))

    @classmethod
    def blank(cls, width: int, height: int, color: RGBA = (0, 0, 0, 0)) -> "PixelBuffer":
        arr = np.empty((height, width, 4), dtype=np.uint8)
        arr[...] = np.asarray(color, dtype=np.uint8)
        return cls(arr)

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    def copy(self) -> "PixelBuffer":
        return PixelBuffer(self.pixels.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelBuffer):
            return NotImplemented
        return self.pixels.shape == other.pixels.shape and np.array_equal(self.pixels, other.pixels)

    __hash__ = None  # type: ignore[assignment]


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель загруженного изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        buffer: Декодированный RGBA-буфер.
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL исходного файла, например "RGB".
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    buffer: PixelBuffer
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]

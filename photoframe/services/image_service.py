"""Загрузка изображений с диска и сохранение результата.

Принципы:
- SRP: класс отвечает только за декодирование/кодирование и базовые свойства файла.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- LSP/ISP: возвращает `ImageData` с предсказуемыми полями; интерфейс узкий и конкретный.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

from photoframe.core.config import JPEG_QUALITY, logger
from photoframe.models.image_model import ImageData, PixelBuffer

log = logger.getChild("image")

PathLike = Union[str, Path]

_JPEG_SUFFIXES = {".jpg", ".jpeg"}


class ImageService:
    def load_image(self, file_path: PathLike) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` с RGBA-буфером, размерами, режимом исходника и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as pil_image:
                mode = pil_image.mode
                buffer = PixelBuffer.from_image(pil_image.convert("RGBA"))
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        log.info("loaded %s (%dx%d, %s)", path.name, buffer.width, buffer.height, mode)
        return ImageData(
            path=path,
            buffer=buffer,
            width=buffer.width,
            height=buffer.height,
            mode=mode,
            size_bytes=size_bytes,
        )

    def save_image(self, buffer: PixelBuffer, file_path: PathLike, quality: int = JPEG_QUALITY) -> Path:
        """Кодирует буфер по расширению файла; JPEG сохраняется без альфы.

        Родительские каталоги создаются при необходимости.
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        image = buffer.to_image()
        if path.suffix.lower() in _JPEG_SUFFIXES:
            image.convert("RGB").save(path, quality=quality)
        else:
            image.save(path)
        log.info("saved %s (%dx%d)", path, buffer.width, buffer.height)
        return path

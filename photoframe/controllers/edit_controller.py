"""Контроллер редактирования: оркестрация сервисов и фоновый запуск конвейера.

SOLID:
- SRP: класс управляет текущим снимком и очередью правок (без логики обработки пикселей).
- DIP: зависит от сервисов как от ролей; их можно подменить в конструкторе.
Clean Code:
- Тяжёлая логика вынесена в сервисы; здесь только состояние и планирование.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from photoframe.core.config import WORKERS, logger
from photoframe.models.image_model import ImageData, PixelBuffer
from photoframe.services.image_service import ImageService
from photoframe.services.pipeline_service import EditRequest, PipelineService

log = logger.getChild("controller")


@dataclass
class EditController:
    """Связывает загрузку, конвейер и сохранение.

    Ответственности:
    - Загрузка снимка через `ImageService`.
    - Запуск полного прохода конвейера в пуле потоков, не блокируя вызывающего.
    - «Побеждает последний запрос»: результат устаревшей правки отбрасывается,
      `on_result` для него не вызывается.
    - Сохранение последнего принятого результата.
    """
    on_result: Optional[Callable[[PixelBuffer], None]] = None
    workers: int = WORKERS
    image_service: ImageService = field(default_factory=ImageService)
    pipeline: PipelineService = field(default_factory=PipelineService)

    _current_image: Optional[ImageData] = field(default=None, init=False)
    _last_request: Optional[EditRequest] = field(default=None, init=False)
    _last_result: Optional[PixelBuffer] = field(default=None, init=False)
    _generation: int = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _executor: Optional[ThreadPoolExecutor] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=max(1, self.workers), thread_name_prefix="photoframe")

    # ---- State ----
    @property
    def current_image(self) -> Optional[ImageData]:
        return self._current_image

    @property
    def last_request(self) -> Optional[EditRequest]:
        return self._last_request

    @property
    def last_result(self) -> Optional[PixelBuffer]:
        with self._lock:
            return self._last_result

    # ---- Actions ----
    def load(self, file_path: Union[str, Path]) -> ImageData:
        """Загружает снимок; результаты правок предыдущего снимка больше не принимаются."""
        image_data = self.image_service.load_image(file_path)
        with self._lock:
            self._generation += 1
            self._current_image = image_data
            self._last_request = None
            self._last_result = None
        return image_data

    def submit(self, request: EditRequest) -> "Future[Optional[PixelBuffer]]":
        """Ставит полный проход конвейера в очередь пула.

        Future завершается результатом либо `None`, если к моменту окончания
        уже поступил более новый запрос.

        Raises:
            RuntimeError: если снимок не загружен или контроллер остановлен.
        """
        if self._executor is None:
            raise RuntimeError("Controller is shut down")
        with self._lock:
            if self._current_image is None:
                raise RuntimeError("No image loaded")
            # снимок и номер правки фиксируются вместе
            buffer = self._current_image.buffer
            self._generation += 1
            generation = self._generation
            self._last_request = request
        return self._executor.submit(self._run, generation, buffer, request)

    def save(self, file_path: Union[str, Path]) -> Path:
        result = self.last_result
        if result is None:
            raise RuntimeError("Nothing to save: no edit has finished yet")
        return self.image_service.save_image(result, file_path)

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None

    def __enter__(self) -> "EditController":
        return self

    def __exit__(self, *exc_info) -> None:
        self.shutdown()

    # ---- Helpers ----
    def _run(self, generation: int, buffer: PixelBuffer, request: EditRequest) -> Optional[PixelBuffer]:
        result = self.pipeline.process(buffer, request)
        with self._lock:
            if generation != self._generation:
                log.debug("edit #%d superseded by #%d, result dropped", generation, self._generation)
                return None
            self._last_result = result
        if self.on_result is not None:
            self.on_result(result)
        return result

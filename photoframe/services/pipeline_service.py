"""Конвейер редактирования: тон -> фильтр -> рамка.

Принципы:
- SRP: только порядок этапов и пропуск тождественных; вся математика в движках.
- DIP: движки передаются в конструктор, по умолчанию создаются свои.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from photoframe.core.config import logger
from photoframe.models.exif_model import ExifData
from photoframe.models.filter_model import ORIGINAL, FilterPreset
from photoframe.models.frame_model import NONE_FRAME, DateStampStyle, FrameStyle, WatermarkConfig
from photoframe.models.image_model import PixelBuffer
from photoframe.models.tone_model import ToneParams
from photoframe.services.filter_service import FilterService
from photoframe.services.frame_service import FrameService
from photoframe.services.tone_service import ToneService

log = logger.getChild("pipeline")


@dataclass(frozen=True)
class EditRequest:
    """Полный набор параметров одного прохода конвейера."""
    tone: ToneParams = field(default_factory=ToneParams)
    filter_preset: FilterPreset = ORIGINAL
    frame_style: FrameStyle = NONE_FRAME
    exif: Optional[ExifData] = None
    watermark: WatermarkConfig = field(default_factory=WatermarkConfig)
    date_stamp: DateStampStyle = field(default_factory=DateStampStyle)

    @property
    def frames_output(self) -> bool:
        return not self.frame_style.is_none or self.watermark.enabled or self.date_stamp.enabled


class PipelineService:
    def __init__(
        self,
        tone_service: Optional[ToneService] = None,
        filter_service: Optional[FilterService] = None,
        frame_service: Optional[FrameService] = None,
    ) -> None:
        self._tone = tone_service or ToneService()
        self._filter = filter_service or FilterService()
        self._frame = frame_service or FrameService()

    def process(self, buffer: PixelBuffer, request: EditRequest) -> PixelBuffer:
        """Прогоняет буфер через три движка в фиксированном порядке.

        Args:
            buffer: Исходный RGBA-буфер; не изменяется.
            request: Параметры всех этапов.

        Returns:
            Новый буфер. Если все этапы тождественны, это копия исходного.
        """
        result = buffer
        if request.tone.is_identity():
            log.debug("tone skipped")
        else:
            result = self._timed("tone", self._tone.apply_tone_adjustments, result, request.tone)

        if request.filter_preset.is_original:
            log.debug("filter skipped")
        else:
            result = self._timed("filter", self._filter.apply_filter, result, request.filter_preset)

        if not request.frames_output:
            log.debug("frame skipped")
        else:
            result = self._timed(
                "frame",
                self._frame.apply_frame,
                result,
                request.frame_style,
                request.exif,
                request.watermark,
                request.date_stamp,
            )

        return result.copy() if result is buffer else result

    def _timed(self, name, stage, *args) -> PixelBuffer:
        started = time.perf_counter()
        out = stage(*args)
        log.debug("%s done in %.1f ms", name, (time.perf_counter() - started) * 1000.0)
        return out

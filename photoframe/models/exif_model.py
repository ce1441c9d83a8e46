"""EXIF-метаданные, полученные от внешнего читателя.

Все поля необязательны: отсутствие значения никогда не является ошибкой,
соответствующий фрагмент текста просто не выводится.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExifData:
    """Fields:
        make: Производитель камеры ("Canon").
        model: Модель ("Canon EOS R5").
        lens_model: Объектив.
        focal_length: Фокусное расстояние без единиц ("35").
        f_number: Диафрагменное число ("1.8").
        exposure_time: Выдержка, уже отформатированная ("1/250").
        iso: Светочувствительность.
        date_time: Дата съёмки в формате EXIF `yyyy:MM:dd HH:mm:ss`.
    """
    make: Optional[str] = None
    model: Optional[str] = None
    lens_model: Optional[str] = None
    focal_length: Optional[str] = None
    f_number: Optional[str] = None
    exposure_time: Optional[str] = None
    iso: Optional[int] = None
    date_time: Optional[str] = None

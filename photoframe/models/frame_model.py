"""Стили рамок, настройки водяного знака и штампа даты.

Все записи неизменяемы; каталог рамок строится один раз при импорте.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

RGBA = Tuple[int, int, int, int]

WHITE: RGBA = (255, 255, 255, 255)
BLACK: RGBA = (0, 0, 0, 255)
FILM_ORANGE: RGBA = (0xFF, 0x6B, 0x00, 255)

NONE_ID = "none"


class FrameCategory(Enum):
    NONE = "None"
    SIMPLE = "Simple"
    INSTANT = "Instant"
    FILM = "Film"
    MODERN = "Modern"

    @property
    def display_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class FrameStyle:
    """Fields:
        border_width_ratio: Толщина рамки как доля ширины исходника.
        bottom_extra_ratio: Дополнительное поле снизу как доля высоты (поляроид).
        corner_radius: Радиус скругления, px.
        show_*: подсказки для UI, какие надписи предлагать с этой рамкой.
    """
    id: str
    name: str
    display_name: str
    category: FrameCategory
    frame_color: RGBA = WHITE
    border_width_ratio: float = 0.03
    bottom_extra_ratio: float = 0.0
    corner_radius: float = 0.0
    inner_shadow: bool = False
    outer_shadow: bool = True
    show_exif_info: bool = False
    show_date_stamp: bool = False
    show_shot_on_watermark: bool = False

    @property
    def is_none(self) -> bool:
        return self.id == NONE_ID


class WatermarkType(Enum):
    SHOT_ON = "shot_on"        # "Shot on <make model>"
    EXIF_FRAME = "exif_frame"  # несколько строк EXIF
    DATE_STAMP = "date_stamp"  # заданная строка даты
    CUSTOM = "custom"


class WatermarkPosition(Enum):
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_CENTER = "bottom-center"
    BOTTOM_RIGHT = "bottom-right"

    @property
    def is_top(self) -> bool:
        return self in (WatermarkPosition.TOP_LEFT, WatermarkPosition.TOP_CENTER, WatermarkPosition.TOP_RIGHT)

    @property
    def horizontal(self) -> str:
        return self.value.split("-", 1)[1]


@dataclass(frozen=True)
class WatermarkConfig:
    enabled: bool = False
    type: WatermarkType = WatermarkType.SHOT_ON
    custom_text: str = ""
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT
    text_color: RGBA = WHITE
    font_size: float = 12.0  # в единицах ширины холста / 400
    opacity: float = 0.8
    show_make: bool = True
    show_model: bool = True
    show_lens_info: bool = False
    show_settings: bool = False  # фокусное, диафрагма, выдержка, ISO


class DateFormat(Enum):
    """Шаблон вывода даты: (отображаемый шаблон, шаблон `str.format` над datetime)."""
    FILM_STYLE = ("'yy MM dd", "'{0:%y} {0:%m} {0:%d}")
    STANDARD = ("yyyy/MM/dd", "{0:%Y}/{0:%m}/{0:%d}")
    US_STYLE = ("MM/dd/yyyy", "{0:%m}/{0:%d}/{0:%Y}")
    EU_STYLE = ("dd.MM.yyyy", "{0:%d}.{0:%m}.{0:%Y}")
    FULL = ("yyyy年M月d日", "{0.year}年{0.month}月{0.day}日")

    @property
    def pattern(self) -> str:
        return self.value[0]

    def format(self, moment: datetime) -> str:
        return self.value[1].format(moment)

    @classmethod
    def from_pattern(cls, pattern: str) -> "DateFormat":
        for member in cls:
            if member.pattern == pattern or member.name.lower() == pattern.lower():
                return member
        raise KeyError(f"Unknown date format: {pattern!r}")


@dataclass(frozen=True)
class DateStampStyle:
    enabled: bool = False
    format: DateFormat = DateFormat.FILM_STYLE
    color: RGBA = FILM_ORANGE
    position: WatermarkPosition = WatermarkPosition.BOTTOM_RIGHT
    font_size: float = 14.0


NONE_FRAME = FrameStyle(id=NONE_ID, name="None", display_name="No frame", category=FrameCategory.NONE, border_width_ratio=0.0)

# ---- Simple ----
SIMPLE_WHITE = FrameStyle(id="simple_white", name="Simple White", display_name="Simple White", category=FrameCategory.SIMPLE)
SIMPLE_BLACK = FrameStyle(id="simple_black", name="Simple Black", display_name="Simple Black", category=FrameCategory.SIMPLE, frame_color=BLACK)
THIN_WHITE = FrameStyle(id="thin_white", name="Thin White", display_name="Thin White", category=FrameCategory.SIMPLE, border_width_ratio=0.015)
THICK_WHITE = FrameStyle(id="thick_white", name="Thick White", display_name="Thick White", category=FrameCategory.SIMPLE, border_width_ratio=0.06)

# ---- Instant ----
POLAROID = FrameStyle(
    id="polaroid", name="Polaroid", display_name="Polaroid", category=FrameCategory.INSTANT,
    border_width_ratio=0.04, bottom_extra_ratio=0.12,
)
INSTAX_MINI = FrameStyle(
    id="instax_mini", name="Instax Mini", display_name="Instax Mini", category=FrameCategory.INSTANT,
    border_width_ratio=0.035, bottom_extra_ratio=0.08, corner_radius=4.0,
)
INSTAX_SQUARE = FrameStyle(
    id="instax_square", name="Instax Square", display_name="Instax Square", category=FrameCategory.INSTANT,
    border_width_ratio=0.04, bottom_extra_ratio=0.06, corner_radius=4.0,
)

# ---- Film ----
FILM_STRIP = FrameStyle(
    id="film_strip", name="Film Strip", display_name="Film Strip", category=FrameCategory.FILM,
    frame_color=BLACK, border_width_ratio=0.025, show_exif_info=True,
)
SLIDE_MOUNT = FrameStyle(
    id="slide_mount", name="Slide Mount", display_name="Slide Mount", category=FrameCategory.FILM,
    border_width_ratio=0.05, corner_radius=2.0,
)

# ---- Modern ----
ROUNDED = FrameStyle(
    id="rounded", name="Rounded", display_name="Rounded", category=FrameCategory.MODERN, corner_radius=16.0,
)
SHADOW_BOX = FrameStyle(
    id="shadow_box", name="Shadow Box", display_name="Shadow Box", category=FrameCategory.MODERN,
    border_width_ratio=0.05, inner_shadow=True,
)

ALL_FRAMES: Tuple[FrameStyle, ...] = (
    NONE_FRAME,
    SIMPLE_WHITE,
    SIMPLE_BLACK,
    THIN_WHITE,
    THICK_WHITE,
    POLAROID,
    INSTAX_MINI,
    INSTAX_SQUARE,
    FILM_STRIP,
    SLIDE_MOUNT,
    ROUNDED,
    SHADOW_BOX,
)

FRAME_STYLES: Mapping[str, FrameStyle] = MappingProxyType({f.id: f for f in ALL_FRAMES})


def get_frame_style(frame_id: str) -> FrameStyle:
    """Возвращает стиль рамки по идентификатору.

    Raises:
        KeyError: если такого стиля нет в каталоге.
    """
    try:
        return FRAME_STYLES[frame_id]
    except KeyError:
        raise KeyError(f"Unknown frame style: {frame_id!r}") from None


def frames_by_category() -> Dict[FrameCategory, List[FrameStyle]]:
    grouped: Dict[FrameCategory, List[FrameStyle]] = {}
    for style in ALL_FRAMES:
        grouped.setdefault(style.category, []).append(style)
    return grouped

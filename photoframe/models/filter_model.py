"""Плёночные пресеты фильтров и их неизменяемый каталог.

Каталог собирается один раз при импорте модуля; динамическая регистрация
не предусмотрена.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from photoframe.models.tone_model import ToneParams

RGB = Tuple[int, int, int]

ORIGINAL_ID = "original"


class FilterCategory(Enum):
    NONE = "Original"
    FILM = "Film"
    VINTAGE = "Vintage"
    MODERN = "Modern"
    BW = "Monochrome"
    CINEMATIC = "Cinematic"
    INSTANT = "Instant"

    @property
    def display_name(self) -> str:
        return self.value


@dataclass(frozen=True)
class FilterPreset:
    """Пресет: базовые тоновые поля плюс эффекты плёнки.

    Диапазоны как в `ToneParams`, кроме экспозиции (-1 .. 1) и эффектов
    grain / vignette / fade / dust_amount (0 .. 1).
    """
    id: str
    name: str
    display_name: str
    category: FilterCategory

    brightness: float = 0.0
    contrast: float = 1.0
    saturation: float = 1.0
    temperature: float = 0.0
    tint: float = 0.0
    exposure: float = 0.0
    highlights: float = 0.0
    shadows: float = 0.0

    grain: float = 0.0
    vignette: float = 0.0
    fade: float = 0.0          # подъём чёрного
    dust_amount: float = 0.0

    overlay_color: Optional[RGB] = None
    overlay_intensity: float = 0.0

    @property
    def is_original(self) -> bool:
        return self.id == ORIGINAL_ID

    def to_tone_params(self) -> ToneParams:
        return ToneParams(
            brightness=self.brightness,
            contrast=self.contrast,
            saturation=self.saturation,
            exposure=self.exposure,
            temperature=self.temperature,
            tint=self.tint,
            highlights=self.highlights,
            shadows=self.shadows,
        )


ORIGINAL = FilterPreset(id=ORIGINAL_ID, name="Original", display_name="Original", category=FilterCategory.NONE)

# ---- Film ----
KODAK_PORTRA = FilterPreset(
    id="kodak_portra", name="Portra 400", display_name="Portra 400", category=FilterCategory.FILM,
    temperature=0.08, saturation=0.92, contrast=1.05, highlights=-0.1, shadows=0.15, grain=0.15, fade=0.05,
)
KODAK_GOLD = FilterPreset(
    id="kodak_gold", name="Gold 200", display_name="Gold 200", category=FilterCategory.FILM,
    temperature=0.15, saturation=1.1, contrast=1.1, brightness=0.05, grain=0.12,
)
FUJI_SUPERIA = FilterPreset(
    id="fuji_superia", name="Superia", display_name="Superia", category=FilterCategory.FILM,
    temperature=-0.05, tint=0.03, saturation=1.05, contrast=1.08, grain=0.1,
)
FUJI_VELVIA = FilterPreset(
    id="fuji_velvia", name="Velvia", display_name="Velvia", category=FilterCategory.FILM,
    saturation=1.35, contrast=1.15, brightness=0.02, grain=0.08,
)
CINESTILL_800T = FilterPreset(
    id="cinestill_800t", name="CineStill 800T", display_name="800T", category=FilterCategory.CINEMATIC,
    temperature=-0.15, tint=0.05, saturation=0.9, contrast=1.12, highlights=0.1, grain=0.2,
    overlay_color=(0x00, 0xAA, 0xFF), overlay_intensity=0.08,
)

# ---- Vintage ----
VINTAGE_WARM = FilterPreset(
    id="vintage_warm", name="Warm Vintage", display_name="Warm Vintage", category=FilterCategory.VINTAGE,
    temperature=0.2, saturation=0.85, contrast=1.08, fade=0.12, vignette=0.25, grain=0.18,
)
VINTAGE_COOL = FilterPreset(
    id="vintage_cool", name="Cool Vintage", display_name="Cool Vintage", category=FilterCategory.VINTAGE,
    temperature=-0.12, saturation=0.8, contrast=1.05, fade=0.15, vignette=0.2, grain=0.15,
)
FADED_MEMORY = FilterPreset(
    id="faded_memory", name="Faded Memory", display_name="Faded Memory", category=FilterCategory.VINTAGE,
    saturation=0.7, contrast=0.92, fade=0.25, vignette=0.3, grain=0.2, dust_amount=0.1,
)

# ---- Modern ----
CLEAN = FilterPreset(
    id="clean", name="Clean", display_name="Clean", category=FilterCategory.MODERN,
    contrast=1.05, saturation=1.02, highlights=-0.05, shadows=0.05,
)
MOODY = FilterPreset(
    id="moody", name="Moody", display_name="Moody", category=FilterCategory.MODERN,
    contrast=1.2, saturation=0.88, shadows=-0.1, highlights=-0.15, vignette=0.15,
)

# ---- Monochrome ----
BW_CLASSIC = FilterPreset(
    id="bw_classic", name="B&W Classic", display_name="Classic B&W", category=FilterCategory.BW,
    saturation=0.0, contrast=1.15, grain=0.1,
)
BW_HIGH_CONTRAST = FilterPreset(
    id="bw_high_contrast", name="B&W High", display_name="High Contrast", category=FilterCategory.BW,
    saturation=0.0, contrast=1.4, shadows=-0.1, highlights=0.1,
)
BW_FILM_NOIR = FilterPreset(
    id="bw_film_noir", name="Film Noir", display_name="Film Noir", category=FilterCategory.BW,
    saturation=0.0, contrast=1.25, vignette=0.35, grain=0.15,
)

# ---- Instant ----
POLAROID = FilterPreset(
    id="polaroid", name="Polaroid", display_name="Polaroid", category=FilterCategory.INSTANT,
    temperature=0.08, saturation=0.9, contrast=1.05, fade=0.08, vignette=0.1,
)
INSTAX = FilterPreset(
    id="instax", name="Instax", display_name="Instax", category=FilterCategory.INSTANT,
    brightness=0.05, saturation=0.95, contrast=1.02, temperature=0.03,
)

ALL_FILTERS: Tuple[FilterPreset, ...] = (
    ORIGINAL,
    KODAK_PORTRA,
    KODAK_GOLD,
    FUJI_SUPERIA,
    FUJI_VELVIA,
    CINESTILL_800T,
    VINTAGE_WARM,
    VINTAGE_COOL,
    FADED_MEMORY,
    CLEAN,
    MOODY,
    BW_CLASSIC,
    BW_HIGH_CONTRAST,
    BW_FILM_NOIR,
    POLAROID,
    INSTAX,
)

FILTER_PRESETS: Mapping[str, FilterPreset] = MappingProxyType({p.id: p for p in ALL_FILTERS})


def get_filter_preset(preset_id: str) -> FilterPreset:
    """Возвращает пресет по идентификатору.

    Raises:
        KeyError: если такого пресета нет в каталоге.
    """
    try:
        return FILTER_PRESETS[preset_id]
    except KeyError:
        raise KeyError(f"Unknown filter preset: {preset_id!r}") from None


def presets_by_category() -> Dict[FilterCategory, List[FilterPreset]]:
    grouped: Dict[FilterCategory, List[FilterPreset]] = {}
    for preset in ALL_FILTERS:
        grouped.setdefault(preset.category, []).append(preset)
    return grouped

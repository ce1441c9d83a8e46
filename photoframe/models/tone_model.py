"""Параметры тоновой и цветовой коррекции.

Каждое поле имеет значение по умолчанию, при котором соответствующая
коррекция не выполняется; набор со всеми значениями по умолчанию даёт
тождественное преобразование.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class HueRange(Enum):
    """Восемь фиксированных диапазонов оттенка, градусы (min, max).

    Соседние диапазоны могут перекрываться; красный проходит через 0°.
    """
    RED = (330.0, 30.0)
    ORANGE = (15.0, 45.0)
    YELLOW = (45.0, 75.0)
    GREEN = (75.0, 165.0)
    CYAN = (165.0, 195.0)
    BLUE = (195.0, 255.0)
    PURPLE = (255.0, 285.0)
    MAGENTA = (285.0, 330.0)

    @property
    def min_hue(self) -> float:
        return self.value[0]

    @property
    def max_hue(self) -> float:
        return self.value[1]


@dataclass(frozen=True)
class HSLAdjustment:
    hue_shift: float = 0.0    # -30 .. 30, градусы
    saturation: float = 0.0   # -1 .. 1
    luminance: float = 0.0    # -1 .. 1

    def is_identity(self) -> bool:
        return self.hue_shift == 0.0 and self.saturation == 0.0 and self.luminance == 0.0


@dataclass(frozen=True)
class ToneParams:
    # базовые
    brightness: float = 0.0   # -1 .. 1
    contrast: float = 1.0     # 0 .. 2
    saturation: float = 1.0   # 0 .. 2
    exposure: float = 0.0     # -2 .. 2

    # баланс белого
    temperature: float = 0.0  # -1 (холоднее) .. 1 (теплее)
    tint: float = 0.0         # -1 (зелёный) .. 1 (пурпурный)
    vibrance: float = 0.0     # -1 .. 1

    # тоновые зоны
    highlights: float = 0.0
    shadows: float = 0.0
    whites: float = 0.0
    blacks: float = 0.0

    hsl_adjustments: Mapping[HueRange, HSLAdjustment] = field(default_factory=dict)

    sharpness: float = 0.0        # 0 .. 1
    noise_reduction: float = 0.0  # 0 .. 1, на пиксели не влияет

    clarity: float = 0.0  # -1 .. 1
    dehaze: float = 0.0   # -1 .. 1

    def __post_init__(self) -> None:
        # read-only view, чтобы запись оставалась неизменяемой
        object.__setattr__(self, "hsl_adjustments", MappingProxyType(dict(self.hsl_adjustments)))

    def __hash__(self) -> int:
        # mappingproxy не хешируется; диапазоны упорядочены по имени
        plain = tuple(getattr(self, f.name) for f in dataclasses.fields(self) if f.name != "hsl_adjustments")
        bands = tuple(sorted(self.hsl_adjustments.items(), key=lambda item: item[0].name))
        return hash((plain, bands))

    @classmethod
    def default(cls) -> "ToneParams":
        return cls()

    def replace(self, **changes) -> "ToneParams":
        return dataclasses.replace(self, **changes)

    def active_hsl_adjustments(self) -> Mapping[HueRange, HSLAdjustment]:
        return {band: adj for band, adj in self.hsl_adjustments.items() if not adj.is_identity()}

    def is_identity(self) -> bool:
        return (
            self.brightness == 0.0
            and self.contrast == 1.0
            and self.saturation == 1.0
            and self.exposure == 0.0
            and self.temperature == 0.0
            and self.tint == 0.0
            and self.vibrance == 0.0
            and self.highlights == 0.0
            and self.shadows == 0.0
            and self.whites == 0.0
            and self.blacks == 0.0
            and not self.active_hsl_adjustments()
            and self.sharpness <= 0.0
            and self.clarity == 0.0
            and self.dehaze == 0.0
        )

"""Движок тоновой и цветовой коррекции.

Попиксельный проход описан упорядоченным списком именованных этапов над
общим массивом каналов float32 формы (3, H, W). Порядок фиксирован: каждый
этап читает результат предыдущего. Этап с параметрами по умолчанию
пропускается. Значения каналов обрезаются до [0, 255] один раз, в конце
прохода; альфа-канал копируется без изменений.
"""
from __future__ import annotations

from typing import Callable, NamedTuple, Tuple, Union

import numpy as np

from photoframe.core.config import logger
from photoframe.models.image_model import PixelBuffer
from photoframe.models.tone_model import HueRange, ToneParams

log = logger.getChild("tone")

ArrayLike = Union[float, np.ndarray]


# ---------- Вспомогательные функции ----------
def luma(rgb: np.ndarray) -> np.ndarray:
    """Яркость 0.299R + 0.587G + 0.114B для массива (3, ...)."""
    return 0.299 * rgb[0] + 0.587 * rgb[1] + 0.114 * rgb[2]


def pivot(rgb: np.ndarray, factor: ArrayLike, mid: float = 128.0) -> None:
    rgb -= mid
    rgb *= factor
    rgb += mid


def blend_from_gray(rgb: np.ndarray, factor: ArrayLike) -> None:
    gray = luma(rgb)
    rgb -= gray
    rgb *= factor
    rgb += gray


def hue_band_weight(hue: ArrayLike, band: HueRange) -> ArrayLike:
    """Вес диапазона оттенка: 1 в центре, линейно до 0 на границах, 0 снаружи.

    Одна функция для всех восьми диапазонов; переход через 0°/360°
    (красный) учитывается круговым расстоянием.
    """
    h = np.mod(np.asarray(hue, dtype=np.float64), 360.0)
    lo = band.min_hue
    span = (band.max_hue - lo) % 360.0
    half = span / 2.0
    center = (lo + half) % 360.0

    inside = np.mod(h - lo, 360.0) <= span
    dist = np.abs(np.mod(h - center + 180.0, 360.0) - 180.0)
    weight = np.where(inside, np.clip(1.0 - dist / half, 0.0, 1.0), 0.0)
    if weight.ndim == 0:
        return float(weight)
    return weight


def rgb_to_hsl(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """RGB [0..255] -> (H в градусах [0, 360), S [0..1], L [0..1])."""
    n = rgb / 255.0
    r, g, b = n[0], n[1], n[2]
    mx = n.max(axis=0)
    mn = n.min(axis=0)
    delta = mx - mn
    light = (mx + mn) / 2.0

    denom = 1.0 - np.abs(2.0 * light - 1.0)
    sat = np.zeros_like(light)
    np.divide(delta, denom, out=sat, where=(delta > 0) & (denom > 0))

    safe = np.where(delta > 0, delta, 1.0)
    hue = np.select(
        [mx == r, mx == g],
        [60.0 * np.mod((g - b) / safe, 6.0), 60.0 * ((b - r) / safe + 2.0)],
        default=60.0 * ((r - g) / safe + 4.0),
    )
    hue = np.where(delta > 0, hue, 0.0)
    return np.mod(hue, 360.0), sat, light


def hsl_to_rgb(hue: np.ndarray, sat: np.ndarray, light: np.ndarray) -> np.ndarray:
    """Обратное преобразование; результат: массив (3, ...) в шкале [0..255]."""
    c = (1.0 - np.abs(2.0 * light - 1.0)) * sat
    x = c * (1.0 - np.abs(np.mod(hue / 60.0, 2.0) - 1.0))
    m = light - c / 2.0
    zero = np.zeros_like(c)

    sector = np.clip(np.floor(hue / 60.0), 0, 5).astype(np.int8)
    conds = [sector == i for i in range(6)]
    r1 = np.select(conds, [c, x, zero, zero, x, c])
    g1 = np.select(conds, [x, c, c, x, zero, zero])
    b1 = np.select(conds, [zero, zero, x, c, c, x])
    return np.stack([(r1 + m) * 255.0, (g1 + m) * 255.0, (b1 + m) * 255.0])


# ---------- Этапы попиксельного прохода ----------
def _exposure(rgb: np.ndarray, p: ToneParams) -> None:
    rgb *= np.float32(2.0 ** p.exposure)


def _brightness(rgb: np.ndarray, p: ToneParams) -> None:
    rgb += np.float32(p.brightness * 255.0)


def _contrast(rgb: np.ndarray, p: ToneParams) -> None:
    pivot(rgb, np.float32(p.contrast))


def _temperature(rgb: np.ndarray, p: ToneParams) -> None:
    shift = np.float32(p.temperature * 40.0)
    rgb[0] += shift
    rgb[2] -= shift


def _tint(rgb: np.ndarray, p: ToneParams) -> None:
    rgb[1] -= np.float32(p.tint * 40.0)


def _saturation(rgb: np.ndarray, p: ToneParams) -> None:
    blend_from_gray(rgb, np.float32(p.saturation))


def _vibrance(rgb: np.ndarray, p: ToneParams) -> None:
    # сильнее поднимает насыщенность у ненасыщенных пикселей
    mx = rgb.max(axis=0)
    mn = rgb.min(axis=0)
    current = np.zeros_like(mx)
    np.divide(mx - mn, mx, out=current, where=mx > 0)
    blend_from_gray(rgb, (1.0 + p.vibrance * (1.0 - current)).astype(np.float32))


def _highlights(rgb: np.ndarray, p: ToneParams) -> None:
    y = luma(rgb)
    factor = np.where(y > 180.0, 1.0 + p.highlights * ((y - 180.0) / 75.0) * 0.3, 1.0)
    rgb *= factor.astype(np.float32)


def _shadows(rgb: np.ndarray, p: ToneParams) -> None:
    y = luma(rgb)
    factor = np.where(y < 75.0, 1.0 + p.shadows * ((75.0 - y) / 75.0) * 0.5, 1.0)
    rgb *= factor.astype(np.float32)


def _whites(rgb: np.ndarray, p: ToneParams) -> None:
    y = luma(rgb)
    rgb += np.where(y > 220.0, p.whites * 30.0, 0.0).astype(np.float32)


def _blacks(rgb: np.ndarray, p: ToneParams) -> None:
    y = luma(rgb)
    rgb += np.where(y < 35.0, p.blacks * 30.0, 0.0).astype(np.float32)


def _clarity(rgb: np.ndarray, p: ToneParams) -> None:
    pivot(rgb, np.float32(1.0 + p.clarity * 0.3))


def _dehaze(rgb: np.ndarray, p: ToneParams) -> None:
    amount = np.float32(p.dehaze * 0.3)
    rgb -= rgb.min(axis=0) * amount
    pivot(rgb, np.float32(1.0 + amount * 0.2))


def _hsl_bands(rgb: np.ndarray, p: ToneParams) -> None:
    # веса считаются от исходного оттенка; вклады диапазонов перемножаются
    hue, sat, light = rgb_to_hsl(rgb.astype(np.float64))
    new_hue = hue.copy()
    total = np.zeros_like(hue)
    for band, adj in p.active_hsl_adjustments().items():
        weight = hue_band_weight(hue, band)
        total += weight
        new_hue += adj.hue_shift * weight
        sat *= 1.0 + adj.saturation * weight
        light *= 1.0 + adj.luminance * weight

    touched = total > 0.0
    if not touched.any():
        return
    new_rgb = hsl_to_rgb(np.mod(new_hue, 360.0), np.clip(sat, 0.0, 1.0), np.clip(light, 0.0, 1.0))
    # пиксели вне всех диапазонов не проходят через HSL
    rgb[:, touched] = new_rgb[:, touched]


class ToneStage(NamedTuple):
    name: str
    is_active: Callable[[ToneParams], bool]
    apply: Callable[[np.ndarray, ToneParams], None]


TONE_STAGES: Tuple[ToneStage, ...] = (
    ToneStage("exposure", lambda p: p.exposure != 0.0, _exposure),
    ToneStage("brightness", lambda p: p.brightness != 0.0, _brightness),
    ToneStage("contrast", lambda p: p.contrast != 1.0, _contrast),
    ToneStage("temperature", lambda p: p.temperature != 0.0, _temperature),
    ToneStage("tint", lambda p: p.tint != 0.0, _tint),
    ToneStage("saturation", lambda p: p.saturation != 1.0, _saturation),
    ToneStage("vibrance", lambda p: p.vibrance != 0.0, _vibrance),
    ToneStage("highlights", lambda p: p.highlights != 0.0, _highlights),
    ToneStage("shadows", lambda p: p.shadows != 0.0, _shadows),
    ToneStage("whites", lambda p: p.whites != 0.0, _whites),
    ToneStage("blacks", lambda p: p.blacks != 0.0, _blacks),
    ToneStage("clarity", lambda p: p.clarity != 0.0, _clarity),
    ToneStage("dehaze", lambda p: p.dehaze != 0.0, _dehaze),
    ToneStage("hsl", lambda p: bool(p.active_hsl_adjustments()), _hsl_bands),
)


def to_channels(pixels: np.ndarray) -> np.ndarray:
    """(H, W, 4) uint8 -> (3, H, W) float32, новый массив."""
    return np.moveaxis(pixels[..., :3], -1, 0).astype(np.float32)


def from_channels(rgb: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """Обрезка до [0, 255], отбрасывание дробной части и сборка RGBA."""
    out = np.empty(alpha.shape + (4,), dtype=np.uint8)
    out[..., :3] = np.moveaxis(np.clip(rgb, 0.0, 255.0), 0, -1).astype(np.uint8)
    out[..., 3] = alpha
    return out


class ToneService:
    def active_stages(self, params: ToneParams) -> Tuple[str, ...]:
        return tuple(stage.name for stage in TONE_STAGES if stage.is_active(params))

    def apply_tone_adjustments(self, buffer: PixelBuffer, params: ToneParams) -> PixelBuffer:
        """Применяет коррекции в фиксированном порядке и, при `sharpness > 0`, резкость.

        Не мутирует исходный буфер. Ошибок не бывает: значения вне
        документированных диапазонов дают обрезанный результат.
        """
        stages = [stage for stage in TONE_STAGES if stage.is_active(params)]
        if not stages and params.sharpness <= 0.0:
            return buffer.copy()

        log.debug("tone stages: %s", ", ".join(s.name for s in stages) or "-")
        if stages:
            rgb = to_channels(buffer.pixels)
            for stage in stages:
                stage.apply(rgb, params)
            pixels = from_channels(rgb, buffer.pixels[..., 3])
        else:
            pixels = buffer.pixels.copy()

        if params.sharpness > 0.0:
            pixels = self._sharpen(pixels, params.sharpness)
        return PixelBuffer(pixels)

    def _sharpen(self, pixels: np.ndarray, amount: float) -> np.ndarray:
        """
        Упрощённая нерезкая маска по 4 соседям (N/S/E/W).
        Каждый внутренний пиксель отталкивается от среднего соседей с силой amount*0.5.
        Крайние строки и столбцы копируются без изменений.
        """
        out = pixels.copy()
        h, w = pixels.shape[:2]
        if h < 3 or w < 3:
            return out

        strength = np.float32(amount * 0.5)
        src = pixels[..., :3].astype(np.float32)
        center = src[1:-1, 1:-1]
        avg = (src[:-2, 1:-1] + src[2:, 1:-1] + src[1:-1, :-2] + src[1:-1, 2:]) / 4.0
        sharp = center + (center - avg) * strength
        out[1:-1, 1:-1, :3] = np.clip(sharp, 0.0, 255.0).astype(np.uint8)
        return out

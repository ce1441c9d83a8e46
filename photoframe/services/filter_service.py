"""Движок плёночных фильтров.

Порядок: базовые коррекции пресета (с обрезкой до 8 бит сразу после них),
фейд, цветовой оверлей, затем три растровых слоя поверх результата:
зерно, виньетка, пыль. Зерно берёт случайность из энтропии ОС и каждый раз
выглядит иначе; пыль использует фиксированное зерно 42 и воспроизводима.
Растровые слои смешиваются только с RGB, альфа сохраняется.
"""
from __future__ import annotations

import random
from typing import Callable, NamedTuple, Optional, Tuple

import numpy as np

from photoframe.core.config import logger
from photoframe.models.filter_model import FilterPreset
from photoframe.models.image_model import PixelBuffer
from photoframe.services.tone_service import blend_from_gray, pivot, from_channels, luma, to_channels

log = logger.getChild("filter")

DUST_SEED = 42
DUST_COLOR = (240.0, 230.0, 200.0)
LEAK_COLOR = (255.0, 200.0, 100.0)


# ---------- Базовые коррекции плёночного движка ----------
def _exposure(rgb: np.ndarray, f: FilterPreset) -> None:
    rgb *= np.float32(1.0 + f.exposure)


def _brightness(rgb: np.ndarray, f: FilterPreset) -> None:
    rgb += np.float32(f.brightness * 255.0)


def _contrast(rgb: np.ndarray, f: FilterPreset) -> None:
    pivot(rgb, np.float32(f.contrast))


def _temperature(rgb: np.ndarray, f: FilterPreset) -> None:
    shift = np.float32(f.temperature * 30.0)
    rgb[0] += shift
    rgb[2] -= shift


def _tint(rgb: np.ndarray, f: FilterPreset) -> None:
    rgb[1] -= np.float32(f.tint * 30.0)


def _saturation(rgb: np.ndarray, f: FilterPreset) -> None:
    blend_from_gray(rgb, np.float32(f.saturation))


def _highlights(rgb: np.ndarray, f: FilterPreset) -> None:
    y = luma(rgb)
    rgb *= np.where(y > 180.0, 1.0 + f.highlights * (y / 255.0), 1.0).astype(np.float32)


def _shadows(rgb: np.ndarray, f: FilterPreset) -> None:
    y = luma(rgb)
    rgb *= np.where(y < 75.0, 1.0 + f.shadows * (1.0 - y / 75.0), 1.0).astype(np.float32)


class FilterStage(NamedTuple):
    name: str
    is_active: Callable[[FilterPreset], bool]
    apply: Callable[[np.ndarray, FilterPreset], None]


BASIC_STAGES: Tuple[FilterStage, ...] = (
    FilterStage("exposure", lambda f: f.exposure != 0.0, _exposure),
    FilterStage("brightness", lambda f: f.brightness != 0.0, _brightness),
    FilterStage("contrast", lambda f: f.contrast != 1.0, _contrast),
    FilterStage("temperature", lambda f: f.temperature != 0.0, _temperature),
    FilterStage("tint", lambda f: f.tint != 0.0, _tint),
    FilterStage("saturation", lambda f: f.saturation != 1.0, _saturation),
    FilterStage("highlights", lambda f: f.highlights != 0.0, _highlights),
    FilterStage("shadows", lambda f: f.shadows != 0.0, _shadows),
)


def _blend_color(rgb: np.ndarray, color: Tuple[float, float, float], alpha: np.ndarray) -> None:
    """Смешивание «поверх» постоянного цвета с попиксельной альфой [0..1]."""
    for ch in range(3):
        rgb[ch] += (color[ch] - rgb[ch]) * alpha


class FilterService:
    def __init__(self, grain_seed: Optional[Callable[[], int]] = None) -> None:
        # None: генератор numpy берёт энтропию ОС
        self._grain_seed = grain_seed

    def apply_filter(self, buffer: PixelBuffer, preset: FilterPreset) -> PixelBuffer:
        """Применяет пресет к копии буфера; пресет "original" возвращает копию без изменений."""
        if preset.is_original:
            return buffer.copy()

        pixels = self._apply_basic_adjustments(buffer.pixels, preset)

        if preset.fade > 0.0:
            pixels = self._apply_fade(pixels, preset.fade)
        if preset.overlay_color is not None and preset.overlay_intensity > 0.0:
            pixels = self._apply_color_overlay(pixels, preset.overlay_color, preset.overlay_intensity)

        if preset.grain > 0.0 or preset.vignette > 0.0 or preset.dust_amount > 0.0:
            rgb = to_channels(pixels)
            if preset.grain > 0.0:
                self._apply_grain(rgb, preset.grain)
            if preset.vignette > 0.0:
                self._apply_vignette(rgb, preset.vignette)
            if preset.dust_amount > 0.0:
                self._apply_dust(rgb, preset.dust_amount)
            pixels = from_channels(rgb, pixels[..., 3])

        log.debug("filter %s applied to %dx%d", preset.id, buffer.width, buffer.height)
        return PixelBuffer(pixels)

    # ---- Попиксельные этапы ----
    def _apply_basic_adjustments(self, pixels: np.ndarray, preset: FilterPreset) -> np.ndarray:
        stages = [stage for stage in BASIC_STAGES if stage.is_active(preset)]
        if not stages:
            return pixels.copy()
        rgb = to_channels(pixels)
        for stage in stages:
            stage.apply(rgb, preset)
        # обрезка до 8 бит сразу после базовых коррекций
        return from_channels(rgb, pixels[..., 3])

    def _apply_fade(self, pixels: np.ndarray, amount: float) -> np.ndarray:
        level = int(amount * 40.0)
        out = pixels.copy()
        out[..., :3] = np.clip(pixels[..., :3].astype(np.int16) + level, 0, 255).astype(np.uint8)
        return out

    def _apply_color_overlay(self, pixels: np.ndarray, color: Tuple[int, int, int], intensity: float) -> np.ndarray:
        over = np.asarray(color, dtype=np.float32)
        src = pixels[..., :3].astype(np.float32)
        mixed = (1.0 - intensity) * src + intensity * over
        out = pixels.copy()
        out[..., :3] = np.clip(mixed, 0.0, 255.0).astype(np.uint8)
        return out

    # ---- Растровые слои ----
    def _apply_grain(self, rgb: np.ndarray, amount: float) -> None:
        """
        Случайные точки радиусом 1 px (пиксель и 4 соседа), белые или чёрные,
        с альфой amount*80/255. Количество ~ W*H*amount*0.05.
        """
        _, h, w = rgb.shape
        count = int(w * h * amount * 0.05)
        if count <= 0:
            return
        rng = np.random.default_rng(self._grain_seed() if self._grain_seed is not None else None)
        intensity = int(amount * 50.0)
        xs = np.floor(rng.random(count) * w).astype(np.int64)
        ys = np.floor(rng.random(count) * h).astype(np.int64)
        white = rng.integers(-intensity, intensity + 1, size=count) > 0

        hits_white = np.zeros((h, w), dtype=np.int32)
        hits_black = np.zeros((h, w), dtype=np.int32)
        for dy, dx in ((0, 0), (-1, 0), (1, 0), (0, -1), (0, 1)):
            py, px = ys + dy, xs + dx
            ok = (py >= 0) & (py < h) & (px >= 0) & (px < w)
            np.add.at(hits_white, (py[ok & white], px[ok & white]), 1)
            np.add.at(hits_black, (py[ok & ~white], px[ok & ~white]), 1)

        keep = np.float32(1.0 - int(amount * 80.0) / 255.0)
        rgb *= keep ** hits_white
        rgb += 255.0 * (1.0 - keep ** hits_white)
        rgb *= keep ** hits_black

    def _apply_vignette(self, rgb: np.ndarray, amount: float) -> None:
        """
        Радиальный градиент от центра: прозрачно до половины радиуса,
        далее линейно до чёрного с альфой amount*200. Радиус сжимается с ростом amount.
        """
        _, h, w = rgb.shape
        radius = max(max(w, h) * (0.7 - amount * 0.3), 1e-6)
        yy, xx = np.indices((h, w), dtype=np.float32)
        dist = np.hypot(xx + 0.5 - w / 2.0, yy + 0.5 - h / 2.0) / radius
        t = np.clip((dist - 0.5) / 0.5, 0.0, 1.0)
        alpha = t * (int(amount * 200.0) / 255.0)
        rgb *= (1.0 - alpha).astype(np.float32)

    def _apply_dust(self, rgb: np.ndarray, amount: float) -> None:
        """
        Пылинки с фиксированным зерном и, при amount > 0.5, диагональная
        засветка в левой трети кадра.
        """
        _, h, w = rgb.shape
        rnd = random.Random(DUST_SEED)
        for _ in range(int(amount * 20)):
            x = rnd.random() * w
            y = rnd.random() * h
            size = rnd.random() * 3.0 + 1.0
            alpha = int(rnd.random() * 60.0 * amount) / 255.0
            if alpha <= 0.0:
                continue
            x0, x1 = max(0, int(x - size)), min(w, int(x + size) + 1)
            y0, y1 = max(0, int(y - size)), min(h, int(y + size) + 1)
            if x1 <= x0 or y1 <= y0:
                continue
            yy, xx = np.mgrid[y0:y1, x0:x1]
            inside = np.hypot(xx + 0.5 - x, yy + 0.5 - y) <= size
            _blend_color(rgb[:, y0:y1, x0:x1], DUST_COLOR, (inside * alpha).astype(np.float32))

        if amount > 0.5:
            leak_alpha = int((amount - 0.5) * 40.0) / 255.0
            strip = int(np.ceil(w * 0.3))
            if leak_alpha <= 0.0 or strip <= 0:
                return
            gx, gy = w * 0.3, float(h)
            yy, xx = np.indices((h, strip), dtype=np.float32)
            t = np.clip(((xx + 0.5) * gx + (yy + 0.5) * gy) / (gx * gx + gy * gy), 0.0, 1.0)
            inside = (xx + 0.5) <= w * 0.3
            _blend_color(rgb[:, :, :strip], LEAK_COLOR, ((1.0 - t) * leak_alpha * inside).astype(np.float32))

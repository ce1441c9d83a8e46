"""Движок рамок: холст с полями, тени, вклейка снимка, водяной знак и штамп даты.

Все рисование идёт на отдельных RGBA-слоях, которые затем накладываются
на холст (Porter-Duff "over"). Отсутствующие поля EXIF и нераспознанная
дата обрабатываются на месте и никогда не прерывают обработку.
"""
from __future__ import annotations

from datetime import datetime
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter, ImageFont

from photoframe.core.config import FONT_CANDIDATES, MONO_FONT_CANDIDATES, logger
from photoframe.models.exif_model import ExifData
from photoframe.models.frame_model import (
    DateFormat,
    DateStampStyle,
    FrameStyle,
    WatermarkConfig,
    WatermarkPosition,
    WatermarkType,
)
from photoframe.models.image_model import PixelBuffer

log = logger.getChild("frame")

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"

OUTER_SHADOW_ALPHA = 30
OUTER_SHADOW_BLUR = 8
INNER_SHADOW_ALPHA = 40
INNER_SHADOW_HEIGHT = 30
WATERMARK_BOX_ALPHA = 60


# ---------- Текст ----------
def _present(value: Optional[str]) -> bool:
    return value is not None and bool(str(value).strip())


def build_shot_on_text(cfg: WatermarkConfig, exif: Optional[ExifData]) -> str:
    """Строка «Shot on <марка> <модель>»; модель, уже содержащая марку (или наоборот), не дублируется."""
    if exif is None:
        return ""
    make = exif.make.strip() if cfg.show_make and _present(exif.make) else ""
    model = exif.model.strip() if cfg.show_model and _present(exif.model) else ""

    parts: List[str] = []
    if make and model:
        if model.lower() in make.lower():
            parts = [make]
        elif make.lower() in model.lower():
            parts = [model]
        else:
            parts = [make, model]
    elif make or model:
        parts = [make or model]

    return f"Shot on {' '.join(parts)}" if parts else ""


def build_exif_frame_text(cfg: WatermarkConfig, exif: Optional[ExifData]) -> str:
    """Марка, модель, объектив и строка настроек съёмки, каждая на своей строке."""
    if exif is None:
        return ""
    lines: List[str] = []
    if _present(exif.make):
        lines.append(exif.make.strip())
    if _present(exif.model):
        lines.append(exif.model.strip())
    if cfg.show_lens_info and _present(exif.lens_model):
        lines.append(exif.lens_model.strip())
    if cfg.show_settings:
        settings: List[str] = []
        if _present(exif.focal_length):
            settings.append(f"{exif.focal_length}mm")
        if _present(exif.f_number):
            settings.append(f"f/{exif.f_number}")
        if _present(exif.exposure_time):
            settings.append(str(exif.exposure_time))
        if exif.iso is not None:
            settings.append(f"ISO {exif.iso}")
        if settings:
            lines.append(" ".join(settings))
    return "\n".join(lines)


def build_watermark_text(cfg: WatermarkConfig, exif: Optional[ExifData]) -> str:
    """DATE_STAMP и CUSTOM выводят заданный текст как есть."""
    if cfg.type is WatermarkType.SHOT_ON:
        return build_shot_on_text(cfg, exif)
    if cfg.type is WatermarkType.EXIF_FRAME:
        return build_exif_frame_text(cfg, exif)
    return cfg.custom_text


def format_date_stamp(date_time: Optional[str], date_format: DateFormat, now: Optional[datetime] = None) -> str:
    """Переводит дату EXIF в шаблон штампа; без даты или при ошибке разбора берёт текущую."""
    moment: Optional[datetime] = None
    if _present(date_time):
        try:
            moment = datetime.strptime(date_time.strip(), EXIF_DATETIME_FORMAT)
        except ValueError:
            log.info("unparsable EXIF date %r, stamping current date", date_time)
    if moment is None:
        moment = now or datetime.now()
    return date_format.format(moment)


def compute_text_position(
    position: WatermarkPosition,
    canvas_w: int,
    canvas_h: int,
    text_w: int,
    text_h: int,
    padding: float,
) -> Tuple[int, int]:
    """Левый верхний угол блока текста для одной из шести позиций."""
    horizontal = position.horizontal
    if horizontal == "left":
        x = padding
    elif horizontal == "center":
        x = (canvas_w - text_w) / 2.0
    else:
        x = canvas_w - text_w - padding
    y = padding if position.is_top else canvas_h - padding - text_h
    return int(round(x)), int(round(y))


@lru_cache(maxsize=32)
def _load_font(size: int, candidates: Sequence[str]) -> ImageFont.ImageFont:
    for fp in candidates:
        if not fp:
            continue
        try:
            return ImageFont.truetype(fp, size)
        except OSError:
            continue
    log.warning("No TrueType font found; falling back to Pillow default font. Set PHOTOFRAME_FONT to a .ttf path.")
    return ImageFont.load_default(size=size)


def _font_px(font_size: float, canvas_w: int) -> int:
    return max(1, int(round(font_size * canvas_w / 400.0)))


class FrameService:
    def apply_frame(
        self,
        buffer: PixelBuffer,
        frame_style: FrameStyle,
        exif_data: Optional[ExifData] = None,
        watermark_config: Optional[WatermarkConfig] = None,
        date_stamp_style: Optional[DateStampStyle] = None,
    ) -> PixelBuffer:
        """Строит холст с рамкой и надписями.

        Возвращает копию без изменений, если рамка "none", а водяной знак
        и штамп даты выключены.
        """
        watermark_on = watermark_config is not None and watermark_config.enabled
        stamp_on = date_stamp_style is not None and date_stamp_style.enabled
        if frame_style.is_none and not watermark_on and not stamp_on:
            return buffer.copy()

        src_w, src_h = buffer.size
        border = int(src_w * frame_style.border_width_ratio)
        bottom_extra = int(src_h * frame_style.bottom_extra_ratio)
        width = src_w + border * 2
        height = src_h + border * 2 + bottom_extra
        photo_box = (border, border, border + src_w, border + src_h)

        canvas = self._fill_frame(width, height, frame_style)
        if frame_style.outer_shadow:
            canvas = self._draw_outer_shadow(canvas, photo_box)
        canvas = self._place_photo(canvas, buffer, photo_box, frame_style.corner_radius)
        if frame_style.inner_shadow:
            canvas = self._draw_inner_shadow(canvas, photo_box)

        if watermark_on:
            canvas = self._draw_watermark(canvas, watermark_config, exif_data)
        if stamp_on:
            date_time = exif_data.date_time if exif_data is not None else None
            canvas = self._draw_date_stamp(canvas, date_stamp_style, date_time)

        log.debug("frame %s: %dx%d -> %dx%d", frame_style.id, src_w, src_h, width, height)
        return PixelBuffer.from_image(canvas)

    # ---- Рамка и снимок ----
    def _fill_frame(self, width: int, height: int, style: FrameStyle) -> Image.Image:
        if style.corner_radius <= 0:
            return Image.new("RGBA", (width, height), style.frame_color)
        canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        ImageDraw.Draw(canvas).rounded_rectangle(
            [0, 0, width - 1, height - 1], radius=style.corner_radius, fill=style.frame_color
        )
        return canvas

    def _draw_outer_shadow(self, canvas: Image.Image, box: Tuple[int, int, int, int]) -> Image.Image:
        mask = Image.new("L", canvas.size, 0)
        x0, y0, x1, y1 = box
        ImageDraw.Draw(mask).rectangle([x0 - 4, y0 - 4, x1 + 3, y1 + 3], fill=OUTER_SHADOW_ALPHA)
        mask = mask.filter(ImageFilter.GaussianBlur(OUTER_SHADOW_BLUR))
        shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        shadow.putalpha(mask)
        return Image.alpha_composite(canvas, shadow)

    def _place_photo(
        self, canvas: Image.Image, buffer: PixelBuffer, box: Tuple[int, int, int, int], corner_radius: float
    ) -> Image.Image:
        photo = buffer.to_image()

        opaque = bool((buffer.pixels[..., 3] == 255).all())
        if corner_radius <= 0 and opaque:
            canvas.paste(photo, box[:2])
            return canvas

        if corner_radius > 0:
            clip = Image.new("L", photo.size, 0)
            ImageDraw.Draw(clip).rounded_rectangle([0, 0, photo.width - 1, photo.height - 1], radius=corner_radius, fill=255)
            photo.putalpha(ImageChops.multiply(photo.getchannel("A"), clip))
        canvas.alpha_composite(photo, box[:2])
        return canvas

    def _draw_inner_shadow(self, canvas: Image.Image, box: Tuple[int, int, int, int]) -> Image.Image:
        x0, y0, x1, y1 = box
        rows = min(INNER_SHADOW_HEIGHT, y1 - y0)
        if rows <= 0 or x1 <= x0:
            return canvas
        ramp = INNER_SHADOW_ALPHA * (1.0 - (np.arange(rows, dtype=np.float32) + 0.5) / INNER_SHADOW_HEIGHT)
        layer = np.zeros((rows, x1 - x0, 4), dtype=np.uint8)
        layer[..., 3] = ramp.astype(np.uint8)[:, None]
        canvas.alpha_composite(Image.fromarray(layer), (x0, y0))
        return canvas

    # ---- Надписи ----
    def _draw_watermark(self, canvas: Image.Image, cfg: WatermarkConfig, exif: Optional[ExifData]) -> Image.Image:
        text = build_watermark_text(cfg, exif)
        if not text.strip():
            return canvas

        width, height = canvas.size
        font = _load_font(_font_px(cfg.font_size, width), FONT_CANDIDATES)
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        bbox = draw.multiline_textbbox((0, 0), text, font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        x, y = compute_text_position(cfg.position, width, height, tw, th, width * 0.03)

        # полупрозрачная подложка под текст
        draw.rounded_rectangle([x - 8, y - 4, x + tw + 8, y + th + 8], radius=4, fill=(0, 0, 0, WATERMARK_BOX_ALPHA))
        canvas = Image.alpha_composite(canvas, overlay)

        glyphs = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        alpha = int(max(0.0, min(1.0, cfg.opacity)) * 255)
        r, g, b = cfg.text_color[:3]
        ImageDraw.Draw(glyphs).multiline_text((x - bbox[0], y - bbox[1]), text, font=font, fill=(r, g, b, alpha))
        return Image.alpha_composite(canvas, glyphs)

    def _draw_date_stamp(self, canvas: Image.Image, style: DateStampStyle, date_time: Optional[str]) -> Image.Image:
        text = format_date_stamp(date_time, style.format)
        width, height = canvas.size
        font = _load_font(_font_px(style.font_size, width), MONO_FONT_CANDIDATES)
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(overlay)
        bbox = draw.textbbox((0, 0), text, font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
        x, y = compute_text_position(style.position, width, height, tw, th, width * 0.04)
        draw.text((x - bbox[0], y - bbox[1]), text, font=font, fill=tuple(style.color))
        return Image.alpha_composite(canvas, overlay)

"""
test_frame_service.py
---------------------
Unit tests for FrameService.apply_frame() and the watermark/date text helpers.
"""

import re
from datetime import datetime

import numpy as np
import pytest

from photoframe.models.exif_model import ExifData
from photoframe.models.frame_model import (
    NONE_FRAME,
    POLAROID,
    ROUNDED,
    WHITE,
    DateFormat,
    DateStampStyle,
    FrameCategory,
    FrameStyle,
    WatermarkConfig,
    WatermarkPosition,
    WatermarkType,
)
from photoframe.models.image_model import PixelBuffer
from photoframe.services.frame_service import (
    FrameService,
    build_exif_frame_text,
    build_shot_on_text,
    build_watermark_text,
    compute_text_position,
    format_date_stamp,
)


def _frame(**fields) -> FrameStyle:
    return FrameStyle(id="test", name="Test", display_name="Test", category=FrameCategory.SIMPLE, **fields)


@pytest.fixture
def frames():
    return FrameService()


FULL_EXIF = ExifData(
    make="FUJIFILM",
    model="X-T4",
    lens_model="XF35mmF1.4 R",
    focal_length="35",
    f_number="1.4",
    exposure_time="1/250",
    iso=400,
    date_time="2023:07:14 10:20:30",
)


# ---------------------------------------------------------------------------
# 1. Identity
# ---------------------------------------------------------------------------

def test_none_frame_without_text_is_identity(frames, color_buffer):
    out = frames.apply_frame(color_buffer, NONE_FRAME, watermark_config=WatermarkConfig(), date_stamp_style=DateStampStyle())
    assert out == color_buffer
    assert out.pixels is not color_buffer.pixels


def test_none_frame_defaults_are_identity(frames, color_buffer):
    assert frames.apply_frame(color_buffer, NONE_FRAME) == color_buffer


# ---------------------------------------------------------------------------
# 2. Geometry
# ---------------------------------------------------------------------------

def test_border_scenario_canvas_and_inset(frames, portrait_buffer):
    out = frames.apply_frame(portrait_buffer, _frame(border_width_ratio=0.1, bottom_extra_ratio=0.0, corner_radius=0.0))
    assert out.size == (120, 220)
    assert np.array_equal(out.pixels[10:210, 10:110], portrait_buffer.pixels)


def test_frame_colour_fills_border(frames, portrait_buffer):
    out = frames.apply_frame(portrait_buffer, _frame(border_width_ratio=0.1, outer_shadow=False))
    assert tuple(out.pixels[0, 0]) == WHITE
    assert tuple(out.pixels[-1, -1]) == WHITE


def test_polaroid_adds_bottom_margin(frames):
    src = PixelBuffer.blank(200, 100, (10, 20, 30, 255))
    out = frames.apply_frame(src, POLAROID)
    # border int(200 * 0.04) = 8, bottom int(100 * 0.12) = 12
    assert out.size == (216, 128)
    assert np.array_equal(out.pixels[8:108, 8:208], src.pixels)


def test_outer_shadow_darkens_border_near_photo(frames, portrait_buffer):
    with_shadow = frames.apply_frame(portrait_buffer, _frame(border_width_ratio=0.1))
    flat = frames.apply_frame(portrait_buffer, _frame(border_width_ratio=0.1, outer_shadow=False))
    assert with_shadow.pixels[8, 60, 0] < flat.pixels[8, 60, 0]


def test_rounded_frame_clips_photo_corners(frames):
    src = PixelBuffer.blank(100, 100, (255, 0, 0, 255))
    out = frames.apply_frame(src, ROUNDED)
    border = 3  # int(100 * 0.03)
    assert tuple(out.pixels[border + 50, border + 50]) == (255, 0, 0, 255)
    assert tuple(out.pixels[border, border]) != (255, 0, 0, 255)


def test_inner_shadow_darkens_top_of_photo(frames):
    src = PixelBuffer.blank(100, 100, (200, 200, 200, 255))
    out = frames.apply_frame(src, _frame(border_width_ratio=0.05, inner_shadow=True)).pixels
    assert out[5, 55, 0] < 200
    assert tuple(out[80, 55, :3]) == (200, 200, 200)


# ---------------------------------------------------------------------------
# 3. Watermark text
# ---------------------------------------------------------------------------

def test_shot_on_does_not_repeat_make():
    cfg = WatermarkConfig(enabled=True)
    assert build_shot_on_text(cfg, ExifData(make="Canon", model="Canon EOS R5")) == "Shot on Canon EOS R5"


def test_shot_on_joins_distinct_make_and_model():
    cfg = WatermarkConfig(enabled=True)
    assert build_shot_on_text(cfg, ExifData(make="SONY", model="ILCE-7M3")) == "Shot on SONY ILCE-7M3"


def test_shot_on_without_camera_is_empty():
    cfg = WatermarkConfig(enabled=True)
    assert build_shot_on_text(cfg, ExifData()) == ""
    assert build_shot_on_text(cfg, None) == ""


def test_shot_on_respects_make_toggle():
    cfg = WatermarkConfig(enabled=True, show_make=False)
    assert build_shot_on_text(cfg, ExifData(make="SONY", model="ILCE-7M3")) == "Shot on ILCE-7M3"


def test_exif_frame_text_full():
    cfg = WatermarkConfig(enabled=True, type=WatermarkType.EXIF_FRAME, show_lens_info=True, show_settings=True)
    assert build_exif_frame_text(cfg, FULL_EXIF) == "FUJIFILM\nX-T4\nXF35mmF1.4 R\n35mm f/1.4 1/250 ISO 400"


def test_exif_frame_text_skips_missing_fields():
    cfg = WatermarkConfig(enabled=True, type=WatermarkType.EXIF_FRAME, show_settings=True)
    exif = ExifData(model="X100V", focal_length="23", iso=160)
    assert build_exif_frame_text(cfg, exif) == "X100V\n23mm ISO 160"


def test_custom_and_date_stamp_modes_use_configured_text():
    custom = WatermarkConfig(enabled=True, type=WatermarkType.CUSTOM, custom_text="hello")
    stamp = WatermarkConfig(enabled=True, type=WatermarkType.DATE_STAMP, custom_text="'23 07 14")
    assert build_watermark_text(custom, FULL_EXIF) == "hello"
    assert build_watermark_text(stamp, FULL_EXIF) == "'23 07 14"


def test_blank_watermark_draws_nothing(frames, portrait_buffer):
    cfg = WatermarkConfig(enabled=True, type=WatermarkType.CUSTOM, custom_text="   ")
    assert frames.apply_frame(portrait_buffer, NONE_FRAME, watermark_config=cfg) == portrait_buffer


def test_watermark_is_drawn(frames):
    src = PixelBuffer.blank(200, 100, (40, 40, 40, 255))
    cfg = WatermarkConfig(enabled=True, type=WatermarkType.CUSTOM, custom_text="photoframe", font_size=40)
    out = frames.apply_frame(src, NONE_FRAME, watermark_config=cfg)
    assert out.size == src.size
    assert out != src
    # text anchored bottom-right, top-left corner untouched
    assert tuple(out.pixels[0, 0]) == (40, 40, 40, 255)


@pytest.mark.parametrize("position, expected", [
    (WatermarkPosition.TOP_LEFT, (12, 12)),
    (WatermarkPosition.TOP_CENTER, (175, 12)),
    (WatermarkPosition.TOP_RIGHT, (338, 12)),
    (WatermarkPosition.BOTTOM_LEFT, (12, 268)),
    (WatermarkPosition.BOTTOM_CENTER, (175, 268)),
    (WatermarkPosition.BOTTOM_RIGHT, (338, 268)),
])
def test_text_positions(position, expected):
    assert compute_text_position(position, 400, 300, 50, 20, 12.0) == expected


# ---------------------------------------------------------------------------
# 4. Date stamp
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("fmt, expected", [
    (DateFormat.FILM_STYLE, "'23 07 14"),
    (DateFormat.STANDARD, "2023/07/14"),
    (DateFormat.US_STYLE, "07/14/2023"),
    (DateFormat.EU_STYLE, "14.07.2023"),
    (DateFormat.FULL, "2023年7月14日"),
])
def test_date_stamp_formats_exif_date(fmt, expected):
    assert format_date_stamp("2023:07:14 10:20:30", fmt) == expected


def test_date_stamp_without_exif_uses_current_date():
    now = datetime(2024, 3, 5, 12, 0, 0)
    assert format_date_stamp(None, DateFormat.STANDARD, now=now) == "2024/03/05"
    assert re.fullmatch(r"\d{4}/\d{2}/\d{2}", format_date_stamp(None, DateFormat.STANDARD))


def test_date_stamp_unparsable_falls_back():
    now = datetime(2024, 3, 5)
    assert format_date_stamp("not a date", DateFormat.STANDARD, now=now) == "2024/03/05"


def test_date_stamp_is_drawn(frames):
    src = PixelBuffer.blank(200, 100, (40, 40, 40, 255))
    out = frames.apply_frame(src, NONE_FRAME, exif_data=FULL_EXIF, date_stamp_style=DateStampStyle(enabled=True))
    assert out.size == src.size
    assert out != src


def test_blank_date_stamp_watermark_is_not_filled_from_exif(frames, portrait_buffer):
    cfg = WatermarkConfig(enabled=True, type=WatermarkType.DATE_STAMP, custom_text="")
    assert build_watermark_text(cfg, FULL_EXIF) == ""
    assert frames.apply_frame(portrait_buffer, NONE_FRAME, exif_data=FULL_EXIF, watermark_config=cfg) == portrait_buffer


def test_photo_is_never_resampled(frames, portrait_buffer):
    out = frames.apply_frame(portrait_buffer, _frame(border_width_ratio=0.07, corner_radius=6.0))
    border = int(100 * 0.07)
    inset = out.pixels[border + 10:border + 190, border + 10:border + 90]
    assert np.array_equal(inset, portrait_buffer.pixels[10:190, 10:90])

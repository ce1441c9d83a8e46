"""Конфигурация пакета и общий логгер.

Значения читаются из окружения один раз при импорте; `.env` в корне проекта
подхватывается, если он есть.
"""
from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(dotenv_path=os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".env")))


def _env_int(name: str, default: int) -> int:
    raw = (os.getenv(name, "") or "").strip()
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


LOG_LEVEL = (os.getenv("PHOTOFRAME_LOG_LEVEL", "INFO") or "INFO").strip().upper()

# Пути к шрифтам: водяной знак и моноширинный для даты
FONT_PATH = (os.getenv("PHOTOFRAME_FONT", "") or "").strip()
MONO_FONT_PATH = (os.getenv("PHOTOFRAME_MONO_FONT", "") or "").strip()

WORKERS = max(1, _env_int("PHOTOFRAME_WORKERS", 1))
JPEG_QUALITY = min(100, max(1, _env_int("PHOTOFRAME_JPEG_QUALITY", 95)))

FONT_CANDIDATES = (
    FONT_PATH,
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/System/Library/Fonts/Supplemental/Arial.ttf",
    "C:/Windows/Fonts/arial.ttf",
    "DejaVuSans.ttf",
)

MONO_FONT_CANDIDATES = (
    MONO_FONT_PATH,
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono-Bold.ttf",
    "/System/Library/Fonts/Supplemental/Courier New Bold.ttf",
    "C:/Windows/Fonts/courbd.ttf",
    "DejaVuSansMono-Bold.ttf",
)

logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO), format="%(asctime)s | %(levelname)s | %(message)s")
logger = logging.getLogger("photoframe")

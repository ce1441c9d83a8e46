"""Точка входа: обработка одного файла из командной строки."""
from __future__ import annotations

import argparse
from typing import List, Optional

from photoframe.core.config import logger
from photoframe.models.exif_model import ExifData
from photoframe.models.filter_model import ALL_FILTERS, get_filter_preset
from photoframe.models.frame_model import (
    ALL_FRAMES,
    DateFormat,
    DateStampStyle,
    WatermarkConfig,
    WatermarkPosition,
    WatermarkType,
    get_frame_style,
)
from photoframe.models.tone_model import ToneParams
from photoframe.services.image_service import ImageService
from photoframe.services.pipeline_service import EditRequest, PipelineService

EXIT_OK = 0
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photoframe", description="Film filters, frames and watermarks for photos")
    parser.add_argument("--input", "-i", help="Input image")
    parser.add_argument("--output", "-o", help="Output image; format follows the extension")
    parser.add_argument("--list", action="store_true", help="Print filter and frame ids and exit")

    parser.add_argument("--filter", default="original", help="Filter preset id")
    parser.add_argument("--frame", default="none", help="Frame style id")

    tone = parser.add_argument_group("tone")
    tone.add_argument("--brightness", type=float, default=0.0)
    tone.add_argument("--contrast", type=float, default=1.0)
    tone.add_argument("--saturation", type=float, default=1.0)
    tone.add_argument("--exposure", type=float, default=0.0)
    tone.add_argument("--temperature", type=float, default=0.0)
    tone.add_argument("--sharpness", type=float, default=0.0)

    text = parser.add_argument_group("text")
    text.add_argument("--watermark", metavar="TEXT", help="Custom watermark text")
    text.add_argument("--shot-on", action="store_true", help='"Shot on <make model>" watermark from --make/--model')
    text.add_argument("--position", default=WatermarkPosition.BOTTOM_RIGHT.value,
                      choices=[p.value for p in WatermarkPosition])
    text.add_argument("--make")
    text.add_argument("--model")
    text.add_argument("--date-time", help="Capture time, EXIF format yyyy:MM:dd HH:mm:ss")
    text.add_argument("--date-stamp", action="store_true", help="Burn in a film-style date stamp")
    text.add_argument("--date-format", default=DateFormat.FILM_STYLE.pattern,
                      help="Date stamp pattern or name, e.g. \"yyyy/MM/dd\" or standard")
    return parser


def _print_catalogs() -> None:
    print("Filters:")
    for preset in ALL_FILTERS:
        print(f"  {preset.id:<18} {preset.display_name} ({preset.category.display_name})")
    print("Frames:")
    for style in ALL_FRAMES:
        print(f"  {style.id:<18} {style.display_name} ({style.category.display_name})")


def build_request(args: argparse.Namespace) -> EditRequest:
    """Собирает параметры конвейера из аргументов.

    Raises:
        KeyError: для неизвестного фильтра, рамки или формата даты.
    """
    tone = ToneParams(
        brightness=args.brightness,
        contrast=args.contrast,
        saturation=args.saturation,
        exposure=args.exposure,
        temperature=args.temperature,
        sharpness=args.sharpness,
    )
    exif = None
    if args.make or args.model or args.date_time:
        exif = ExifData(make=args.make, model=args.model, date_time=args.date_time)

    position = WatermarkPosition(args.position)
    if args.watermark:
        watermark = WatermarkConfig(enabled=True, type=WatermarkType.CUSTOM, custom_text=args.watermark, position=position)
    elif args.shot_on:
        watermark = WatermarkConfig(enabled=True, type=WatermarkType.SHOT_ON, position=position)
    else:
        watermark = WatermarkConfig()

    date_stamp = DateStampStyle(enabled=args.date_stamp, format=DateFormat.from_pattern(args.date_format))

    return EditRequest(
        tone=tone,
        filter_preset=get_filter_preset(args.filter),
        frame_style=get_frame_style(args.frame),
        exif=exif,
        watermark=watermark,
        date_stamp=date_stamp,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.list:
        _print_catalogs()
        return EXIT_OK
    if not args.input or not args.output:
        parser.error("--input and --output are required")

    try:
        request = build_request(args)
    except KeyError as exc:
        print(f"Error: {exc.args[0]}")
        return EXIT_USAGE

    images = ImageService()
    try:
        image_data = images.load_image(args.input)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}")
        return EXIT_USAGE

    print(f"Input: {image_data.width}x{image_data.height} pixels")
    result = PipelineService().process(image_data.buffer, request)
    print(f"Output: {result.width}x{result.height} pixels")

    try:
        saved = images.save_image(result, args.output)
    except (OSError, ValueError) as exc:
        logger.error("could not save %s: %s", args.output, exc)
        print(f"Error: {exc}")
        return EXIT_USAGE
    print(f"Saved: {saved}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())

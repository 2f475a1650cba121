"""
Gas Meter Reader - Entry Point

Recognizes single digit crops or reads whole meter photos in batch.

Example:
    python main.py recognize templates digit.png
    python main.py read                      # all 370*.png in the current directory
    python main.py read photo1.png photo2.png --debug
"""

import sys
import logging
import argparse
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from PIL import Image

sys.path.insert(0, str(Path(__file__).parent / "src"))

from meter_ocr import (
    MeterOCRError,
    PixelTemplateRecognizer,
    find_meter_photos,
    load_templates,
    read_meter_files,
)
from meter_ocr.debug import save_debug_image
from meter_ocr.fingerprint import DEFAULT_PARAMS
from meter_ocr.settings import SETTINGS_FILE, digit_slots_from_settings, load_settings


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging - output to console and optionally a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True
    )


def cmd_recognize(args, settings) -> int:
    """Recognize one cropped digit image."""
    templates = load_templates(args.template_dir, DEFAULT_PARAMS)
    recognizer = PixelTemplateRecognizer(templates)

    logger.info(f"Loading image {args.image}...")
    with Image.open(args.image) as image:
        image.load()
        analysis = recognizer.analyze(image)
    result = recognizer.match_analysis(analysis)

    logger.info(
        f"Image stats: min={analysis.stats.min}, max={analysis.stats.max}, "
        f"threshold={analysis.threshold}"
    )
    logger.info(f"Digit origin: {analysis.origin}")

    print(f"Recognized: {result.label} (confidence: {result.confidence:.3f})")
    return 0


def cmd_read(args, settings) -> int:
    """Read every digit slot of one or more meter photos."""
    template_dir = args.templates or settings["template_dir"]
    slots = digit_slots_from_settings(settings)
    debug_enabled = args.debug or settings.get("debug_enabled", False)

    recognizer = PixelTemplateRecognizer(load_templates(template_dir, DEFAULT_PARAMS))

    photos = [Path(p) for p in args.photos] or find_meter_photos(".")
    if not photos:
        logger.error("No meter photos found")
        return 1

    results = read_meter_files(photos, recognizer, slots, settings["output_suffix"])
    failures = sum(1 for reading in results.values() if reading is None)

    for photo, reading in results.items():
        if reading is None:
            continue

        print(f"{photo}: {reading.text}")

        if debug_enabled:
            debug_dir = Path(settings["debug_dir"])
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            try:
                with Image.open(photo) as image:
                    path = save_debug_image(
                        image, reading, debug_dir / f"debug_{timestamp}_{Path(photo).stem}.png",
                        slots=slots, debug_dir=debug_dir
                    )
            except OSError as e:
                logger.error(f"Failed to save debug image for {photo}: {e}")
                continue
            logger.info(f"Debug image saved: {path}")

    logger.info(f"Processed {len(results) - failures}/{len(results)} photos")
    return 1 if failures else 0


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Gas Meter Reader - digit recognition by direct pixel comparison"
    )
    parser.add_argument(
        "--config", "-c",
        default=str(SETTINGS_FILE),
        help=f"Settings file (default: {SETTINGS_FILE})"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    parser.add_argument(
        "--log-file",
        help="Also write log output to this file"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    recognize = subparsers.add_parser(
        "recognize",
        help=f"Recognize a single digit crop ({DEFAULT_PARAMS.template_width}x"
             f"{DEFAULT_PARAMS.template_height} block)"
    )
    recognize.add_argument("template_dir", help="Directory with 0.png ... 9.png")
    recognize.add_argument("image", help="Cropped digit image")
    recognize.set_defaults(handler=cmd_recognize)

    read = subparsers.add_parser("read", help="Read all digits of meter photos")
    read.add_argument("photos", nargs="*", help="Meter photos (default: 370*.png)")
    read.add_argument("--templates", "-t", help="Template directory (overrides settings)")
    read.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Save annotated debug images"
    )
    read.set_defaults(handler=cmd_read)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the selected command."""
    args = parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    settings = load_settings(args.config)

    try:
        return args.handler(args, settings)
    except (OSError, MeterOCRError) as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""
Meter Reading Driver

Crops the eight digit slots out of a gas-meter photo, recognizes each one
independently and writes the concatenated reading next to the photo.
"""

import logging
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from PIL import Image

from .base import DigitRecognizer
from .errors import MeterOCRError
from .result import DigitSlot, MeterReading

logger = logging.getLogger(__name__)


# Digit crop geometry, measured on the reference photos
DIGIT_WIDTH = 150
DIGIT_HEIGHT = 200
DIGIT_ROW_Y = 1350
DIGIT_X_POSITIONS = (370, 620, 870, 1110, 1360, 1620, 1860, 2130)

DIGIT_SLOTS: List[DigitSlot] = [
    DigitSlot(x, DIGIT_ROW_Y, DIGIT_WIDTH, DIGIT_HEIGHT) for x in DIGIT_X_POSITIONS
]

DEFAULT_PHOTO_PATTERN = "370*.png"
RESULT_SUFFIX = ".txt"


def crop_digit(image: Image.Image, slot: DigitSlot) -> Image.Image:
    """Crop one digit slot. Regions past the photo edge come back black."""
    return image.crop(slot.box)


def read_meter(
    image: Image.Image,
    recognizer: DigitRecognizer,
    slots: Sequence[DigitSlot] = DIGIT_SLOTS
) -> MeterReading:
    """
    Recognize every digit slot of a meter photo.

    Args:
        image: Decoded meter photo
        recognizer: Recognizer used for each slot
        slots: Crop rectangles, left to right

    Returns:
        MeterReading with one Recognition per slot
    """
    start_time = time.perf_counter()

    digits = [recognizer.recognize(crop_digit(image, slot)) for slot in slots]

    return MeterReading(
        digits=digits,
        processing_time_ms=(time.perf_counter() - start_time) * 1000
    )


def result_path_for(photo_path: Union[str, Path], suffix: str = RESULT_SUFFIX) -> Path:
    """370123.png -> 370123.txt"""
    try:
        return Path(photo_path).with_suffix(suffix)
    except ValueError as e:
        raise MeterOCRError(f"Invalid output suffix: {suffix!r}") from e


def read_meter_file(
    photo_path: Union[str, Path],
    recognizer: DigitRecognizer,
    slots: Sequence[DigitSlot] = DIGIT_SLOTS,
    output_suffix: str = RESULT_SUFFIX
) -> MeterReading:
    """
    Read a meter photo from disk and write its reading beside it.

    Raises:
        OSError: If the photo cannot be opened or decoded, or the result
                 cannot be written
        MeterOCRError: If recognition fails
    """
    photo_path = Path(photo_path)
    logger.info(f"Processing {photo_path}...")

    with Image.open(photo_path) as image:
        image.load()
        reading = read_meter(image, recognizer, slots)
    reading.source = str(photo_path)

    output_path = result_path_for(photo_path, output_suffix)
    output_path.write_text(reading.text + "\n", encoding="utf-8")

    logger.info(f"Result: {reading.text} ({reading.processing_time_ms:.1f}ms)")
    return reading


def read_meter_files(
    photo_paths: Iterable[Union[str, Path]],
    recognizer: DigitRecognizer,
    slots: Sequence[DigitSlot] = DIGIT_SLOTS,
    output_suffix: str = RESULT_SUFFIX
) -> Dict[str, Optional[MeterReading]]:
    """
    Read a batch of meter photos.

    A failing photo is logged and recorded as None; the remaining photos
    are still processed.

    Returns:
        Mapping of photo path -> MeterReading (or None on failure)
    """
    results: Dict[str, Optional[MeterReading]] = {}

    for photo_path in photo_paths:
        try:
            results[str(photo_path)] = read_meter_file(photo_path, recognizer, slots, output_suffix)
        except (OSError, MeterOCRError) as e:
            logger.error(f"Failed to read {photo_path}: {e}")
            results[str(photo_path)] = None

    return results


def find_meter_photos(directory: Union[str, Path] = ".", pattern: str = DEFAULT_PHOTO_PATTERN) -> List[Path]:
    """Meter photos in a directory, sorted by name."""
    return sorted(Path(directory).glob(pattern))

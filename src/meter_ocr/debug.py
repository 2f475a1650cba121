"""
OCR Debug Utilities

Functions for saving annotated meter photos and managing debug output.
"""

from pathlib import Path
from typing import Optional, Sequence, Union

from PIL import Image, ImageDraw, ImageFont

from .fingerprint import DEFAULT_PARAMS, FingerprintParams
from .meter import DIGIT_SLOTS
from .result import DigitSlot, MeterReading


# Debug settings
DEBUG_DIR = Path("./debug")
MAX_DEBUG_IMAGES = 10

# Confidence thresholds for coloring
HIGH_CONFIDENCE = 0.95
MEDIUM_CONFIDENCE = 0.80


def get_confidence_color(confidence: float) -> str:
    """
    Get color name for confidence level.

    Args:
        confidence: Similarity score

    Returns:
        Color name understood by ImageDraw
    """
    if confidence >= HIGH_CONFIDENCE:
        return "green"
    elif confidence >= MEDIUM_CONFIDENCE:
        return "yellow"
    else:
        return "red"


def save_debug_image(
    image: Image.Image,
    reading: Optional[MeterReading],
    path: Union[str, Path],
    slots: Sequence[DigitSlot] = DIGIT_SLOTS,
    params: FingerprintParams = DEFAULT_PARAMS,
    debug_dir: Path = DEBUG_DIR
) -> Path:
    """
    Save an annotated debug image showing slot crops and recognition results.

    Annotations include:
    - Slot rectangles
    - Fingerprint window at each detected origin
    - Recognized digits colored by confidence

    Args:
        image: Original meter photo
        reading: Reading of the photo (can be None)
        path: Output file path
        slots: Crop rectangles used for the reading
        params: Fingerprint constants (window size)
        debug_dir: Directory pruned to the newest MAX_DEBUG_IMAGES files

    Returns:
        Path of the written image
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    debug_img = image.convert("RGB")
    draw = ImageDraw.Draw(debug_img)
    font = ImageFont.load_default()

    for index, slot in enumerate(slots):
        draw.rectangle(slot.box, outline="blue", width=3)

        if reading is None or index >= len(reading.digits):
            continue

        digit = reading.digits[index]
        color = get_confidence_color(digit.confidence)

        if digit.origin is not None:
            ox = slot.x + digit.origin[0]
            oy = slot.y + digit.origin[1]
            draw.rectangle(
                [ox, oy, ox + params.template_width, oy + params.template_height],
                outline=color,
                width=2
            )

        label = f"{digit.label} {digit.confidence:.3f}"
        draw.text((slot.x, slot.y + slot.height + 5), label, fill=color, font=font)

    if reading is not None:
        summary = f"Reading: {reading.text}, Time: {reading.processing_time_ms:.1f}ms"
        draw.text((10, 10), summary, fill="blue", font=font)

    debug_img.save(path, "PNG")

    _cleanup_debug_images(debug_dir)
    return path


def _cleanup_debug_images(debug_dir: Path = DEBUG_DIR) -> None:
    """Remove old debug images, keeping only the most recent MAX_DEBUG_IMAGES."""
    if not debug_dir.exists():
        return

    # Get all debug images sorted by modification time
    debug_files = sorted(
        debug_dir.glob("debug_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    # Remove old files
    for old_file in debug_files[MAX_DEBUG_IMAGES:]:
        try:
            old_file.unlink()
        except OSError:
            pass

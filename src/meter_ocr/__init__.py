"""
Gas Meter Digit OCR

Recognizes the digits of a mechanical gas-meter display by direct pixel
comparison against reference templates.

Usage:
    from meter_ocr import create_recognizer, read_meter

    # Load templates (templates/0.png ... 9.png) and build a recognizer
    recognizer = create_recognizer(template_dir="./templates")

    # Recognize a single cropped digit
    result = recognizer.recognize(digit_image)
    print(result.label, result.confidence)

    # Read all eight digits of a meter photo
    reading = read_meter(photo, recognizer)
    print(reading.text)
"""

# Public API - Errors
from .errors import MeterOCRError, NoTemplatesError, UnsupportedImageError

# Public API - Result types
from .result import DigitSlot, MeterReading, Recognition

# Public API - Pipeline stages
from .grayscale import color_accessor, gray_at, rgb_to_gray, to_gray_array
from .fingerprint import (
    DEFAULT_PARAMS,
    DigitAnalysis,
    FingerprintParams,
    ImageStats,
    analyze_digit,
    detection_threshold,
    extract_fingerprint,
    find_digit_origin,
    high_threshold,
    image_stats,
)
from .matching import NO_MATCH_LABEL, best_match, cosine_similarity, match_templates, score_all
from .templates import TemplateSet, create_template, create_template_from_file, load_templates

# Public API - Recognizers
from .base import DigitRecognizer
from .recognizer import PixelTemplateRecognizer
from .factory import available_recognizers, create_recognizer, register_recognizer

# Public API - Meter driver
from .meter import (
    DIGIT_SLOTS,
    crop_digit,
    find_meter_photos,
    read_meter,
    read_meter_file,
    read_meter_files,
)

__all__ = [
    # Errors
    "MeterOCRError",
    "NoTemplatesError",
    "UnsupportedImageError",
    # Result types
    "DigitSlot",
    "MeterReading",
    "Recognition",
    # Grayscale
    "color_accessor",
    "gray_at",
    "rgb_to_gray",
    "to_gray_array",
    # Fingerprint
    "DEFAULT_PARAMS",
    "DigitAnalysis",
    "FingerprintParams",
    "ImageStats",
    "analyze_digit",
    "detection_threshold",
    "extract_fingerprint",
    "find_digit_origin",
    "high_threshold",
    "image_stats",
    # Matching
    "NO_MATCH_LABEL",
    "best_match",
    "cosine_similarity",
    "match_templates",
    "score_all",
    # Templates
    "TemplateSet",
    "create_template",
    "create_template_from_file",
    "load_templates",
    # Recognizers
    "DigitRecognizer",
    "PixelTemplateRecognizer",
    "available_recognizers",
    "create_recognizer",
    "register_recognizer",
    # Meter driver
    "DIGIT_SLOTS",
    "crop_digit",
    "find_meter_photos",
    "read_meter",
    "read_meter_file",
    "read_meter_files",
]

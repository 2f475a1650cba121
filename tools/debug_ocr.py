"""
Diagnostic script to analyze digit recognition on meter photos.
Outputs luminance stats, thresholds, origins and all template scores per slot.
"""

import sys
import argparse
from pathlib import Path

import numpy as np
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from meter_ocr import DIGIT_SLOTS, PixelTemplateRecognizer, crop_digit, load_templates
from meter_ocr.grayscale import to_gray_array


def analyze_photo(photo_path: str, recognizer: PixelTemplateRecognizer):
    """Analyze a photo and report per-slot recognition details."""
    print(f"\n{'='*60}")
    print(f"Analyzing: {photo_path}")
    print(f"{'='*60}")

    with Image.open(photo_path) as image:
        image.load()
        crops = [crop_digit(image, slot) for slot in DIGIT_SLOTS]

    print(f"{'Slot':>4} {'Min':>4} {'Max':>4} {'Mid':>4} {'Det':>4} {'Origin':>10} {'Digit':>5} {'Conf':>6}")
    print("-" * 50)

    reading = []
    for index, crop in enumerate(crops):
        grid = to_gray_array(crop)
        analysis = recognizer.analyze_grid(grid)
        result = recognizer.match_analysis(analysis)
        reading.append(result.label)

        origin = f"{analysis.origin[0]},{analysis.origin[1]}"
        flag = ""
        if analysis.origin == (0, 0):
            flag = " <-- origin at corner (no ink found?)"

        print(f"{index + 1:>4} {analysis.stats.min:>4} {analysis.stats.max:>4} "
              f"{analysis.threshold:>4} {analysis.detection_threshold:>4} {origin:>10} "
              f"{result.label:>5} {result.confidence:>6.3f}{flag}")

        # Runner-up margin shows how ambiguous the match was
        ranked = sorted(result.scores.items(), key=lambda item: item[1], reverse=True)
        scores = " ".join(f"{label}={score:.3f}" for label, score in ranked)
        margin = ranked[0][1] - ranked[1][1] if len(ranked) > 1 else float("nan")
        print(f"       scores: {scores}")
        print(f"       margin: {margin:.3f}, ink pixels: {int(np.sum(grid > analysis.detection_threshold))}")

    print(f"\nReading: {''.join(reading)}")


def main():
    parser = argparse.ArgumentParser(description="Per-slot recognition diagnostics")
    parser.add_argument("photos", nargs="+", help="Meter photos")
    parser.add_argument("--templates", "-t", default="templates", help="Template directory")
    args = parser.parse_args()

    recognizer = PixelTemplateRecognizer(load_templates(args.templates))

    for photo in args.photos:
        analyze_photo(photo, recognizer)

    return 0


if __name__ == "__main__":
    sys.exit(main())

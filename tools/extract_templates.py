#!/usr/bin/env python3
"""
Template extraction tool for OCR calibration.

Builds digit templates from a meter photo whose reading is known.
Saves templates to templates/ for the recognizer.

Usage:
    python extract_templates.py <photo> <reading> [--out DIR] [--overwrite] [--interactive]

The script will:
1. Crop the eight digit slots of the photo
2. Label each crop with the matching character of the known reading
   (or ask you to confirm each label with --interactive)
3. Save the first crop of each digit as <digit>.png
4. Fingerprint every saved template to verify it is usable

Examples:
    python extract_templates.py 370_0001.png 04581237
    python extract_templates.py 370_0002.png 04581239 --interactive
"""

import sys
import argparse
from pathlib import Path

import cv2
import numpy as np
from PIL import Image

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from meter_ocr import DIGIT_SLOTS, crop_digit, create_template_from_file
from meter_ocr.fingerprint import DEFAULT_PARAMS, analyze_digit
from meter_ocr.grayscale import to_gray_array


TEMPLATE_DIR = Path("./templates")


def extract_cells(photo_path: str) -> list:
    """
    Crop all digit slots from a meter photo.

    Returns list of crop images, left to right.
    """
    with Image.open(photo_path) as image:
        image.load()
        print(f"Photo size: {image.size}, mode: {image.mode}")
        return [crop_digit(image, slot) for slot in DIGIT_SLOTS]


def interactive_label(crops: list, reading: str) -> list:
    """
    Show each crop and let the user confirm or change its label.

    Returns list of labels ('' for skipped crops).
    """
    labels = []

    print("\n" + "="*60)
    print("Interactive Template Labeling")
    print("="*60)
    print("Press Enter/Space to accept the label, a digit (0-9) to relabel,")
    print("'s' to skip, or 'q' to stop.")
    print()

    cv2.namedWindow("Digit", cv2.WINDOW_NORMAL)
    cv2.resizeWindow("Digit", 300, 400)

    for i, (crop, expected) in enumerate(zip(crops, reading)):
        grid = to_gray_array(crop).astype(np.uint8)
        analysis = analyze_digit(grid, DEFAULT_PARAMS)

        # Outline the fingerprint window at the detected origin
        display = cv2.cvtColor(grid, cv2.COLOR_GRAY2BGR)
        ox, oy = analysis.origin
        cv2.rectangle(
            display,
            (ox, oy),
            (ox + DEFAULT_PARAMS.template_width, oy + DEFAULT_PARAMS.template_height),
            (0, 0, 255), 1
        )
        cv2.imshow("Digit", display)

        print(f"Slot {i+1}/{len(crops)} origin={analysis.origin} label={expected}: ", end="", flush=True)

        while True:
            key = cv2.waitKey(0) & 0xFF

            if key == ord('q'):
                print("quit")
                cv2.destroyAllWindows()
                return labels + [""] * (len(crops) - len(labels))
            elif key == ord('s'):
                print("skipped")
                labels.append("")
                break
            elif key in (13, 10, ord(' ')):
                print(expected)
                labels.append(expected)
                break
            elif ord('0') <= key <= ord('9'):
                label = chr(key)
                print(f"{label} (relabeled)")
                labels.append(label)
                break
            else:
                print(f"\n  Invalid key. Enter/Space, 0-9, 's', or 'q': ", end="", flush=True)

    cv2.destroyAllWindows()
    return labels


def save_templates(crops: list, labels: list, template_dir: Path, overwrite: bool) -> list:
    """Save the first crop of each label. Returns the saved paths."""
    template_dir.mkdir(parents=True, exist_ok=True)

    saved = []
    seen = set()
    for crop, label in zip(crops, labels):
        if not label or label in seen:
            continue
        seen.add(label)

        path = template_dir / f"{label}.png"
        if path.exists() and not overwrite:
            print(f"Exists, kept: {path}")
            continue

        crop.save(path, "PNG")
        saved.append(path)
        print(f"Saved: {path}")

    return saved


def verify_templates(paths: list) -> int:
    """Fingerprint saved templates; returns the number of empty fingerprints."""
    empty = 0
    for path in paths:
        fingerprint = create_template_from_file(path, DEFAULT_PARAMS)
        peak = float(fingerprint.max())
        print(f"  {path.name}: {fingerprint.size} values, peak={peak:.3f}")
        if peak == 0.0:
            print(f"  WARNING: {path.name} has no ink in its fingerprint window")
            empty += 1
    return empty


def parse_args():
    parser = argparse.ArgumentParser(description="Extract digit templates from a labeled meter photo")
    parser.add_argument("photo", help="Meter photo")
    parser.add_argument("reading", help=f"Known reading ({len(DIGIT_SLOTS)} digits)")
    parser.add_argument("--out", "-o", default=str(TEMPLATE_DIR), help="Template directory")
    parser.add_argument("--overwrite", action="store_true", help="Replace existing templates")
    parser.add_argument("--interactive", "-i", action="store_true", help="Confirm each label in a preview window")
    return parser.parse_args()


def main():
    args = parse_args()

    if len(args.reading) != len(DIGIT_SLOTS) or not args.reading.isdigit():
        print(f"Reading must be exactly {len(DIGIT_SLOTS)} digits, got: {args.reading}")
        return 1

    print(f"Using photo: {args.photo}")
    crops = extract_cells(args.photo)

    if args.interactive:
        labels = interactive_label(crops, args.reading)
    else:
        labels = list(args.reading)

    saved = save_templates(crops, labels, Path(args.out), args.overwrite)
    if not saved:
        print("\nNo templates saved")
        return 0

    print(f"\nVerifying {len(saved)} templates:")
    empty = verify_templates(saved)

    missing = sorted(set("0123456789") - {p.stem for p in Path(args.out).glob("*.png")})
    if missing:
        print(f"\nStill missing templates: {', '.join(missing)}")

    return 1 if empty else 0


if __name__ == "__main__":
    sys.exit(main())

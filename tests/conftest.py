"""
Shared fixtures: synthetic digit crops and template directories.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, ImageDraw

# Add source root to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))


CROP_SIZE = (150, 200)
STROKE = 12

# Stroke rectangles (x0, y0, x1, y1) relative to the digit's top-left corner.
# Every shape spans the same 60x110 box so the bounding corner is the same.
DIGIT_STROKES = {
    "0": [(0, 0, 60, STROKE), (0, 98, 60, 110), (0, 0, STROKE, 110), (48, 0, 60, 110)],
    "1": [(0, 0, 24, STROKE), (24, 0, 36, 110), (0, 98, 60, 110)],
    "3": [(0, 0, 60, STROKE), (12, 49, 60, 61), (0, 98, 60, 110), (48, 0, 60, 110)],
    "4": [(0, 0, STROKE, 61), (0, 49, 60, 61), (36, 0, 48, 110)],
    "7": [(0, 0, 60, STROKE), (48, 0, 60, 110)],
    "8": [(0, 0, 60, STROKE), (0, 49, 60, 61), (0, 98, 60, 110), (0, 0, STROKE, 110), (48, 0, 60, 110)],
}


def draw_digit(label: str, offset=(30, 30), mode: str = "RGB", ink=255, background=0) -> Image.Image:
    """Render a synthetic digit crop: bright strokes on a dark background."""
    image = Image.new("L", CROP_SIZE, background)
    draw = ImageDraw.Draw(image)
    ox, oy = offset
    for x0, y0, x1, y1 in DIGIT_STROKES[label]:
        draw.rectangle([ox + x0, oy + y0, ox + x1 - 1, oy + y1 - 1], fill=ink)

    if mode == "P":
        # Two-entry palette: index 0 = background, index 1 = ink
        indices = (np.asarray(image) == ink).astype(np.uint8)
        indexed = Image.frombytes("P", image.size, indices.tobytes())
        indexed.putpalette([background] * 3 + [ink] * 3)
        return indexed
    return image.convert(mode)


@pytest.fixture
def template_dir(tmp_path) -> Path:
    """Directory holding templates for every label in DIGIT_STROKES."""
    directory = tmp_path / "templates"
    directory.mkdir()
    for label in DIGIT_STROKES:
        draw_digit(label).save(directory / f"{label}.png")
    return directory

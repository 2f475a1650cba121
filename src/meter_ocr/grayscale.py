"""
Grayscale Conversion

Resolves decoded pixels to RGB through a small accessor hierarchy and
reduces them to integer luminance:

    gray = (299 * R + 587 * G + 114 * B) // 1000

Supported Pillow modes: RGB, RGBA, P (palette) and L. Anything else raises
UnsupportedImageError.
"""

from abc import ABC, abstractmethod
from typing import Dict, Tuple, Type

import numpy as np
from PIL import Image

from .errors import UnsupportedImageError


# Luminance weights (per mille)
RED_WEIGHT = 299
GREEN_WEIGHT = 587
BLUE_WEIGHT = 114


def rgb_to_gray(r: int, g: int, b: int) -> int:
    """Integer luminance of a single RGB triple."""
    return (r * RED_WEIGHT + g * GREEN_WEIGHT + b * BLUE_WEIGHT) // 1000


class ColorAccessor(ABC):
    """
    Resolves the pixels of one image to RGB.

    Subclasses handle a single pixel encoding. Grayscale conversion only
    depends on this interface.
    """

    mode: str = ""

    def __init__(self, image: Image.Image):
        self.image = image

    @abstractmethod
    def rgb(self) -> np.ndarray:
        """Return a (height, width, 3) uint8 array of RGB values."""
        pass

    def rgb_at(self, x: int, y: int) -> Tuple[int, int, int]:
        """Resolve a single pixel to an (r, g, b) triple."""
        r, g, b = self.rgb()[y, x]
        return int(r), int(g), int(b)


class TruecolorAccessor(ColorAccessor):
    mode = "RGB"

    def rgb(self) -> np.ndarray:
        return np.asarray(self.image, dtype=np.uint8)

    def rgb_at(self, x: int, y: int) -> Tuple[int, int, int]:
        return self.image.getpixel((x, y))


class TruecolorAlphaAccessor(ColorAccessor):
    mode = "RGBA"

    def rgb(self) -> np.ndarray:
        # Alpha does not contribute to luminance
        return np.asarray(self.image, dtype=np.uint8)[:, :, :3]

    def rgb_at(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b, _ = self.image.getpixel((x, y))
        return r, g, b


class PaletteAccessor(ColorAccessor):
    mode = "P"

    def _palette(self) -> np.ndarray:
        palette = self.image.getpalette() or []
        # Pad to a full 256-entry table so every index resolves
        table = np.zeros(256 * 3, dtype=np.uint8)
        table[:len(palette)] = palette[:256 * 3]
        return table.reshape(256, 3)

    def rgb(self) -> np.ndarray:
        indices = np.asarray(self.image, dtype=np.uint8)
        return self._palette()[indices]

    def rgb_at(self, x: int, y: int) -> Tuple[int, int, int]:
        r, g, b = self._palette()[self.image.getpixel((x, y))]
        return int(r), int(g), int(b)


class GrayscaleAccessor(ColorAccessor):
    mode = "L"

    def rgb(self) -> np.ndarray:
        values = np.asarray(self.image, dtype=np.uint8)
        return np.repeat(values[:, :, np.newaxis], 3, axis=2)

    def rgb_at(self, x: int, y: int) -> Tuple[int, int, int]:
        v = self.image.getpixel((x, y))
        return v, v, v


# Registry of accessors by Pillow mode
_ACCESSORS: Dict[str, Type[ColorAccessor]] = {
    cls.mode: cls
    for cls in (TruecolorAccessor, TruecolorAlphaAccessor, PaletteAccessor, GrayscaleAccessor)
}


def color_accessor(image: Image.Image) -> ColorAccessor:
    """
    Select the accessor for an image's pixel encoding.

    Raises:
        UnsupportedImageError: If the mode has no accessor
    """
    accessor_class = _ACCESSORS.get(image.mode)
    if accessor_class is None:
        raise UnsupportedImageError(image.mode)
    return accessor_class(image)


def gray_at(image: Image.Image, x: int, y: int) -> int:
    """Luminance of the pixel at (x, y)."""
    return rgb_to_gray(*color_accessor(image).rgb_at(x, y))


def to_gray_array(image: Image.Image) -> np.ndarray:
    """
    Convert an image to a 2-D luminance grid.

    Args:
        image: Decoded PIL Image in a supported mode

    Returns:
        Read-only int32 array of shape (height, width), values 0-255
    """
    rgb = color_accessor(image).rgb().astype(np.int32)
    gray = (rgb[:, :, 0] * RED_WEIGHT
            + rgb[:, :, 1] * GREEN_WEIGHT
            + rgb[:, :, 2] * BLUE_WEIGHT) // 1000
    gray.flags.writeable = False
    return gray

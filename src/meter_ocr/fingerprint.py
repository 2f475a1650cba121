"""
Origin Detection and Fingerprint Extraction

Locates the top-left corner of a digit's ink inside a grayscale crop and
turns a fixed-size block starting there into a normalized vector.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


# Calibrated for the meter display font (150x200 crops)
TEMPLATE_WIDTH = 90
TEMPLATE_HEIGHT = 140

# The high threshold only catches the bright core of a stroke, so the
# detected corner is pulled back by this many pixels on each axis
ORIGIN_OFFSET = 10

# Origin detection never uses less than this share of the luminance range
HIGH_THRESHOLD_PERCENT = 85


@dataclass(frozen=True)
class FingerprintParams:
    """Calibrated constants shared by templates and queries."""
    template_width: int = TEMPLATE_WIDTH
    template_height: int = TEMPLATE_HEIGHT
    origin_offset: int = ORIGIN_OFFSET
    threshold_percent: int = HIGH_THRESHOLD_PERCENT

    @property
    def size(self) -> int:
        """Length of a fingerprint vector."""
        return self.template_width * self.template_height


DEFAULT_PARAMS = FingerprintParams()


@dataclass(frozen=True)
class ImageStats:
    """Minimum and maximum luminance of a grid."""
    min: int
    max: int

    @property
    def range(self) -> int:
        return self.max - self.min

    @property
    def midpoint(self) -> int:
        """Default caller threshold for origin detection."""
        return (self.min + self.max) // 2


@dataclass(frozen=True)
class DigitAnalysis:
    """Intermediate values of one pass through the normalization routine."""
    stats: ImageStats
    threshold: int
    detection_threshold: int
    origin: Tuple[int, int]  # (x, y)
    fingerprint: np.ndarray


def image_stats(grid: np.ndarray) -> ImageStats:
    """Compute (min, max) over a non-empty grid."""
    return ImageStats(min=int(grid.min()), max=int(grid.max()))


def high_threshold(stats: ImageStats, params: FingerprintParams = DEFAULT_PARAMS) -> int:
    """Brightness floor for origin detection (integer, truncating)."""
    return stats.min + stats.range * params.threshold_percent // 100


def detection_threshold(
    stats: ImageStats,
    threshold: int,
    params: FingerprintParams = DEFAULT_PARAMS
) -> int:
    """Threshold actually applied by origin detection."""
    return max(threshold, high_threshold(stats, params))


def _first_index(flags: np.ndarray) -> int:
    hits = np.flatnonzero(flags)
    return int(hits[0]) if hits.size else 0


def find_digit_origin(
    grid: np.ndarray,
    stats: ImageStats,
    threshold: int,
    params: FingerprintParams = DEFAULT_PARAMS
) -> Tuple[int, int]:
    """
    Find the top-left corner of the digit's bright region.

    The first row and the first column containing a pixel above the
    detection threshold are searched independently over the whole grid,
    then pulled back by the origin offset and clamped at zero.

    Args:
        grid: 2-D luminance array
        stats: Luminance statistics of the grid
        threshold: Caller threshold (usually the midpoint); raised to the
                   high threshold when lower
        params: Fingerprint constants

    Returns:
        (x, y) origin; (0, 0) if nothing is bright enough
    """
    bright = grid > detection_threshold(stats, threshold, params)

    first_row = _first_index(bright.any(axis=1))
    first_col = _first_index(bright.any(axis=0))

    return (
        max(0, first_col - params.origin_offset),
        max(0, first_row - params.origin_offset),
    )


def extract_fingerprint(
    grid: np.ndarray,
    stats: ImageStats,
    origin: Tuple[int, int],
    params: FingerprintParams = DEFAULT_PARAMS
) -> np.ndarray:
    """
    Extract the normalized pixel block starting at origin.

    Entry i holds the pixel at (x0 + i % width, y0 + i // width), scaled by
    the whole grid's statistics. Samples outside the grid are 0.0.

    Returns:
        Read-only float64 vector of length params.size
    """
    x0, y0 = origin
    block = np.zeros((params.template_height, params.template_width), dtype=np.float64)

    window = grid[y0:y0 + params.template_height, x0:x0 + params.template_width]
    scale = float(max(1, stats.range))
    block[:window.shape[0], :window.shape[1]] = (window - stats.min) / scale

    fingerprint = block.ravel()
    fingerprint.flags.writeable = False
    return fingerprint


def analyze_digit(
    grid: np.ndarray,
    params: FingerprintParams = DEFAULT_PARAMS,
    threshold: Optional[int] = None
) -> DigitAnalysis:
    """
    Run the full normalization routine on a digit crop.

    Templates and queries both go through here so their fingerprints are
    produced identically.

    Args:
        grid: 2-D luminance array
        params: Fingerprint constants
        threshold: Caller threshold; defaults to the luminance midpoint

    Returns:
        DigitAnalysis with stats, thresholds, origin and fingerprint
    """
    stats = image_stats(grid)
    if threshold is None:
        threshold = stats.midpoint

    origin = find_digit_origin(grid, stats, threshold, params)
    logger.debug(f"Image stats: min={stats.min}, max={stats.max}, threshold={threshold}")
    logger.debug(f"Digit origin: {origin}")

    return DigitAnalysis(
        stats=stats,
        threshold=threshold,
        detection_threshold=detection_threshold(stats, threshold, params),
        origin=origin,
        fingerprint=extract_fingerprint(grid, stats, origin, params),
    )

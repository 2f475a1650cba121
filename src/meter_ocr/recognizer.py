"""
Pixel Template Recognizer

Recognizes a digit by comparing its normalized pixel block against
reference fingerprints with cosine similarity.

1. Find the top-left corner of the digit (first bright pixel at 85% threshold)
2. Extract a fixed 90x140 block of normalized grayscale pixels
3. Compare using cosine similarity on the pixel vectors
"""

import logging

import numpy as np
from PIL import Image

from .base import DigitRecognizer
from .fingerprint import DigitAnalysis, analyze_digit
from .grayscale import to_gray_array
from .matching import match_templates
from .result import Recognition
from .templates import TemplateSet

logger = logging.getLogger(__name__)


class PixelTemplateRecognizer(DigitRecognizer):
    """
    Recognizer using direct pixel comparison.

    Holds a read-only TemplateSet; instances keep no other state, so one
    recognizer can serve any number of recognize() calls.
    """

    def __init__(self, templates: TemplateSet):
        """
        Initialize the recognizer.

        Args:
            templates: Loaded reference fingerprints (non-empty)
        """
        self._templates = templates

    @property
    def name(self) -> str:
        return "pixel"

    @property
    def templates(self) -> TemplateSet:
        """Access to the template set for external tools."""
        return self._templates

    def analyze_grid(self, grid: np.ndarray) -> DigitAnalysis:
        """Normalize a luminance grid with the template set's parameters."""
        return analyze_digit(grid, self._templates.params)

    def analyze(self, image: Image.Image) -> DigitAnalysis:
        """Normalize a digit image with the template set's parameters."""
        return self.analyze_grid(to_gray_array(image))

    def match_analysis(self, analysis: DigitAnalysis) -> Recognition:
        """Match an already normalized digit against the templates."""
        label, confidence, scores = match_templates(analysis.fingerprint, self._templates)
        return Recognition(
            label=label,
            confidence=confidence,
            origin=analysis.origin,
            scores=scores,
        )

    def recognize_grid(self, grid: np.ndarray) -> Recognition:
        """Recognize a digit from an already converted luminance grid."""
        return self.match_analysis(self.analyze_grid(grid))

    def recognize(self, image: Image.Image) -> Recognition:
        result = self.recognize_grid(to_gray_array(image))
        logger.debug(f"Recognized: {result.label} (confidence: {result.confidence:.3f})")
        return result

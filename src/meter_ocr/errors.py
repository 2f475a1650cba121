"""
OCR Errors

Exception types raised by the recognition pipeline.
"""


class MeterOCRError(Exception):
    """Base class for all meter OCR failures."""


class UnsupportedImageError(MeterOCRError, ValueError):
    """Raised when an image uses a pixel encoding we cannot resolve to RGB."""

    def __init__(self, mode: str):
        super().__init__(f"Unsupported image type: {mode}")
        self.mode = mode


class NoTemplatesError(MeterOCRError):
    """Raised when a template set would be (or is) empty."""

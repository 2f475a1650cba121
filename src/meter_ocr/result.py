"""
OCR Result Dataclasses

Shared data structures for recognition results.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .matching import NO_MATCH_LABEL


@dataclass(frozen=True)
class DigitSlot:
    """Crop rectangle of one digit on the meter photo."""
    x: int
    y: int
    width: int
    height: int

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """(left, upper, right, lower) box for PIL's Image.crop."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass
class Recognition:
    """Result of recognizing one digit crop."""
    label: str          # "0"-"9" or "?"
    confidence: float   # Cosine similarity of the winning template
    origin: Optional[Tuple[int, int]] = None  # Detected ink origin (x, y)
    scores: Dict[str, float] = field(default_factory=dict)  # Similarity per template label

    @property
    def is_match(self) -> bool:
        return self.label != NO_MATCH_LABEL


@dataclass
class MeterReading:
    """All digit recognitions of one meter photo."""
    digits: List[Recognition]
    source: Optional[str] = None
    processing_time_ms: float = 0.0

    @property
    def text(self) -> str:
        """Recognized labels concatenated left to right."""
        return "".join(digit.label for digit in self.digits)

    @property
    def min_confidence(self) -> float:
        return min((digit.confidence for digit in self.digits), default=0.0)

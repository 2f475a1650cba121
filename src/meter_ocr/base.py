"""
Digit Recognizer Base Interface

Abstract base class defining the recognizer contract.
"""

from abc import ABC, abstractmethod
from PIL import Image

from .result import Recognition


class DigitRecognizer(ABC):
    """
    Abstract base class for single-digit recognizers.

    Implementations classify one pre-cropped digit image.
    """

    @abstractmethod
    def recognize(self, image: Image.Image) -> Recognition:
        """
        Recognize the digit in a cropped image.

        Args:
            image: PIL Image of a single digit slot

        Returns:
            Recognition containing:
            - label: str - "0"-"9", or "?" when nothing matched
            - confidence: float - similarity score of the winning label
            - origin: Tuple[int, int] - detected ink origin, if applicable
            - scores: Dict[str, float] - per-label similarity
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Recognizer identifier.

        Returns:
            String name identifying this recognizer type (e.g., "pixel")
        """
        pass

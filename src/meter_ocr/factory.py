"""
Recognizer Factory

Factory for creating digit recognizer instances.
"""

from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .base import DigitRecognizer
from .fingerprint import DEFAULT_PARAMS, FingerprintParams
from .recognizer import PixelTemplateRecognizer
from .templates import load_templates


DEFAULT_TEMPLATE_DIR = Path("./templates")


def _create_pixel_recognizer(
    template_dir: Union[str, Path] = DEFAULT_TEMPLATE_DIR,
    params: FingerprintParams = DEFAULT_PARAMS
) -> DigitRecognizer:
    return PixelTemplateRecognizer(load_templates(template_dir, params))


# Registry of available recognizers
_RECOGNIZER_REGISTRY: Dict[str, Callable[..., DigitRecognizer]] = {
    "pixel": _create_pixel_recognizer,
}


def create_recognizer(
    kind: str = "pixel",
    template_dir: Optional[Union[str, Path]] = None,
    **config
) -> DigitRecognizer:
    """
    Create a digit recognizer by type.

    Args:
        kind: Recognizer type identifier. Available types:
            - "pixel" (default): direct pixel comparison against templates
        template_dir: Directory with 0.png ... 9.png (default ./templates)
        **config: Recognizer-specific options, e.g. params=FingerprintParams(...)

    Returns:
        Configured DigitRecognizer instance

    Raises:
        ValueError: If kind is not recognized
        NoTemplatesError: If no template could be loaded

    Example:
        recognizer = create_recognizer(template_dir="./templates")
        result = recognizer.recognize(digit_image)
        print(result.label, result.confidence)
    """
    if kind not in _RECOGNIZER_REGISTRY:
        available = ", ".join(_RECOGNIZER_REGISTRY.keys())
        raise ValueError(f"Unknown recognizer type: {kind}. Available: {available}")

    if template_dir is None:
        template_dir = DEFAULT_TEMPLATE_DIR

    return _RECOGNIZER_REGISTRY[kind](template_dir=Path(template_dir), **config)


def register_recognizer(name: str, builder: Callable[..., DigitRecognizer]) -> None:
    """
    Register a custom recognizer type.

    Args:
        name: Recognizer type identifier
        builder: Callable taking template_dir (and options) and returning
                 a DigitRecognizer. A DigitRecognizer subclass works too.

    Example:
        class MyRecognizer(DigitRecognizer):
            def __init__(self, template_dir):
                ...

        register_recognizer("custom", MyRecognizer)
    """
    if not callable(builder):
        raise TypeError(f"{builder} must be callable")
    if isinstance(builder, type) and not issubclass(builder, DigitRecognizer):
        raise TypeError(f"{builder} must be a subclass of DigitRecognizer")
    _RECOGNIZER_REGISTRY[name] = builder


def available_recognizers() -> list[str]:
    """
    List available recognizer types.

    Returns:
        List of registered recognizer type names
    """
    return list(_RECOGNIZER_REGISTRY.keys())

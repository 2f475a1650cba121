"""
Digit Templates

Builds the reference fingerprint set from a directory of labeled images
(0.png ... 9.png). The set is an immutable value passed explicitly to every
recognition call.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from .errors import NoTemplatesError
from .fingerprint import DEFAULT_PARAMS, FingerprintParams, analyze_digit
from .grayscale import to_gray_array

logger = logging.getLogger(__name__)


DIGIT_LABELS = tuple(str(digit) for digit in range(10))
TEMPLATE_EXTENSIONS = (".png",)


class TemplateSet(Mapping):
    """
    Read-only mapping of digit label -> template fingerprint.

    Every fingerprint was produced with the same FingerprintParams, which
    the set carries so queries can be fingerprinted identically.
    """

    def __init__(self, templates: Dict[str, np.ndarray], params: FingerprintParams = DEFAULT_PARAMS):
        for label, pixels in templates.items():
            if pixels.shape != (params.size,):
                raise ValueError(
                    f"Template {label} has {pixels.size} values, expected {params.size}"
                )
        self._templates = MappingProxyType(dict(templates))
        self._params = params

    @property
    def params(self) -> FingerprintParams:
        return self._params

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self._templates)

    def __getitem__(self, label: str) -> np.ndarray:
        return self._templates[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    def __repr__(self) -> str:
        return f"TemplateSet(labels={list(self._templates)}, params={self._params})"


def create_template(image: Image.Image, params: FingerprintParams = DEFAULT_PARAMS) -> np.ndarray:
    """
    Fingerprint a reference digit image.

    Uses the same midpoint threshold policy as recognition queries.
    """
    return analyze_digit(to_gray_array(image), params).fingerprint


def create_template_from_file(path: Union[str, Path], params: FingerprintParams = DEFAULT_PARAMS) -> np.ndarray:
    """Decode an image file and fingerprint it."""
    with Image.open(path) as image:
        image.load()
        return create_template(image, params)


def find_template_file(
    template_dir: Path,
    label: str,
    extensions: Sequence[str] = TEMPLATE_EXTENSIONS
) -> Optional[Path]:
    """Return the first existing <label><ext> file, or None."""
    for ext in extensions:
        candidate = template_dir / f"{label}{ext}"
        if candidate.is_file():
            return candidate
    return None


def load_templates(
    template_dir: Union[str, Path],
    params: FingerprintParams = DEFAULT_PARAMS,
    extensions: Sequence[str] = TEMPLATE_EXTENSIONS
) -> TemplateSet:
    """
    Load digit templates from a directory.

    Expected files: 0.png, 1.png, ... 9.png. Missing labels are skipped
    with a warning.

    Args:
        template_dir: Directory containing the reference images
        params: Fingerprint constants for every template
        extensions: File extensions to try, in order

    Returns:
        TemplateSet with at least one entry

    Raises:
        NoTemplatesError: If no template could be loaded
    """
    template_dir = Path(template_dir)
    logger.info(f"Loading templates from {template_dir}...")

    templates: Dict[str, np.ndarray] = {}
    for label in DIGIT_LABELS:
        path = find_template_file(template_dir, label, extensions)
        if path is None:
            logger.warning(f"Template {label} not found in {template_dir}")
            continue
        templates[label] = create_template_from_file(path, params)
        logger.debug(f"Loaded template {label} from {path}")

    logger.info(f"Loaded {len(templates)} templates")

    if not templates:
        raise NoTemplatesError(f"No templates loaded from {template_dir}")

    return TemplateSet(templates, params)

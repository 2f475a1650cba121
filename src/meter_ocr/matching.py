"""
Template Matching

Cosine similarity between fingerprints and best-label selection.
"""

from typing import Dict, Mapping, Tuple

import numpy as np

from .errors import NoTemplatesError


# Label returned when no template beats the initial score
NO_MATCH_LABEL = "?"
NO_MATCH_SCORE = -1.0


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """
    Cosine of the angle between two vectors.

    Returns 0.0 when either vector has zero magnitude. The result is
    clipped to [-1, 1] to absorb rounding.
    """
    norm = float(np.linalg.norm(a)) * float(np.linalg.norm(b))
    if norm == 0.0:
        return 0.0
    score = float(np.dot(a, b)) / norm
    return max(-1.0, min(1.0, score))


def score_all(fingerprint: np.ndarray, templates: Mapping[str, np.ndarray]) -> Dict[str, float]:
    """Similarity of the fingerprint against every template, in template order."""
    return {
        label: cosine_similarity(fingerprint, pixels)
        for label, pixels in templates.items()
    }


def match_templates(
    fingerprint: np.ndarray,
    templates: Mapping[str, np.ndarray]
) -> Tuple[str, float, Dict[str, float]]:
    """
    Score every template once and pick the best label.

    Only a strictly greater score replaces the current best, so ties keep
    the first template seen. Pairs where either vector has zero magnitude
    are scored 0.0 but never selected: an inkless query stays at
    ("?", -1.0).

    Returns:
        (best_label, best_score, scores by label)

    Raises:
        NoTemplatesError: If templates is empty
    """
    if len(templates) == 0:
        raise NoTemplatesError("Cannot match against an empty template set")

    scores = score_all(fingerprint, templates)

    best_label, best_score = NO_MATCH_LABEL, NO_MATCH_SCORE
    if not np.any(fingerprint):
        return best_label, best_score, scores

    for label, score in scores.items():
        if not np.any(templates[label]):
            continue
        if score > best_score:
            best_label, best_score = label, score

    return best_label, best_score, scores


def best_match(fingerprint: np.ndarray, templates: Mapping[str, np.ndarray]) -> Tuple[str, float]:
    """
    Pick the best-scoring template label.

    Raises:
        NoTemplatesError: If templates is empty
    """
    label, score, _ = match_templates(fingerprint, templates)
    return label, score

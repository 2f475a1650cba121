"""
Tests for cosine similarity and best-template selection.
"""

import numpy as np
import pytest

from meter_ocr import (
    NO_MATCH_LABEL,
    NoTemplatesError,
    best_match,
    cosine_similarity,
    match_templates,
    score_all,
)


def random_fingerprints(count, size=12600, seed=3):
    rng = np.random.default_rng(seed)
    return [rng.random(size) for _ in range(count)]


def test_self_match_is_one():
    (v,) = random_fingerprints(1)
    assert cosine_similarity(v, v) == pytest.approx(1.0)


def test_bounds_for_non_negative_vectors():
    vectors = random_fingerprints(6)
    for a in vectors:
        for b in vectors:
            assert 0.0 <= cosine_similarity(a, b) <= 1.0


def test_bounds_for_signed_vectors():
    a = np.array([1.0, -2.0, 3.0])
    assert cosine_similarity(a, -a) == pytest.approx(-1.0)
    assert -1.0 <= cosine_similarity(a, np.array([0.5, 0.1, -0.9])) <= 1.0


def test_orthogonal_vectors():
    assert cosine_similarity(np.array([1.0, 0.0]), np.array([0.0, 1.0])) == 0.0


def test_zero_vector_scores_zero():
    zero = np.zeros(12600)
    (v,) = random_fingerprints(1)
    assert cosine_similarity(zero, v) == 0.0
    assert cosine_similarity(zero, zero) == 0.0


def test_exact_copy_wins():
    v1, v3, v7 = random_fingerprints(3)
    templates = {"1": v1, "3": v3, "7": v7}

    label, score = best_match(v3.copy(), templates)

    assert label == "3"
    assert score == pytest.approx(1.0)


def test_ties_keep_first_template():
    (v,) = random_fingerprints(1)
    templates = {"5": v, "2": v.copy()}

    assert best_match(v, templates)[0] == "5"


def test_empty_templates_fail():
    (v,) = random_fingerprints(1)
    with pytest.raises(NoTemplatesError):
        best_match(v, {})


def test_inkless_query_returns_no_match():
    v1, v2 = random_fingerprints(2)
    label, score = best_match(np.zeros(12600), {"1": v1, "2": v2})
    assert label == NO_MATCH_LABEL
    assert score == -1.0


def test_blank_template_is_never_selected():
    query = np.array([1.0, -2.0, 3.0])
    signed = np.array([0.5, 0.1, -0.9])
    label, score = best_match(query, {"0": np.zeros(3), "1": signed})
    assert label == "1"
    assert score == pytest.approx(cosine_similarity(query, signed))
    assert score < 0.0

    label, score = best_match(query, {"0": np.zeros(3)})
    assert label == NO_MATCH_LABEL
    assert score == -1.0


def test_match_templates_returns_scores_table():
    v1, v2, v3 = random_fingerprints(3)
    templates = {"1": v1, "2": v2, "3": v3}

    label, score, scores = match_templates(v2, templates)

    assert label == "2"
    assert score == max(scores.values())
    assert scores == score_all(v2, templates)
    assert (label, score) == best_match(v2, templates)


def test_score_all_keeps_template_order():
    v1, v2, v3 = random_fingerprints(3)
    scores = score_all(v2, {"9": v1, "0": v2, "4": v3})

    assert list(scores) == ["9", "0", "4"]
    assert scores["0"] == pytest.approx(1.0)
    assert max(scores, key=scores.get) == "0"


def test_deterministic():
    vectors = random_fingerprints(4)
    templates = {str(i): v for i, v in enumerate(vectors[:3])}
    assert best_match(vectors[3], templates) == best_match(vectors[3], templates)

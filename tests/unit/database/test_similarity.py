"""Unit tests for cosine similarity and ranking."""

import math

import numpy as np
import pytest

from youagent.database.similarity import cosine_scores, cosine_similarity, rank
from youagent.errors import DimensionMismatch


def test_identical_vectors_score_one() -> None:
    assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)


def test_orthogonal_and_opposite() -> None:
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)


def test_scale_invariant() -> None:
    """Embeddings are not guaranteed unit length; magnitude must not matter."""
    assert cosine_similarity([1.0, 1.0], [10.0, 10.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [3.0, 3.0]) == pytest.approx(1 / math.sqrt(2))


def test_zero_vector_scores_zero() -> None:
    assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
    assert cosine_similarity([1.0, 1.0], [0.0, 0.0]) == 0.0


def test_length_mismatch_raises() -> None:
    with pytest.raises(DimensionMismatch):
        cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


def test_cosine_scores_matches_pairwise() -> None:
    matrix = np.array([[1.0, 0.0], [0.0, 1.0], [1.0, 1.0], [0.0, 0.0]])
    scores = cosine_scores([1.0, 0.0], matrix)
    expected = [cosine_similarity([1.0, 0.0], row) for row in matrix.tolist()]
    assert scores.tolist() == pytest.approx(expected)
    assert scores[3] == 0.0


def test_cosine_scores_zero_query() -> None:
    scores = cosine_scores([0.0, 0.0], np.array([[1.0, 0.0], [0.0, 1.0]]))
    assert scores.tolist() == [0.0, 0.0]


def test_cosine_scores_dimension_mismatch() -> None:
    with pytest.raises(DimensionMismatch):
        cosine_scores([1.0, 0.0, 0.0], np.array([[1.0, 0.0]]))


class TestRank:
    def test_descending(self) -> None:
        assert rank(np.array([0.1, 0.9, 0.5]), 3) == [1, 2, 0]

    def test_ties_keep_original_order(self) -> None:
        assert rank(np.array([0.5, 0.9, 0.5, 0.5]), 4) == [1, 0, 2, 3]

    def test_k_bounds(self) -> None:
        scores = np.array([0.3, 0.2, 0.1])
        assert rank(scores, 2) == [0, 1]
        assert rank(scores, 10) == [0, 1, 2]
        assert rank(scores, 0) == []
        assert rank(scores, -1) == []
        assert rank(np.zeros(0), 3) == []

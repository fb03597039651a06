"""Cosine similarity and stable top-k ranking over embedding vectors."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from youagent.errors import DimensionMismatch


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return a·b / (|a|·|b|), or 0.0 when either vector is all-zero.

    Raises:
        DimensionMismatch: If the vectors differ in length.
    """
    if len(a) != len(b):
        raise DimensionMismatch(expected=len(a), actual=len(b))
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0.0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def cosine_scores(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """Score every row of `matrix` (n x D) against `query` in one pass.

    Rows with zero norm, and every row when the query is all-zero, score 0.0.
    """
    q = np.asarray(query, dtype=np.float64)
    if matrix.size == 0:
        return np.zeros(0, dtype=np.float64)
    if matrix.shape[1] != q.shape[0]:
        raise DimensionMismatch(expected=matrix.shape[1], actual=q.shape[0])
    q_norm = np.linalg.norm(q)
    if q_norm == 0.0:
        return np.zeros(matrix.shape[0], dtype=np.float64)
    row_norms = np.linalg.norm(matrix, axis=1)
    dots = matrix @ q
    scores = np.zeros(matrix.shape[0], dtype=np.float64)
    nonzero = row_norms > 0.0
    scores[nonzero] = dots[nonzero] / (row_norms[nonzero] * q_norm)
    return np.clip(scores, -1.0, 1.0)


def rank(scores: np.ndarray, k: int) -> list[int]:
    """Indices of the `k` highest scores, descending.

    Equal scores keep their original (insertion) order because the sort is
    stable.
    """
    if k <= 0 or scores.size == 0:
        return []
    order = np.argsort(-scores, kind="stable")
    return [int(i) for i in order[:k]]

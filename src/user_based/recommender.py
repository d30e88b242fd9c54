from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from .similarity import check_user_index, similarity_vector


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Recommendation:
    item: int
    score: float


@dataclass(frozen=True)
class SimilarUser:
    user: int
    similarity: float
    common_rated: int


@dataclass(frozen=True, eq=False)
class RecommendRequest:
    """Everything one prediction needs; indices are 0-based."""

    matrix: np.ndarray
    user_index: int
    top_n: int = 10


def predict(matrix: np.ndarray, user_index: int, top_n: int) -> list[Recommendation]:
    """Predict ratings for the items `user_index` has not rated.

    Scoring:
    - Cosine similarity between the target row and every other row
    - For each unrated item: similarity-weighted average of the ratings given
      by the other users who rated it (weights normalised by sum of |sim|)
    - Items nobody with non-zero similarity rated get no prediction at all

    Results are sorted by score descending, ties by ascending item index, and
    truncated to `top_n`.
    """
    ratings = np.asarray(matrix)
    check_user_index(ratings, user_index)
    if int(top_n) < 0:
        raise ValueError(f"top_n must be >= 0, got {top_n}")

    sims = similarity_vector(ratings, user_index)

    rated = ratings > 0
    rated[user_index] = False
    weighted_sum = sims @ np.where(rated, ratings, 0).astype(np.float64)
    sim_sum = np.abs(sims) @ rated.astype(np.float64)

    unrated = ratings[user_index] == 0
    candidates = np.flatnonzero(unrated & (sim_sum > 0.0))
    logger.debug(
        "user=%d unrated=%d candidates=%d",
        int(user_index),
        int(unrated.sum()),
        len(candidates),
    )

    out = [Recommendation(item=int(i), score=float(weighted_sum[i] / sim_sum[i])) for i in candidates]
    out.sort(key=lambda r: (-r.score, r.item))
    return out[: int(top_n)]


def recommend(request: RecommendRequest) -> list[Recommendation]:
    return predict(request.matrix, request.user_index, request.top_n)


def similar_users(
    matrix: np.ndarray,
    user_index: int,
    *,
    top_n: int = 10,
    min_common_rated: int = 0,
) -> list[SimilarUser]:
    """Other users ranked by cosine similarity to `user_index` (ties by index)."""
    ratings = np.asarray(matrix)
    check_user_index(ratings, user_index)

    sims = similarity_vector(ratings, user_index)
    rated = ratings > 0
    common = (rated & rated[user_index]).sum(axis=1)

    order = sorted(
        (u for u in range(ratings.shape[0]) if u != user_index),
        key=lambda u: (-sims[u], u),
    )

    out: list[SimilarUser] = []
    for u in order:
        if len(out) >= int(top_n):
            break
        if int(common[u]) < int(min_common_rated):
            continue
        out.append(SimilarUser(user=int(u), similarity=float(sims[u]), common_rated=int(common[u])))
    return out

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np


Vector = Union[Sequence[int], np.ndarray]


class InvalidUserIndexError(IndexError):
    """Target user index outside [0, n_users)."""


def check_user_index(matrix: np.ndarray, user_index: int) -> None:
    n_users = int(np.shape(matrix)[0])
    if not 0 <= int(user_index) < n_users:
        raise InvalidUserIndexError(f"user index {user_index} out of range [0, {n_users})")


def cosine_similarity(a: Vector, b: Vector) -> float:
    """Cosine of the angle between two rating vectors.

    A vector with zero norm (a user who rated nothing) has similarity 0.0 with
    everyone, itself included.
    """
    # float64 so large ratings cannot wrap the int64 dot products.
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"rating vectors differ in length: {a.shape} vs {b.shape}")

    sq_a = float(np.dot(a, a))
    sq_b = float(np.dot(b, b))
    if sq_a == 0.0 or sq_b == 0.0:
        return 0.0

    # sqrt of the product keeps sim(v, v) at exactly 1.0.
    sim = float(np.dot(a, b)) / math.sqrt(sq_a * sq_b)
    return min(1.0, max(-1.0, sim))


def similarity_vector(matrix: np.ndarray, user_index: int) -> np.ndarray:
    """Similarity of `user_index` with every row of `matrix`; own entry stays 0.0."""
    ratings = np.asarray(matrix)
    check_user_index(ratings, user_index)

    target = ratings[user_index]
    sims = np.zeros(ratings.shape[0], dtype=np.float64)
    for other in range(ratings.shape[0]):
        if other == user_index:
            continue
        sims[other] = cosine_similarity(target, ratings[other])
    return sims

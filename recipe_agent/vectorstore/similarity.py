"""Vector similarity and distance functions."""

from collections.abc import Sequence

import numpy as np

from recipe_agent.exceptions import DimensionMismatchError


def _check_dimensions(a: Sequence[float], b: Sequence[float]) -> None:
    if len(a) != len(b):
        raise DimensionMismatchError(len(a), len(b))


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Args:
        a: First vector.
        b: Second vector, same length as ``a``.

    Returns:
        Similarity in [-1, 1]. Zero when either vector has zero norm.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    _check_dimensions(a, b)

    vec_a = np.asarray(a, dtype=np.float64)
    vec_b = np.asarray(b, dtype=np.float64)
    norm_a = np.linalg.norm(vec_a)
    norm_b = np.linalg.norm(vec_b)

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return float(np.dot(vec_a, vec_b) / (norm_a * norm_b))


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Straight-line distance between two vectors.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    _check_dimensions(a, b)
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.linalg.norm(diff))

"""
Vector math helpers shared by the analytics engines.

Every entry point checks dimensionality first, so mismatched vectors fail
with ValidationError before any distance is computed.

Dependencies: numpy
System role: Distance and similarity primitives
"""

from typing import Sequence

import numpy as np

from vectorhub.core.exceptions import ValidationError


def as_matrix(vectors: Sequence[Sequence[float]], expected_dim: int | None = None) -> np.ndarray:
    """
    Stack vectors into an (n, d) float64 matrix.

    Args:
        vectors: Vectors of equal length
        expected_dim: Required length (defaults to the first vector's)

    Raises:
        ValidationError: If vector lengths differ or a vector is empty
    """
    if len(vectors) == 0:
        return np.zeros((0, expected_dim or 0), dtype=np.float64)

    dim = expected_dim if expected_dim is not None else len(vectors[0])
    for index, vector in enumerate(vectors):
        if len(vector) != dim:
            raise ValidationError(
                f"Vector dimension mismatch: expected {dim}, got {len(vector)} at position {index}",
                field="vector",
                details={"expected": dim, "actual": len(vector), "position": index},
            )
    if dim == 0:
        raise ValidationError("Vectors must not be empty", field="vector")
    return np.asarray(vectors, dtype=np.float64)


def euclidean(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.linalg.norm(a - b))


def distances_to(matrix: np.ndarray, point: np.ndarray) -> np.ndarray:
    """Euclidean distance from every row of matrix to point."""
    return np.linalg.norm(matrix - point, axis=1)


def pairwise_distances(matrix: np.ndarray) -> np.ndarray:
    """
    Full (n, n) Euclidean distance matrix.

    Memory is O(n^2); callers feeding tens of thousands of vectors are at
    the practical ceiling.
    """
    sq_norms = np.einsum("ij,ij->i", matrix, matrix)
    sq = sq_norms[:, None] + sq_norms[None, :] - 2.0 * (matrix @ matrix.T)
    np.maximum(sq, 0.0, out=sq)
    dist = np.sqrt(sq)
    np.fill_diagonal(dist, 0.0)
    return dist


def cosine_similarities(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """
    Cosine similarity of every row against query.

    Zero-norm rows (or a zero-norm query) score 0.
    """
    if matrix.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1)
    query_norm = float(np.linalg.norm(query))
    if query_norm == 0.0:
        return np.zeros(matrix.shape[0], dtype=np.float64)
    safe = np.where(norms == 0.0, 1.0, norms)
    scores = (matrix @ query) / (safe * query_norm)
    scores[norms == 0.0] = 0.0
    return np.clip(scores, -1.0, 1.0)


def ratio_score(values: np.ndarray, reference: np.ndarray | float) -> np.ndarray:
    """
    Map r = values / reference into [0, 1] as r / (1 + r).

    r = 1 scores 0.5 and r = 4 scores 0.8. A zero reference scores 1.0 for
    positive values and 0.0 for zero values.
    """
    values = np.asarray(values, dtype=np.float64)
    reference = np.broadcast_to(np.asarray(reference, dtype=np.float64), values.shape)
    safe = np.where(reference > 0.0, reference, 1.0)
    ratio = values / safe
    scores = ratio / (1.0 + ratio)
    return np.where(reference > 0.0, scores, np.where(values > 0.0, 1.0, 0.0))

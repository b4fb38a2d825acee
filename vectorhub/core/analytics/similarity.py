"""
Similarity ranking.

Scores candidates by cosine similarity against an anchor vector, drops
scores under the threshold, and orders by descending score with ties going
to the earliest created_at (then to corpus order).

Dependencies: numpy
System role: Similarity Search Engine
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Sequence

import numpy as np

from vectorhub.core.exceptions import ValidationError
from .records import VectorPoint, ensure_utc
from .vector_math import as_matrix, cosine_similarities

_LATEST = datetime.max.replace(tzinfo=timezone.utc)


@dataclass
class SimilarityMatch:
    point: VectorPoint
    score: float


def rank_by_similarity(
    query: Sequence[float],
    candidates: Sequence[VectorPoint],
    threshold: float,
    limit: int | None = None,
) -> list[SimilarityMatch]:
    """
    Rank candidates against a query vector.

    Args:
        query: Anchor vector
        candidates: Corpus snapshot
        threshold: Minimum cosine similarity to keep (inclusive)
        limit: Maximum results after filtering and sorting

    Returns:
        list[SimilarityMatch]: Matches with non-increasing scores

    Raises:
        ValidationError: If any candidate's length differs from the query's,
            or limit/threshold are out of range
    """
    if not -1.0 <= threshold <= 1.0:
        raise ValidationError("threshold must be within [-1, 1]", field="threshold")
    if limit is not None and limit < 0:
        raise ValidationError("limit must not be negative", field="limit")
    if not candidates:
        return []

    anchor = as_matrix([query])[0]
    matrix = as_matrix([c.vector for c in candidates], expected_dim=anchor.shape[0])
    # float noise would otherwise drop exact matches at threshold 1.0
    scores = np.round(cosine_similarities(matrix, anchor), 12)

    kept = [int(i) for i in np.flatnonzero(scores >= threshold)]
    kept.sort(key=lambda i: (-scores[i], ensure_utc(candidates[i].created_at) or _LATEST, i))
    if limit is not None:
        kept = kept[:limit]

    return [SimilarityMatch(point=candidates[i], score=float(scores[i])) for i in kept]

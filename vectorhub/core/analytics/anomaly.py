"""
Anomaly detection engine.

Scores every vector for outlier-ness with a pluggable strategy, keeps the
ones at or above a threshold, and labels each with the feature group that
pulls it furthest from the corpus centroid.

Every strategy returns scores in [0, 1], higher meaning more anomalous.

Dependencies: numpy
System role: Anomaly Detection Engine
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Protocol, Sequence

import numpy as np

from vectorhub.core.exceptions import ValidationError
from .records import VectorPoint, ensure_utc
from .vector_math import as_matrix, distances_to, pairwise_distances, ratio_score


class AnomalyStrategy(Protocol):
    name: str
    description: str

    def score(self, matrix: np.ndarray) -> np.ndarray: ...


def _knn_mean_distances(matrix: np.ndarray, neighbors: int) -> tuple[np.ndarray, np.ndarray]:
    """Mean distance to the k nearest other points, plus their indices."""
    n = matrix.shape[0]
    k = min(neighbors, n - 1)
    dist = pairwise_distances(matrix)
    np.fill_diagonal(dist, np.inf)
    nearest = np.argsort(dist, axis=1, kind="stable")[:, :k]
    means = np.take_along_axis(dist, nearest, axis=1).mean(axis=1)
    return means, nearest


class KnnDistanceStrategy:
    """
    Mean distance to the k nearest neighbors, relative to the corpus median.

    A point four times further from its neighbors than the median point
    scores 0.8, so a uniformly tight corpus has no anomalies.
    """

    name = "knn_distance"
    description = "mean distance to nearest neighbors"

    def __init__(self, neighbors: int = 5) -> None:
        self.neighbors = neighbors

    def score(self, matrix: np.ndarray) -> np.ndarray:
        if matrix.shape[0] < 2:
            return np.zeros(matrix.shape[0])
        means, _ = _knn_mean_distances(matrix, self.neighbors)
        return ratio_score(means, float(np.median(means)))


class CentroidDistanceStrategy:
    """Distance to the corpus centroid, relative to the median distance."""

    name = "centroid_distance"
    description = "distance from the corpus centroid"

    def __init__(self, neighbors: int = 5) -> None:
        self.neighbors = neighbors

    def score(self, matrix: np.ndarray) -> np.ndarray:
        if matrix.shape[0] < 2:
            return np.zeros(matrix.shape[0])
        distances = distances_to(matrix, matrix.mean(axis=0))
        return ratio_score(distances, float(np.median(distances)))


class LocalDensityStrategy:
    """
    Local outlier ratio.

    r = own kNN distance / mean kNN distance of those neighbors, mapped into
    [0, 1) as r / (1 + r). Points in uniformly dense regions score near 0.5.
    """

    name = "local_density"
    description = "density relative to nearest neighbors"

    def __init__(self, neighbors: int = 5) -> None:
        self.neighbors = neighbors

    def score(self, matrix: np.ndarray) -> np.ndarray:
        if matrix.shape[0] < 2:
            return np.zeros(matrix.shape[0])
        means, nearest = _knn_mean_distances(matrix, self.neighbors)
        return ratio_score(means, means[nearest].mean(axis=1))


STRATEGIES: dict[str, Callable[[int], AnomalyStrategy]] = {
    "knn_distance": KnnDistanceStrategy,
    "centroid_distance": CentroidDistanceStrategy,
    "local_density": LocalDensityStrategy,
}

ALIASES: dict[str, str] = {
    "neighbor": "knn_distance",
    "density": "knn_distance",
    "isolation-forest": "knn_distance",
    "boundary": "centroid_distance",
}


def get_strategy(method: str, neighbors: int = 5) -> AnomalyStrategy:
    """
    Resolve a method name (or alias) to a strategy instance.

    Raises:
        ValidationError: Unknown method or non-positive neighbor count
    """
    if neighbors <= 0:
        raise ValidationError("neighbors must be positive", field="neighbors")
    name = ALIASES.get(method, method)
    factory = STRATEGIES.get(name)
    if factory is None:
        raise ValidationError(
            f"Unknown anomaly detection method: {method}",
            field="method",
            details={"allowed": sorted([*STRATEGIES, *ALIASES])},
        )
    return factory(neighbors)


@dataclass
class TimeRange:
    """Inclusive created_at window; an open end is unbounded."""

    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        self.start = ensure_utc(self.start)
        self.end = ensure_utc(self.end)
        if self.start and self.end and self.start > self.end:
            raise ValidationError("time range start must not be after end", field="time_range")

    def contains(self, value: datetime | None) -> bool:
        value = ensure_utc(value)
        if value is None:
            return False
        if self.start is not None and value < self.start:
            return False
        if self.end is not None and value > self.end:
            return False
        return True

    @classmethod
    def last_days(cls, value: str | int | None, now: datetime | None = None) -> "TimeRange | None":
        """
        Parse "all" (no filter) or a trailing number of days.

        Raises:
            ValidationError: Not "all" and not a positive integer
        """
        if value is None or str(value).strip().lower() == "all":
            return None
        try:
            days = int(str(value).strip())
        except ValueError as e:
            raise ValidationError(
                f"time range must be 'all' or a number of days, got {value!r}",
                field="time_range",
            ) from e
        if days <= 0:
            raise ValidationError("time range days must be positive", field="time_range")
        now = ensure_utc(now) or datetime.now(timezone.utc)
        return cls(start=now - timedelta(days=days))


@dataclass
class AnomalyResult:
    point_id: str
    anomaly_score: float
    anomaly_type: str
    explanation: str
    threshold: float
    source_id: str | None = None
    source_type: str | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    is_anomaly: bool = True


def _deviation_label(
    deviation: np.ndarray,
    feature_groups: dict[str, list[int]] | None,
) -> tuple[str, str]:
    """Pick the anomaly type and a short description of the dominant deviation."""
    total = float(deviation.sum())
    if feature_groups:
        shares = {
            label: (float(deviation[indices].sum()) / total if total > 0 else 0.0)
            for label, indices in feature_groups.items()
        }
        label = max(shares, key=lambda name: (shares[name], -list(shares).index(name)))
        return f"{label}_outlier", f"{label} features carry {shares[label]:.0%} of the deviation"

    top = int(np.argmax(deviation)) if deviation.size else 0
    share = float(deviation[top]) / total if total > 0 else 0.0
    return "attribute_outlier", f"dimension {top} carries {share:.0%} of the deviation"


def _check_groups(feature_groups: dict[str, list[int]] | None, dim: int) -> None:
    for label, indices in (feature_groups or {}).items():
        if not indices:
            raise ValidationError(f"feature group '{label}' is empty", field="feature_groups")
        for index in indices:
            if not 0 <= index < dim:
                raise ValidationError(
                    f"feature group '{label}' index {index} is outside 0..{dim - 1}",
                    field="feature_groups",
                )


def detect(
    points: Sequence[VectorPoint],
    method: str = "knn_distance",
    threshold: float = 0.8,
    time_range: TimeRange | None = None,
    neighbors: int = 5,
    feature_groups: dict[str, list[int]] | None = None,
) -> list[AnomalyResult]:
    """
    Detect anomalous vectors.

    Args:
        points: Corpus snapshot
        method: Strategy name or alias
        threshold: Minimum score to report, in [0, 1]
        time_range: Keep only points created inside this window before scoring
        neighbors: k for neighbor-based strategies
        feature_groups: Label -> vector dimensions, used to name anomaly types

    Returns:
        list[AnomalyResult]: Anomalies ordered by descending score

    Raises:
        ValidationError: Bad threshold, method, groups or mismatched vectors
    """
    if not 0.0 <= threshold <= 1.0:
        raise ValidationError("threshold must be within [0, 1]", field="threshold")
    strategy = get_strategy(method, neighbors)

    if time_range is not None:
        points = [p for p in points if time_range.contains(p.created_at)]
    if not points:
        return []

    matrix = as_matrix([p.vector for p in points])
    _check_groups(feature_groups, matrix.shape[1])
    scores = np.clip(strategy.score(matrix), 0.0, 1.0)
    deviations = (matrix - matrix.mean(axis=0)) ** 2

    flagged = [int(i) for i in np.flatnonzero(scores >= threshold)]
    flagged.sort(key=lambda i: (-scores[i], i))

    results = []
    for i in flagged:
        anomaly_type, dominant = _deviation_label(deviations[i], feature_groups)
        point = points[i]
        results.append(AnomalyResult(
            point_id=point.id,
            anomaly_score=float(scores[i]),
            anomaly_type=anomaly_type,
            explanation=(
                f"Anomaly score {scores[i]:.2f} meets threshold {threshold:.2f} "
                f"based on {strategy.description}; {dominant}."
            ),
            threshold=threshold,
            source_id=point.source_id,
            source_type=point.source_type,
            created_at=point.created_at,
            metadata=dict(point.metadata),
        ))
    return results

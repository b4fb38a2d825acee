"""
Clustering engine.

Stateless k-means, agglomerative (average linkage) and DBSCAN clustering
over VectorPoint snapshots. All three return ClusterResult values whose
members carry their Euclidean distance to the cluster centroid.

Hierarchical and DBSCAN build a full pairwise distance matrix, so memory is
O(n^2): tens of thousands of vectors is the practical ceiling.

Dependencies: numpy
System role: Clustering Engine
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Literal, Sequence

import numpy as np

from vectorhub.core.exceptions import ValidationError
from .features import extract_key_features
from .records import VectorPoint
from .vector_math import as_matrix, distances_to, pairwise_distances

Algorithm = Literal["kmeans", "hierarchical", "dbscan"]
ALGORITHMS: tuple[str, ...] = ("kmeans", "hierarchical", "dbscan")


@dataclass
class ClusteringConfig:
    """Parameters for one clustering run."""

    algorithm: Algorithm = "kmeans"
    cluster_count: int = 5
    max_iterations: int = 100
    distance_threshold: float = 0.001
    epsilon: float = 0.2
    min_points: int = 3
    include_border_points: bool = False
    seed: int | None = None

    def validate(self) -> None:
        if self.algorithm not in ALGORITHMS:
            raise ValidationError(
                f"Unsupported clustering algorithm: {self.algorithm}",
                field="algorithm",
                details={"allowed": list(ALGORITHMS)},
            )
        if self.cluster_count <= 0:
            raise ValidationError("cluster_count must be positive", field="cluster_count")
        if self.max_iterations <= 0:
            raise ValidationError("max_iterations must be positive", field="max_iterations")
        if self.distance_threshold < 0:
            raise ValidationError("distance_threshold must not be negative", field="distance_threshold")
        if self.epsilon <= 0:
            raise ValidationError("epsilon must be positive", field="epsilon")
        if self.min_points <= 0:
            raise ValidationError("min_points must be positive", field="min_points")


@dataclass
class ClusterMember:
    id: str
    vector: list[float]
    distance: float


@dataclass
class ClusterResult:
    """One cluster: centroid, annotated members and mean member distance."""

    id: int
    centroid: list[float]
    members: list[ClusterMember]
    avg_distance: float
    key_features: list[str] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.members)


def _build(
    cluster_id: int,
    points: Sequence[VectorPoint],
    matrix: np.ndarray,
    indices: Sequence[int],
    centroid: np.ndarray | None = None,
) -> ClusterResult:
    idx = np.asarray(indices, dtype=np.int64)
    rows = matrix[idx]
    if centroid is None:
        centroid = rows.mean(axis=0)
    distances = distances_to(rows, centroid)
    members = [
        ClusterMember(id=points[i].id, vector=list(points[i].vector), distance=float(d))
        for i, d in zip(idx, distances)
    ]
    return ClusterResult(
        id=cluster_id,
        centroid=[float(v) for v in centroid],
        members=members,
        avg_distance=float(distances.mean()) if len(members) else 0.0,
    )


def _assign(matrix: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    # argmin keeps the lowest cluster index on ties
    distances = np.linalg.norm(matrix[:, None, :] - centroids[None, :, :], axis=2)
    return np.argmin(distances, axis=1)


def _kmeans_plus_plus(matrix: np.ndarray, k: int, rng: np.random.Generator) -> np.ndarray:
    n = matrix.shape[0]
    chosen = [int(rng.integers(n))]
    closest_sq = np.sum((matrix - matrix[chosen[0]]) ** 2, axis=1)

    for _ in range(1, k):
        total = float(closest_sq.sum())
        if total <= 0.0:
            # every point coincides with a centroid already
            remaining = [i for i in range(n) if i not in chosen]
            next_index = int(rng.choice(remaining))
        else:
            next_index = int(rng.choice(n, p=closest_sq / total))
        chosen.append(next_index)
        closest_sq = np.minimum(closest_sq, np.sum((matrix - matrix[next_index]) ** 2, axis=1))

    return matrix[chosen].copy()


def kmeans(
    points: Sequence[VectorPoint],
    k: int,
    max_iterations: int = 100,
    distance_threshold: float = 0.001,
    seed: int | None = None,
) -> list[ClusterResult]:
    """
    Lloyd's k-means with k-means++ seeding.

    With k or fewer points every point becomes its own cluster with
    avg_distance 0. Clusters left empty by an iteration keep their previous
    centroid; clusters still empty at the end are omitted.

    Raises:
        ValidationError: Mismatched vector lengths or non-positive k
    """
    if k <= 0:
        raise ValidationError("cluster_count must be positive", field="cluster_count")
    matrix = as_matrix([p.vector for p in points])
    n = matrix.shape[0]
    if n == 0:
        return []
    if n <= k:
        return [_build(i, points, matrix, [i], centroid=matrix[i]) for i in range(n)]

    rng = np.random.default_rng(seed)
    centroids = _kmeans_plus_plus(matrix, k, rng)

    for _ in range(max_iterations):
        labels = _assign(matrix, centroids)
        updated = centroids.copy()
        for j in range(k):
            mask = labels == j
            if mask.any():
                updated[j] = matrix[mask].mean(axis=0)
        shift = float(np.max(np.linalg.norm(updated - centroids, axis=1)))
        centroids = updated
        if shift <= distance_threshold:
            break

    labels = _assign(matrix, centroids)
    results = []
    for j in range(k):
        indices = np.flatnonzero(labels == j)
        if indices.size:
            results.append(_build(j, points, matrix, indices.tolist(), centroid=centroids[j]))
    return results


def hierarchical(points: Sequence[VectorPoint], k: int) -> list[ClusterResult]:
    """
    Agglomerative clustering with average linkage, down to k clusters.

    Linkage distances are maintained with the Lance-Williams update. Ties
    merge the lowest (i, j) pair; j is folded into i and i's id is kept.

    Raises:
        ValidationError: Mismatched vector lengths or non-positive k
    """
    if k <= 0:
        raise ValidationError("cluster_count must be positive", field="cluster_count")
    matrix = as_matrix([p.vector for p in points])
    n = matrix.shape[0]
    if n == 0:
        return []

    dist = pairwise_distances(matrix)
    np.fill_diagonal(dist, np.inf)
    sizes = np.ones(n, dtype=np.float64)
    active = np.ones(n, dtype=bool)
    members: list[list[int]] = [[i] for i in range(n)]

    # nearest partner among higher indices, per row
    nn_dist = np.full(n, np.inf)
    nn_idx = np.full(n, -1, dtype=np.int64)

    def refresh(r: int) -> None:
        row = dist[r, r + 1:]
        if row.size == 0:
            nn_dist[r], nn_idx[r] = np.inf, -1
            return
        j = int(np.argmin(row))
        nn_dist[r], nn_idx[r] = row[j], r + 1 + j

    for r in range(n):
        refresh(r)

    remaining = n
    while remaining > k:
        i = int(np.argmin(nn_dist))
        j = int(nn_idx[i])

        merged = (sizes[i] * dist[i] + sizes[j] * dist[j]) / (sizes[i] + sizes[j])
        merged[~active] = np.inf
        merged[i] = merged[j] = np.inf
        dist[i, :] = merged
        dist[:, i] = merged
        dist[j, :] = np.inf
        dist[:, j] = np.inf

        sizes[i] += sizes[j]
        members[i].extend(members[j])
        members[j] = []
        active[j] = False
        nn_dist[j], nn_idx[j] = np.inf, -1
        remaining -= 1

        stale = np.flatnonzero(active & ((nn_idx == i) | (nn_idx == j)))
        for r in set(stale.tolist()) | {i}:
            refresh(r)
        lower = np.flatnonzero(active[:i])
        lower = lower[~np.isin(lower, stale)]
        if lower.size:
            candidate = dist[lower, i]
            better = (candidate < nn_dist[lower]) | (
                (candidate == nn_dist[lower]) & (i < nn_idx[lower])
            )
            nn_dist[lower[better]] = candidate[better]
            nn_idx[lower[better]] = i

    return [
        _build(i, points, matrix, sorted(members[i]))
        for i in range(n)
        if active[i]
    ]


def dbscan(
    points: Sequence[VectorPoint],
    epsilon: float,
    min_points: int,
    include_border_points: bool = False,
) -> list[ClusterResult]:
    """
    Density-based clustering.

    A point's neighborhood is every other point within epsilon. Points with
    fewer than min_points neighbors are noise and never appear in the output
    unless include_border_points is set, in which case a non-core point
    reachable from a core point joins that point's cluster. Clusters are
    expanded breadth-first.

    Raises:
        ValidationError: Mismatched vector lengths or invalid parameters
    """
    if epsilon <= 0:
        raise ValidationError("epsilon must be positive", field="epsilon")
    if min_points <= 0:
        raise ValidationError("min_points must be positive", field="min_points")
    matrix = as_matrix([p.vector for p in points])
    n = matrix.shape[0]
    if n == 0:
        return []

    dist = pairwise_distances(matrix)
    within = dist <= epsilon
    np.fill_diagonal(within, False)
    neighbors = [np.flatnonzero(within[i]) for i in range(n)]
    core = np.array([len(nb) >= min_points for nb in neighbors], dtype=bool)

    labels = np.full(n, -1, dtype=np.int64)
    visited = np.zeros(n, dtype=bool)
    next_id = 0

    for i in range(n):
        if visited[i]:
            continue
        visited[i] = True
        if not core[i]:
            continue

        labels[i] = next_id
        queue = deque(int(q) for q in neighbors[i])
        queued = set(queue)
        while queue:
            p = queue.popleft()
            if not core[p]:
                if include_border_points and labels[p] == -1:
                    labels[p] = next_id
                continue
            if labels[p] == -1:
                labels[p] = next_id
            if visited[p]:
                continue
            visited[p] = True
            for q in neighbors[p]:
                q = int(q)
                if q not in queued and not visited[q]:
                    queue.append(q)
                    queued.add(q)
        next_id += 1

    return [
        _build(cid, points, matrix, np.flatnonzero(labels == cid).tolist())
        for cid in range(next_id)
    ]


def cluster(points: Sequence[VectorPoint], config: ClusteringConfig) -> list[ClusterResult]:
    """
    Run the configured algorithm and attach key features to each cluster.

    Raises:
        ValidationError: Invalid config or mismatched vector lengths
    """
    config.validate()
    if config.algorithm == "kmeans":
        results = kmeans(
            points,
            config.cluster_count,
            max_iterations=config.max_iterations,
            distance_threshold=config.distance_threshold,
            seed=config.seed,
        )
    elif config.algorithm == "hierarchical":
        results = hierarchical(points, config.cluster_count)
    else:
        results = dbscan(
            points,
            config.epsilon,
            config.min_points,
            include_border_points=config.include_border_points,
        )

    by_id = {p.id: p for p in points}
    for result in results:
        result.key_features = extract_key_features(
            [by_id[m.id].metadata for m in result.members if m.id in by_id]
        )
    return results

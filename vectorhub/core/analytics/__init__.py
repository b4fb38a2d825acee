"""
Analytics engines over stored vectors: similarity ranking, clustering and
anomaly detection. All functions are stateless and work on snapshots.
"""

from .anomaly import AnomalyResult, TimeRange, detect, get_strategy
from .clustering import (
    ClusteringConfig,
    ClusterMember,
    ClusterResult,
    cluster,
    dbscan,
    hierarchical,
    kmeans,
)
from .features import extract_key_features
from .records import VectorPoint
from .similarity import SimilarityMatch, rank_by_similarity

__all__ = [
    "AnomalyResult",
    "TimeRange",
    "detect",
    "get_strategy",
    "ClusteringConfig",
    "ClusterMember",
    "ClusterResult",
    "cluster",
    "dbscan",
    "hierarchical",
    "kmeans",
    "extract_key_features",
    "VectorPoint",
    "SimilarityMatch",
    "rank_by_similarity",
]

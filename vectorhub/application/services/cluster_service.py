"""
Clustering service.

Snapshots an owner's vectors and runs the clustering engine off the event
loop.

Dependencies: vectorhub.boundary.vdb, vectorhub.core.analytics
System role: Clustering orchestration
"""

import asyncio
import logging
import uuid

from vectorhub.application.services.corpus import load_points
from vectorhub.boundary.vdb.vector_store import VectorStore
from vectorhub.configs.analytics import AnalyticsSettings
from vectorhub.core.analytics import ClusteringConfig, ClusterResult, cluster

logger = logging.getLogger(__name__)


class ClusterService:
    def __init__(self, vector_store: VectorStore, settings: AnalyticsSettings | None = None) -> None:
        self._vector_store = vector_store
        self._settings = settings or AnalyticsSettings()

    def default_config(self, algorithm: str = "kmeans", **overrides) -> ClusteringConfig:
        """Build a config from settings defaults; None overrides are ignored."""
        config = ClusteringConfig(
            algorithm=algorithm,
            cluster_count=self._settings.default_cluster_count,
            max_iterations=self._settings.kmeans_max_iterations,
            distance_threshold=self._settings.kmeans_distance_threshold,
            epsilon=self._settings.dbscan_epsilon,
            min_points=self._settings.dbscan_min_points,
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config

    async def cluster(
        self,
        owner: str,
        config: ClusteringConfig,
        collection_id: uuid.UUID | None = None,
        source_type: str | None = None,
    ) -> list[ClusterResult]:
        """
        Cluster an owner's vectors.

        Raises:
            ValidationError: Invalid config or mismatched vector dimensions
        """
        config.validate()
        points = await load_points(
            self._vector_store, owner, collection_id=collection_id, source_type=source_type
        )
        results = await asyncio.to_thread(cluster, points, config)
        logger.info(
            f"{__name__}:cluster - {config.algorithm} produced {len(results)} clusters",
            extra={"owner": owner, "points": len(points)},
        )
        return results

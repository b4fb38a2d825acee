"""
Anomaly detection service.

Snapshots an owner's vectors, applies the requested time window and runs
the anomaly engine off the event loop.

Dependencies: vectorhub.boundary.vdb, vectorhub.core.analytics
System role: Anomaly detection orchestration
"""

import asyncio
import logging
import uuid
from datetime import datetime

from vectorhub.application.services.corpus import load_points
from vectorhub.boundary.vdb.vector_store import VectorStore
from vectorhub.configs.analytics import AnalyticsSettings
from vectorhub.core.analytics import AnomalyResult, TimeRange, detect
from vectorhub.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class AnomalyService:
    def __init__(self, vector_store: VectorStore, settings: AnalyticsSettings | None = None) -> None:
        self._vector_store = vector_store
        self._settings = settings or AnalyticsSettings()

    async def detect(
        self,
        owner: str,
        method: str | None = None,
        threshold: float | None = None,
        time_range: str | int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        neighbors: int | None = None,
        feature_groups: dict[str, list[int]] | None = None,
        collection_id: uuid.UUID | None = None,
        source_type: str | None = None,
    ) -> list[AnomalyResult]:
        """
        Detect anomalous vectors for an owner.

        Args:
            owner: Owning user identifier
            method: Strategy name or alias (defaults from settings)
            threshold: Minimum anomaly score (defaults from settings)
            time_range: "all" or a trailing number of days
            start: Explicit window start (exclusive with time_range)
            end: Explicit window end (exclusive with time_range)
            neighbors: k for neighbor-based strategies
            feature_groups: Label -> vector dimensions for anomaly types
            collection_id: Restrict to one collection
            source_type: Restrict to one source type

        Raises:
            ValidationError: Bad method, threshold, window or groups
        """
        if time_range is not None and (start is not None or end is not None):
            raise ValidationError(
                "Use either time_range or start/end, not both", field="time_range"
            )
        window = TimeRange.last_days(time_range)
        if start is not None or end is not None:
            window = TimeRange(start=start, end=end)

        points = await load_points(
            self._vector_store, owner, collection_id=collection_id, source_type=source_type
        )
        results = await asyncio.to_thread(
            detect,
            points,
            method or self._settings.anomaly_method,
            self._settings.anomaly_threshold if threshold is None else threshold,
            window,
            neighbors or self._settings.anomaly_neighbors,
            feature_groups,
        )
        logger.info(
            f"{__name__}:detect - {len(results)} anomalies in {len(points)} vectors",
            extra={"owner": owner, "method": method or self._settings.anomaly_method},
        )
        return results

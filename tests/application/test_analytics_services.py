"""
Tests for SearchService, ClusterService and AnomalyService.

Vectors are written straight through VectorStore, then queried through the
services the analytics routes use.
"""

from datetime import datetime, timedelta, timezone

import pytest

from vectorhub.application.services.anomaly_service import AnomalyService
from vectorhub.application.services.cluster_service import ClusterService
from vectorhub.application.services.search_service import SearchService
from vectorhub.boundary.vdb.vector_schemas import NewEmbedding
from vectorhub.configs.analytics import AnalyticsSettings
from vectorhub.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def analytics_settings() -> AnalyticsSettings:
    return AnalyticsSettings(_env_file=None)


async def store_vectors(vector_store, owner, vectors, source_type="text", name="corpus"):
    """Create a collection holding `vectors`; source ids are row-<n>."""
    collection = await vector_store.create_collection(name=name, model_id="fake-model", owner=owner)
    records = [
        NewEmbedding(
            vector=vector,
            source_type=source_type,
            source_id=f"row-{i}",
            metadata={"content": f"row {i}"},
        )
        for i, vector in enumerate(vectors)
    ]
    stored = await vector_store.put_batch(collection.id, owner, records)
    return collection, stored


class TestSearchService:
    """Test suite for SearchService.search()."""

    @pytest.fixture
    def service(self, vector_store, fake_provider, analytics_settings) -> SearchService:
        return SearchService(vector_store, fake_provider, analytics_settings, default_model_id="fake-model")

    @pytest.mark.asyncio
    async def test_text_query_should_rank_identical_text_first(
        self, service, vector_store, fake_provider
    ) -> None:
        # Arrange
        texts = ["alpha", "beta", "gamma"]
        vectors = [await fake_provider.embed(t, "fake-model") for t in texts]
        await store_vectors(vector_store, "alice", vectors)
        fake_provider.calls.clear()

        # Act
        matches = await service.search("alice", "beta", threshold=-1.0)

        # Assert
        assert matches[0].point.source_id == "row-1"
        assert matches[0].score == pytest.approx(1.0)
        assert [m.score for m in matches] == sorted((m.score for m in matches), reverse=True)
        assert fake_provider.calls == [("beta", "fake-model")]

    @pytest.mark.asyncio
    async def test_exact_id_should_use_stored_vector(self, service, vector_store, fake_provider) -> None:
        # Arrange
        _, stored = await store_vectors(vector_store, "alice", [[1.0, 0.0], [0.8, 0.6], [0.0, 1.0]])

        # Act
        matches = await service.search("alice", str(stored[0].id), kind="exactId", threshold=0.5)

        # Assert
        assert [m.point.id for m in matches] == [str(stored[0].id), str(stored[1].id)]
        assert matches[1].score == pytest.approx(0.8)
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_exact_id_should_accept_source_id_and_exclude_anchor(
        self, service, vector_store
    ) -> None:
        _, stored = await store_vectors(vector_store, "alice", [[1.0, 0.0], [0.8, 0.6]])

        matches = await service.search(
            "alice", "row-0", kind="exact_id", threshold=0.0, exclude_anchor=True
        )

        assert [m.point.id for m in matches] == [str(stored[1].id)]

    @pytest.mark.asyncio
    async def test_unknown_anchor_should_raise_not_found(self, service, vector_store) -> None:
        await store_vectors(vector_store, "alice", [[1.0, 0.0]])

        with pytest.raises(NotFoundError):
            await service.search("alice", "row-99", kind="exactId")

    @pytest.mark.asyncio
    async def test_other_owner_vectors_should_not_be_searched(self, service, vector_store) -> None:
        await store_vectors(vector_store, "alice", [[1.0, 0.0]])

        with pytest.raises(NotFoundError):
            await service.search("bob", "row-0", kind="exactId")

    @pytest.mark.asyncio
    async def test_empty_corpus_should_return_empty_without_embedding(
        self, service, fake_provider
    ) -> None:
        assert await service.search("alice", "anything") == []
        assert fake_provider.calls == []

    @pytest.mark.asyncio
    async def test_limit_zero_should_return_empty(self, service, vector_store) -> None:
        await store_vectors(vector_store, "alice", [[1.0, 0.0]])

        assert await service.search("alice", "row-0", kind="exactId", limit=0) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind,query", [("fuzzy", "x"), ("text", "")])
    async def test_invalid_query_should_raise(self, service, kind, query) -> None:
        with pytest.raises(ValidationError):
            await service.search("alice", query, kind=kind)


class TestClusterService:
    """Test suite for ClusterService."""

    @pytest.mark.asyncio
    async def test_kmeans_should_separate_groups(self, vector_store, analytics_settings) -> None:
        # Arrange
        vectors = [[0.0, 0.0], [0.1, 0.0], [0.0, 0.1], [5.0, 5.0], [5.1, 5.0], [5.0, 5.1]]
        await store_vectors(vector_store, "alice", vectors)
        service = ClusterService(vector_store, analytics_settings)
        config = service.default_config("kmeans", cluster_count=2, seed=7)

        # Act
        clusters = await service.cluster("alice", config)

        # Assert
        assert sorted(c.size for c in clusters) == [3, 3]
        member_sets = sorted(sorted(m.id for m in c.members) for c in clusters)
        assert sum(len(s) for s in member_sets) == 6

    @pytest.mark.asyncio
    async def test_dbscan_should_use_settings_defaults(self, vector_store, analytics_settings) -> None:
        vectors = [[0.0, 0.0], [0.05, 0.0], [0.0, 0.05], [0.05, 0.05], [9.0, 9.0]]
        await store_vectors(vector_store, "alice", vectors)
        service = ClusterService(vector_store, analytics_settings)

        clusters = await service.cluster("alice", service.default_config("dbscan"))

        assert len(clusters) == 1
        assert clusters[0].size == 4

    def test_default_config_should_ignore_none_overrides(self, vector_store, analytics_settings) -> None:
        service = ClusterService(vector_store, analytics_settings)

        config = service.default_config("kmeans", cluster_count=None, seed=3)

        assert config.cluster_count == analytics_settings.default_cluster_count
        assert config.seed == 3

    @pytest.mark.asyncio
    async def test_invalid_config_should_raise(self, vector_store, analytics_settings) -> None:
        service = ClusterService(vector_store, analytics_settings)

        with pytest.raises(ValidationError):
            await service.cluster("alice", service.default_config("spectral"))

    @pytest.mark.asyncio
    async def test_empty_corpus_should_return_no_clusters(self, vector_store, analytics_settings) -> None:
        service = ClusterService(vector_store, analytics_settings)

        assert await service.cluster("alice", service.default_config()) == []


class TestAnomalyService:
    """Test suite for AnomalyService.detect()."""

    VECTORS = [[0.0, 0.0], [0.1, 0.0], [0.0, 0.1], [0.1, 0.1], [5.0, 5.0]]

    @pytest.mark.asyncio
    async def test_outlier_should_be_flagged(self, vector_store, analytics_settings) -> None:
        # Arrange
        _, stored = await store_vectors(vector_store, "alice", self.VECTORS)
        service = AnomalyService(vector_store, analytics_settings)

        # Act
        anomalies = await service.detect("alice", method="knn_distance", threshold=0.8, neighbors=2)

        # Assert
        assert [a.point_id for a in anomalies] == [str(stored[4].id)]
        assert anomalies[0].anomaly_score > 0.95
        assert anomalies[0].source_id == "row-4"

    @pytest.mark.asyncio
    async def test_tight_corpus_should_report_no_anomalies(self, vector_store, analytics_settings) -> None:
        vectors = [[1.0 + 0.001 * ((i * 7) % 5), 1.0 - 0.001 * ((i * 3) % 4)] for i in range(20)]
        await store_vectors(vector_store, "alice", vectors)
        service = AnomalyService(vector_store, analytics_settings)

        assert await service.detect("alice", threshold=0.8) == []

    @pytest.mark.asyncio
    async def test_recent_time_range_should_keep_new_vectors(self, vector_store, analytics_settings) -> None:
        await store_vectors(vector_store, "alice", self.VECTORS)
        service = AnomalyService(vector_store, analytics_settings)

        anomalies = await service.detect("alice", time_range="7", neighbors=2)

        assert len(anomalies) == 1

    @pytest.mark.asyncio
    async def test_future_window_should_return_nothing(self, vector_store, analytics_settings) -> None:
        await store_vectors(vector_store, "alice", self.VECTORS)
        service = AnomalyService(vector_store, analytics_settings)

        start = datetime.now(timezone.utc) + timedelta(days=1)
        assert await service.detect("alice", start=start) == []

    @pytest.mark.asyncio
    async def test_time_range_and_explicit_window_should_conflict(
        self, vector_store, analytics_settings
    ) -> None:
        service = AnomalyService(vector_store, analytics_settings)

        with pytest.raises(ValidationError):
            await service.detect("alice", time_range="7", start=datetime.now(timezone.utc))

    @pytest.mark.asyncio
    async def test_unknown_method_should_raise(self, vector_store, analytics_settings) -> None:
        service = AnomalyService(vector_store, analytics_settings)

        with pytest.raises(ValidationError):
            await service.detect("alice", method="magic")

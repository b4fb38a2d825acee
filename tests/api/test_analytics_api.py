"""
Test suite for the analytics router.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from vectorhub.api.deps import get_anomaly_service, get_cluster_service, get_search_service
from vectorhub.core.analytics import (
    AnomalyResult,
    ClusteringConfig,
    ClusterMember,
    ClusterResult,
    SimilarityMatch,
    VectorPoint,
)
from vectorhub.core.exceptions import NotFoundError, UpstreamError


@pytest.fixture
def search_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_search_service] = lambda: service
    return service


@pytest.fixture
def cluster_service(app):
    service = MagicMock()
    service.cluster = AsyncMock()
    app.dependency_overrides[get_cluster_service] = lambda: service
    return service


@pytest.fixture
def anomaly_service(app):
    service = AsyncMock()
    app.dependency_overrides[get_anomaly_service] = lambda: service
    return service


class TestSearch:
    def test_search_returns_ranked_results(self, client, search_service) -> None:
        # Arrange
        point = VectorPoint(id="v1", vector=[1.0, 0.0], metadata={"content": "hello"}, source_type="text")
        search_service.search.return_value = [SimilarityMatch(point=point, score=0.93)]

        # Act
        response = client.post(
            "/api/v1/analytics/search",
            json={"owner": "alice", "query": "hello", "threshold": 0.5, "limit": 3},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["results"][0] == {
            "id": "v1",
            "score": 0.93,
            "source_type": "text",
            "source_id": None,
            "content": "hello",
            "metadata": {"content": "hello"},
            "created_at": None,
        }
        search_service.search.assert_awaited_once_with(
            owner="alice",
            query="hello",
            kind="text",
            threshold=0.5,
            limit=3,
            collection_id=None,
            exclude_anchor=False,
        )

    def test_unknown_anchor_should_return_404(self, client, search_service) -> None:
        search_service.search.side_effect = NotFoundError("vector", "row-9")

        response = client.post(
            "/api/v1/analytics/search",
            json={"owner": "alice", "query": "row-9", "kind": "exactId"},
        )

        assert response.status_code == 404

    def test_embedding_outage_should_return_502(self, client, search_service) -> None:
        search_service.search.side_effect = UpstreamError("Embedding call failed", service="embedding")

        response = client.post("/api/v1/analytics/search", json={"owner": "alice", "query": "x"})

        assert response.status_code == 502
        assert response.json()["error_type"] == "UpstreamError"

    def test_threshold_out_of_range_should_be_rejected(self, client, search_service) -> None:
        response = client.post(
            "/api/v1/analytics/search",
            json={"owner": "alice", "query": "x", "threshold": 1.5},
        )

        assert response.status_code == 422
        search_service.search.assert_not_awaited()


class TestClusters:
    def test_clusters_hide_vectors_by_default(self, client, cluster_service) -> None:
        # Arrange
        config = ClusteringConfig(algorithm="dbscan", epsilon=0.5)
        cluster_service.default_config.return_value = config
        cluster_service.cluster.return_value = [
            ClusterResult(
                id=0,
                centroid=[0.5, 0.5],
                members=[ClusterMember(id="a", vector=[0.0, 0.0], distance=0.7)],
                avg_distance=0.7,
                key_features=["category: news"],
            )
        ]

        # Act
        response = client.post(
            "/api/v1/analytics/clusters",
            json={"owner": "alice", "algorithm": "dbscan", "epsilon": 0.5},
        )

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert data["algorithm"] == "dbscan"
        cluster = data["clusters"][0]
        assert cluster["size"] == 1
        assert cluster["centroid"] is None
        assert cluster["members"][0]["vector"] is None
        assert cluster["key_features"] == ["category: news"]
        kwargs = cluster_service.default_config.call_args.kwargs
        assert kwargs["epsilon"] == 0.5
        assert kwargs["cluster_count"] is None

    def test_include_vectors(self, client, cluster_service) -> None:
        cluster_service.default_config.return_value = ClusteringConfig()
        cluster_service.cluster.return_value = [
            ClusterResult(
                id=2,
                centroid=[1.0, 1.0],
                members=[ClusterMember(id="b", vector=[1.0, 1.0], distance=0.0)],
                avg_distance=0.0,
            )
        ]

        response = client.post(
            "/api/v1/analytics/clusters",
            json={"owner": "alice", "include_vectors": True},
        )

        cluster = response.json()["clusters"][0]
        assert cluster["centroid"] == [1.0, 1.0]
        assert cluster["members"][0]["vector"] == [1.0, 1.0]

    def test_unsupported_algorithm_should_be_rejected(self, client, cluster_service) -> None:
        response = client.post(
            "/api/v1/analytics/clusters",
            json={"owner": "alice", "algorithm": "spectral"},
        )

        assert response.status_code == 422


class TestAnomalies:
    def test_anomalies(self, client, anomaly_service) -> None:
        collection_id = uuid4()
        anomaly_service.detect.return_value = [
            AnomalyResult(
                point_id="v9",
                anomaly_score=0.97,
                anomaly_type="attribute_outlier",
                explanation="Anomaly score 0.97 meets threshold 0.80",
                threshold=0.8,
            )
        ]

        response = client.post(
            "/api/v1/analytics/anomalies",
            json={"owner": "alice", "time_range": "30", "collection_id": str(collection_id)},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["anomalies"][0]["is_anomaly"] is True
        kwargs = anomaly_service.detect.call_args.kwargs
        assert kwargs["time_range"] == "30"
        assert kwargs["collection_id"] == collection_id

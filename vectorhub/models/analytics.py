"""
Analytics request/response schemas.

Search, clustering and anomaly detection contracts. Response builders turn
engine dataclasses into API models.

Dependencies: pydantic
System role: Analytics API contracts
"""

import uuid
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from vectorhub.core.analytics import AnomalyResult, ClusterResult, SimilarityMatch


class SearchRequest(BaseModel):
    owner: str = Field(min_length=1)
    query: str = Field(min_length=1, description="Text, or a vector id / source_id for exactId")
    kind: Literal["text", "exactId", "exact_id"] = "text"
    threshold: float | None = Field(default=None, ge=-1.0, le=1.0)
    limit: int | None = Field(default=None, ge=0)
    collection_id: uuid.UUID | None = None
    exclude_anchor: bool = False


class SearchResultItem(BaseModel):
    id: str
    score: float
    source_type: str | None = None
    source_id: str | None = None
    content: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @classmethod
    def from_match(cls, match: SimilarityMatch) -> "SearchResultItem":
        point = match.point
        return cls(
            id=point.id,
            score=match.score,
            source_type=point.source_type,
            source_id=point.source_id,
            content=point.metadata.get("content"),
            metadata=point.metadata,
            created_at=point.created_at,
        )


class SearchResponse(BaseModel):
    results: list[SearchResultItem]
    total: int


class ClusterRequest(BaseModel):
    owner: str = Field(min_length=1)
    algorithm: Literal["kmeans", "hierarchical", "dbscan"] = "kmeans"
    cluster_count: int | None = Field(default=None, gt=0)
    max_iterations: int | None = Field(default=None, gt=0)
    distance_threshold: float | None = Field(default=None, ge=0.0)
    epsilon: float | None = Field(default=None, gt=0.0)
    min_points: int | None = Field(default=None, gt=0)
    include_border_points: bool = False
    seed: int | None = None
    collection_id: uuid.UUID | None = None
    source_type: str | None = None
    include_vectors: bool = Field(default=False, description="Return member vectors and centroids")


class ClusterMemberItem(BaseModel):
    id: str
    distance: float
    vector: list[float] | None = None


class ClusterItem(BaseModel):
    id: int
    size: int
    avg_distance: float
    key_features: list[str] = Field(default_factory=list)
    centroid: list[float] | None = None
    members: list[ClusterMemberItem]

    @classmethod
    def from_result(cls, result: ClusterResult, include_vectors: bool = False) -> "ClusterItem":
        return cls(
            id=result.id,
            size=result.size,
            avg_distance=result.avg_distance,
            key_features=result.key_features,
            centroid=result.centroid if include_vectors else None,
            members=[
                ClusterMemberItem(
                    id=m.id,
                    distance=m.distance,
                    vector=m.vector if include_vectors else None,
                )
                for m in result.members
            ],
        )


class ClusterResponse(BaseModel):
    algorithm: str
    clusters: list[ClusterItem]
    total: int


class AnomalyRequest(BaseModel):
    owner: str = Field(min_length=1)
    method: str | None = None
    threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    time_range: str | None = Field(default=None, description='"all" or a number of days')
    start: datetime | None = None
    end: datetime | None = None
    neighbors: int | None = Field(default=None, gt=0)
    feature_groups: dict[str, list[int]] | None = None
    collection_id: uuid.UUID | None = None
    source_type: str | None = None


class AnomalyItem(BaseModel):
    id: str
    anomaly_score: float
    anomaly_type: str
    explanation: str
    is_anomaly: bool = True
    threshold: float
    source_type: str | None = None
    source_id: str | None = None
    created_at: datetime | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_result(cls, result: AnomalyResult) -> "AnomalyItem":
        return cls(
            id=result.point_id,
            anomaly_score=result.anomaly_score,
            anomaly_type=result.anomaly_type,
            explanation=result.explanation,
            is_anomaly=result.is_anomaly,
            threshold=result.threshold,
            source_type=result.source_type,
            source_id=result.source_id,
            created_at=result.created_at,
            metadata=result.metadata,
        )


class AnomalyResponse(BaseModel):
    anomalies: list[AnomalyItem]
    total: int

"""
Analytics API endpoints.

Routes: POST /analytics/search, POST /analytics/clusters,
POST /analytics/anomalies

Dependencies: vectorhub.application.services, vectorhub.models.analytics
System role: Vector analytics HTTP API
"""

from fastapi import APIRouter, Depends

from vectorhub.api.deps import get_anomaly_service, get_cluster_service, get_search_service
from vectorhub.application.services import AnomalyService, ClusterService, SearchService
from vectorhub.models.analytics import (
    AnomalyItem,
    AnomalyRequest,
    AnomalyResponse,
    ClusterItem,
    ClusterRequest,
    ClusterResponse,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
)

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.post("/search", response_model=SearchResponse)
async def search(
    request: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Rank an owner's vectors by cosine similarity to a query.

    kind="text" embeds the query; kind="exactId" uses a stored vector
    (by id or source_id) as the anchor.

    Raises:
        ValidationError (400): Bad parameters or mismatched dimensions
        NotFoundError (404): exactId anchor or collection not found
        UpstreamError (502): Embedding call failed
    """
    matches = await service.search(
        owner=request.owner,
        query=request.query,
        kind=request.kind,
        threshold=request.threshold,
        limit=request.limit,
        collection_id=request.collection_id,
        exclude_anchor=request.exclude_anchor,
    )
    items = [SearchResultItem.from_match(m) for m in matches]
    return SearchResponse(results=items, total=len(items))


@router.post("/clusters", response_model=ClusterResponse)
async def cluster(
    request: ClusterRequest,
    service: ClusterService = Depends(get_cluster_service),
) -> ClusterResponse:
    """Cluster an owner's vectors with k-means, hierarchical or DBSCAN."""
    config = service.default_config(
        request.algorithm,
        cluster_count=request.cluster_count,
        max_iterations=request.max_iterations,
        distance_threshold=request.distance_threshold,
        epsilon=request.epsilon,
        min_points=request.min_points,
        include_border_points=request.include_border_points,
        seed=request.seed,
    )
    results = await service.cluster(
        request.owner,
        config,
        collection_id=request.collection_id,
        source_type=request.source_type,
    )
    return ClusterResponse(
        algorithm=config.algorithm,
        clusters=[ClusterItem.from_result(r, request.include_vectors) for r in results],
        total=len(results),
    )


@router.post("/anomalies", response_model=AnomalyResponse)
async def detect_anomalies(
    request: AnomalyRequest,
    service: AnomalyService = Depends(get_anomaly_service),
) -> AnomalyResponse:
    """Score an owner's vectors and return those at or above the threshold."""
    results = await service.detect(
        owner=request.owner,
        method=request.method,
        threshold=request.threshold,
        time_range=request.time_range,
        start=request.start,
        end=request.end,
        neighbors=request.neighbors,
        feature_groups=request.feature_groups,
        collection_id=request.collection_id,
        source_type=request.source_type,
    )
    items = [AnomalyItem.from_result(r) for r in results]
    return AnomalyResponse(anomalies=items, total=len(items))

"""
Similarity search service.

Resolves the query anchor (embedded text or a stored vector), snapshots
the candidate vectors and ranks them with the similarity engine.

Dependencies: vectorhub.boundary.vdb, vectorhub.boundary.embeddings, vectorhub.core.analytics
System role: Search orchestration
"""

import logging
import uuid
from typing import Literal

from vectorhub.boundary.embeddings.embedding_provider import EmbeddingProvider
from vectorhub.boundary.vdb.vector_schemas import EmbeddingRecord
from vectorhub.boundary.vdb.vector_store import VectorStore
from vectorhub.configs.analytics import AnalyticsSettings
from vectorhub.core.analytics import SimilarityMatch, rank_by_similarity
from vectorhub.core.exceptions import NotFoundError, ValidationError
from vectorhub.application.services.corpus import to_points

logger = logging.getLogger(__name__)

QueryKind = Literal["text", "exactId"]

_KIND_ALIASES = {"text": "text", "exactId": "exactId", "exact_id": "exactId"}


class SearchService:
    """Similarity search over an owner's stored vectors."""

    def __init__(
        self,
        vector_store: VectorStore,
        embedding_provider: EmbeddingProvider,
        settings: AnalyticsSettings | None = None,
        default_model_id: str | None = None,
    ) -> None:
        self._vector_store = vector_store
        self._embedding_provider = embedding_provider
        self._settings = settings or AnalyticsSettings()
        self._default_model_id = default_model_id

    async def search(
        self,
        owner: str,
        query: str,
        kind: str = "text",
        threshold: float | None = None,
        limit: int | None = None,
        collection_id: uuid.UUID | None = None,
        exclude_anchor: bool = False,
    ) -> list[SimilarityMatch]:
        """
        Rank stored vectors by cosine similarity to a query.

        Args:
            owner: Owning user identifier
            query: Text to embed, or a vector id / source_id for exactId
            kind: "text" or "exactId"
            threshold: Minimum score (defaults from settings)
            limit: Maximum results (defaults from settings)
            collection_id: Restrict candidates to one collection
            exclude_anchor: Drop the anchor vector itself from exactId results

        Returns:
            list[SimilarityMatch]: Matches by descending score

        Raises:
            ValidationError: Unknown kind, bad threshold/limit or dimension mismatch
            NotFoundError: exactId anchor or collection not found
            UpstreamError: Embedding call failed
        """
        resolved_kind = _KIND_ALIASES.get(kind)
        if resolved_kind is None:
            raise ValidationError(
                f"Unknown query kind: {kind}",
                field="kind",
                details={"allowed": ["text", "exactId"]},
            )
        if not query:
            raise ValidationError("query must not be empty", field="query")
        threshold = self._settings.search_threshold if threshold is None else threshold
        limit = self._settings.search_limit if limit is None else limit

        model_id = self._default_model_id
        if collection_id is not None:
            collection = await self._vector_store.get_collection(collection_id, owner)
            model_id = collection.model_id

        anchor: EmbeddingRecord | None = None
        if resolved_kind == "exactId":
            anchor = await self._resolve_anchor(query, owner)

        records = await self._vector_store.get_all(owner, collection_id=collection_id)
        if not records:
            return []

        if anchor is not None:
            query_vector = anchor.vector
            if exclude_anchor:
                records = [r for r in records if r.id != anchor.id]
        else:
            query_vector = await self._embedding_provider.embed(query, model_id)

        matches = rank_by_similarity(query_vector, to_points(records), threshold, limit)
        logger.info(
            f"{__name__}:search - {len(matches)} matches",
            extra={"owner": owner, "kind": resolved_kind, "candidates": len(records)},
        )
        return matches

    async def _resolve_anchor(self, query: str, owner: str) -> EmbeddingRecord:
        try:
            vector_id = uuid.UUID(query)
        except ValueError:
            vector_id = None

        if vector_id is not None:
            try:
                return await self._vector_store.get_by_id(vector_id, owner)
            except NotFoundError:
                pass
        try:
            return await self._vector_store.get_by_source_id(query, owner)
        except NotFoundError as e:
            raise NotFoundError("vector", query) from e

"""Background job tasks."""

from vectorhub.workers.tasks.embedding_ingestion import IngestionJobRunner

__all__ = ["IngestionJobRunner"]

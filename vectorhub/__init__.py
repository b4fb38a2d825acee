"""VectorHub: embedding ingestion, job queue and vector analytics service."""

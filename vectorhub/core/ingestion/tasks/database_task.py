"""
Database import task.

Runs a caller-supplied query against an operator-registered external
database, page by page, and renders each row as "column: value | column: value"
text. Callers name a connection id; URLs and credentials never come from
job parameters.

Dependencies: sqlalchemy (asyncpg / aiosqlite drivers)
System role: Row source stage of the embedding ingestion pipeline
"""

import logging
from typing import Any, Mapping

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine

from vectorhub.configs.ingestion import DatabaseConnection
from vectorhub.core.exceptions import ConfigurationError, NotFoundError, UpstreamError, ValidationError
from ..models import DatabaseSource

logger = logging.getLogger(__name__)


def to_async_url(url: str) -> str:
    """Switch plain postgres/sqlite URLs to their async drivers."""
    url = url.strip()
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def resolve_connection(
    connections: Mapping[str, DatabaseConnection],
    connection_id: str,
    owner: str,
) -> DatabaseConnection:
    """
    Look up a registered connection the owner may use.

    Unknown ids and connections the owner is not allowed to use are both
    reported as not found.

    Raises:
        NotFoundError: No usable connection with this id
    """
    connection = connections.get(connection_id)
    if connection is None or not connection.allows(owner):
        raise NotFoundError("database connection", connection_id)
    return connection


def render_row(row: dict[str, Any], columns: list[str] | None = None) -> str:
    """Render one row as "col: value | col: value", skipping nulls."""
    names = columns or list(row.keys())
    parts = [
        f"{name}: {row[name]}"
        for name in names
        if name in row and row[name] is not None
    ]
    return " | ".join(parts)


class DatabaseTask:
    """Fetch and render rows for a database import."""

    def __init__(
        self,
        page_size: int = 1000,
        connections: Mapping[str, DatabaseConnection] | None = None,
    ) -> None:
        """
        Initialize database task.

        Args:
            page_size: Rows fetched per LIMIT/OFFSET page
            connections: Registered external databases keyed by connection id
        """
        self._page_size = page_size
        self._connections = dict(connections or {})

    def _paginate(self, query: str) -> str:
        trimmed = query.strip().rstrip(";").strip()
        if not trimmed:
            raise ValidationError("Query cannot be empty", field="query")
        return f"{trimmed} LIMIT :_limit OFFSET :_offset"

    async def fetch_rows(self, source: DatabaseSource, owner: str) -> list[str]:
        """
        Run the source query and render every row.

        Args:
            source: Connection id, query and optional column selection
            owner: Owner of the job; must be allowed to use the connection

        Returns:
            list[str]: Rendered rows in query order (blank rows included)

        Raises:
            NotFoundError: Connection id not registered for this owner
            ConfigurationError: If the registered URL is unusable
            UpstreamError: If the external database call fails
        """
        paginated = self._paginate(source.query)
        connection = resolve_connection(self._connections, source.connection_id, owner)
        rows: list[str] = []
        offset = 0

        try:
            engine = create_async_engine(to_async_url(connection.url))
        except (SQLAlchemyError, ImportError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid URL for database connection {source.connection_id}: {e}",
                setting="database_connections",
            ) from e

        try:
            async with engine.connect() as conn:
                while True:
                    result = await conn.execute(
                        text(paginated),
                        {"_limit": self._page_size, "_offset": offset},
                    )
                    page = [dict(row) for row in result.mappings().all()]
                    rows.extend(render_row(row, source.columns) for row in page)
                    logger.debug(
                        f"{__name__}:fetch_rows - Fetched page at offset {offset}",
                        extra={"rows": len(page), "connection_id": source.connection_id},
                    )
                    if len(page) < self._page_size:
                        break
                    offset += self._page_size
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:fetch_rows - Query failed at offset {offset}: {e}")
            raise UpstreamError(
                f"Database query failed: {e}",
                service="database",
                details={"offset": offset, "connection_id": source.connection_id},
            ) from e
        finally:
            await engine.dispose()

        logger.info(f"{__name__}:fetch_rows - Retrieved {len(rows)} rows")
        return rows

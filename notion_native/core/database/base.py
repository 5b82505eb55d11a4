"""Shared plumbing for the per-table managers."""

import logging
from abc import ABC
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from notion_native.core.database.utils import row_to_model_data

logger = logging.getLogger(__name__)


class TableManager(ABC):
    """Base class for managers that own one table.

    ``DatabaseManager`` injects the shared pool after it is created. Records
    come back as plain dicts with ids and timestamps stringified and the
    subclass's ``json_columns`` decoded, ready for the row models.
    """

    table: str = ""
    json_columns: tuple[str, ...] = ()

    def __init__(self):
        self.pool: asyncpg.Pool | None = None

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise RuntimeError(f"Database pool not initialized for {self.table}")
        return self.pool

    def to_record(self, row: asyncpg.Record | dict) -> dict[str, Any]:
        return row_to_model_data(dict(row), self.json_columns)

    @asynccontextmanager
    async def transaction(self):
        """Yield a connection whose statements commit or roll back together."""
        async with self._require_pool().acquire() as conn:
            try:
                async with conn.transaction():
                    yield conn
            except Exception as e:
                logger.error(f"Transaction on {self.table} rolled back: {e}")
                raise

    async def fetch_record(self, query: str, *args) -> dict[str, Any] | None:
        async with self._require_pool().acquire() as conn:
            row = await conn.fetchrow(query, *args)
        return self.to_record(row) if row else None

    async def fetch_records(self, query: str, *args) -> list[dict[str, Any]]:
        async with self._require_pool().acquire() as conn:
            rows = await conn.fetch(query, *args)
        return [self.to_record(row) for row in rows]

    async def fetch_scalar(self, query: str, *args) -> Any:
        async with self._require_pool().acquire() as conn:
            return await conn.fetchval(query, *args)

    async def count(self) -> int:
        value = await self.fetch_scalar(f"SELECT COUNT(*) FROM {self.table}")
        return int(value or 0)


__all__ = ["TableManager"]

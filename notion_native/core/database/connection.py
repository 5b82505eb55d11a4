"""Database connection management and the storage gateway implementation."""

import asyncio
import logging

import asyncpg
from asyncpg import Pool

from notion_native.core.database.models import BlockManager, EmbeddingManager, PageManager
from notion_native.core.database.schema import SchemaManager
from notion_native.core.interfaces import StorageGateway
from notion_native.models.config import DatabaseConfig
from notion_native.models.domain import (
    BlockRow,
    BlockRowPayload,
    BlockSearchHit,
    BlockTypeCount,
    EmbeddingPayload,
    PagePayload,
    PageRow,
    SimilarEmbedding,
    StorageStats,
)

logger = logging.getLogger(__name__)


class DatabaseManager(StorageGateway):
    """PostgreSQL + pgvector storage for migrated pages, blocks and embeddings.

    Composes one manager per table and delegates every gateway operation
    to it. ``initialize()`` must be awaited before use.
    """

    def __init__(self, database_url: str | None = None, config: DatabaseConfig | None = None):
        self.config = config or DatabaseConfig()
        self.database_url = database_url or self.config.url
        self.pool: Pool | None = None

        self.schema = SchemaManager(self.config.embedding_dimension)
        self.pages = PageManager()
        self.blocks = BlockManager()
        self.embeddings = EmbeddingManager()

    async def initialize(self, max_retries: int = 5, retry_delay: float = 2.0):
        """Create the connection pool and the schema, retrying connection errors."""
        for attempt in range(max_retries):
            try:
                self.pool = await asyncpg.create_pool(
                    self.database_url,
                    min_size=self.config.min_pool_size,
                    max_size=self.config.max_pool_size,
                    command_timeout=self.config.command_timeout,
                )
                break
            except (OSError, asyncpg.PostgresError) as e:
                if attempt < max_retries - 1:
                    logger.info(
                        f"Database connection attempt {attempt + 1} failed, retrying in {retry_delay}s..."
                    )
                    await asyncio.sleep(retry_delay)
                else:
                    logger.error(
                        f"Failed to initialize database after {max_retries} attempts: {e}"
                    )
                    raise

        await self.schema.create_base_schema(self.pool)
        self._inject_pool()
        logger.info("Database initialized successfully")

    def _inject_pool(self):
        for manager in (self.pages, self.blocks, self.embeddings):
            manager.pool = self.pool

    async def close(self):
        if self.pool:
            await self.pool.close()
            logger.info("Database connection closed")

    async def is_healthy(self) -> bool:
        if not self.pool:
            return False

        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Database health check failed: {e}")
            return False

    # ===================
    # Page Operations - Delegate to PageManager
    # ===================

    async def save_page(self, page: PagePayload) -> PageRow:
        return await self.pages.save_page(page)

    async def get_page_by_notion_id(self, notion_id: str) -> PageRow | None:
        return await self.pages.get_page_by_notion_id(notion_id)

    # ===================
    # Block Operations - Delegate to BlockManager
    # ===================

    async def save_blocks(
        self, page_id: str, blocks: list[BlockRowPayload]
    ) -> list[BlockRow]:
        return await self.blocks.save_blocks(page_id, blocks)

    async def get_page_blocks(self, page_id: str) -> list[BlockRow]:
        return await self.blocks.get_page_blocks(page_id)

    async def get_block(self, block_id: str) -> BlockRow | None:
        return await self.blocks.get_block(block_id)

    async def search_blocks(self, query: str, limit: int = 20) -> list[BlockSearchHit]:
        return await self.blocks.search_blocks(query, limit)

    async def get_block_type_stats(self, limit: int = 10) -> list[BlockTypeCount]:
        return await self.blocks.get_block_type_stats(limit)

    async def get_total_words(self) -> int:
        return await self.blocks.get_total_words()

    # ===================
    # Embedding Operations - Delegate to EmbeddingManager
    # ===================

    async def save_embeddings(self, embeddings: list[EmbeddingPayload]) -> None:
        await self.embeddings.save_embeddings(embeddings)

    async def search_similar_embeddings(
        self, embedding: list[float], threshold: float = 0.7, limit: int = 10
    ) -> list[SimilarEmbedding]:
        return await self.embeddings.search_similar_embeddings(embedding, threshold, limit)

    # ===================
    # Statistics
    # ===================

    async def get_storage_stats(self) -> StorageStats:
        return StorageStats(
            total_pages=await self.pages.count_pages(),
            total_blocks=await self.blocks.count_blocks(),
            total_embeddings=await self.embeddings.count_embeddings(),
            last_sync=await self.pages.get_last_sync(),
        )


__all__ = ["DatabaseManager"]

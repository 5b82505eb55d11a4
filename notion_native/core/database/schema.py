"""Database schema creation."""

import logging

logger = logging.getLogger(__name__)


class SchemaManager:
    """Creates the pages, blocks and embeddings tables."""

    def __init__(self, embedding_dimension: int = 1536):
        self.embedding_dimension = embedding_dimension

    async def create_base_schema(self, pool):
        async with pool.acquire() as conn:
            await conn.execute("CREATE EXTENSION IF NOT EXISTS vector")

            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notion_pages (
                    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                    notion_id TEXT UNIQUE NOT NULL,
                    title TEXT NOT NULL DEFAULT 'Untitled',
                    parent_id TEXT,
                    database_id TEXT,
                    url TEXT,
                    icon_emoji TEXT,
                    icon_url TEXT,
                    cover_url TEXT,
                    notion_created_time TEXT,
                    notion_last_edited_time TEXT,
                    archived BOOLEAN NOT NULL DEFAULT FALSE,
                    content_hash TEXT,
                    properties JSONB DEFAULT '{}',
                    raw_data JSONB DEFAULT '{}',
                    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
                )
            """
            )

            await conn.execute(
                """
                CREATE TABLE IF NOT EXISTS notion_blocks (
                    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                    page_id UUID NOT NULL REFERENCES notion_pages(id) ON DELETE CASCADE,
                    notion_id TEXT UNIQUE NOT NULL,
                    parent_block_id TEXT,
                    type VARCHAR(50) NOT NULL,
                    content JSONB DEFAULT '{}',
                    plain_text TEXT NOT NULL DEFAULT '',
                    html_content TEXT NOT NULL DEFAULT '',
                    content_hash TEXT NOT NULL DEFAULT '0',
                    position INTEGER NOT NULL,
                    depth INTEGER NOT NULL DEFAULT 0,
                    has_children BOOLEAN NOT NULL DEFAULT FALSE,
                    notion_created_time TEXT,
                    notion_last_edited_time TEXT,
                    archived BOOLEAN NOT NULL DEFAULT FALSE,
                    raw_data JSONB DEFAULT '{}',
                    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
                )
            """
            )

            await conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS notion_embeddings (
                    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                    block_id UUID REFERENCES notion_blocks(id) ON DELETE SET NULL,
                    page_id UUID NOT NULL REFERENCES notion_pages(id) ON DELETE CASCADE,
                    embedding vector({self.embedding_dimension}) NOT NULL,
                    content_hash TEXT NOT NULL,
                    chunk_index INTEGER NOT NULL,
                    chunk_text TEXT NOT NULL,
                    metadata JSONB DEFAULT '{{}}',
                    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
                    UNIQUE(page_id, chunk_index)
                )
            """
            )

            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_notion_blocks_page_position ON notion_blocks(page_id, position)"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_notion_blocks_fts ON notion_blocks USING gin (to_tsvector('simple', plain_text))"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_notion_embeddings_page_id ON notion_embeddings(page_id)"
            )
            await conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_notion_embeddings_vector ON notion_embeddings USING hnsw (embedding vector_cosine_ops)"
            )

            logger.info("Database schema created")


__all__ = ["SchemaManager"]

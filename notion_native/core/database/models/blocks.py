"""Block CRUD and text search operations."""

import json
import logging

from notion_native.core.database.base import TableManager
from notion_native.core.database.utils import parse_uuid
from notion_native.models.domain import BlockRow, BlockRowPayload, BlockSearchHit, BlockTypeCount

logger = logging.getLogger(__name__)

BLOCK_JSON_COLUMNS = ("content", "raw_data")

UPSERT_BLOCK_SQL = """
    INSERT INTO notion_blocks (
        page_id, notion_id, parent_block_id, type, content, plain_text,
        html_content, content_hash, position, depth, has_children,
        notion_created_time, notion_last_edited_time, archived, raw_data
    )
    VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15)
    ON CONFLICT (notion_id) DO UPDATE SET
        page_id = EXCLUDED.page_id,
        parent_block_id = EXCLUDED.parent_block_id,
        type = EXCLUDED.type,
        content = EXCLUDED.content,
        plain_text = EXCLUDED.plain_text,
        html_content = EXCLUDED.html_content,
        content_hash = EXCLUDED.content_hash,
        position = EXCLUDED.position,
        depth = EXCLUDED.depth,
        has_children = EXCLUDED.has_children,
        notion_created_time = EXCLUDED.notion_created_time,
        notion_last_edited_time = EXCLUDED.notion_last_edited_time,
        archived = EXCLUDED.archived,
        raw_data = EXCLUDED.raw_data,
        updated_at = NOW()
    RETURNING *
"""


class BlockManager(TableManager):
    """Manages notion_blocks rows."""

    table = "notion_blocks"
    json_columns = BLOCK_JSON_COLUMNS

    async def save_blocks(
        self, page_id: str, blocks: list[BlockRowPayload]
    ) -> list[BlockRow]:
        """Upsert a page's blocks and delete blocks no longer on the page.

        Runs in a single transaction; the returned rows follow the input order.
        """
        page_uuid = parse_uuid(page_id)
        saved: list[BlockRow] = []

        async with self.transaction() as conn:
            for block in blocks:
                row = await conn.fetchrow(
                    UPSERT_BLOCK_SQL,
                    page_uuid,
                    block.notion_id,
                    block.parent_block_id,
                    block.type,
                    json.dumps(block.content),
                    block.plain_text,
                    block.html_content,
                    block.content_hash,
                    block.position,
                    block.depth,
                    block.has_children,
                    block.notion_created_time,
                    block.notion_last_edited_time,
                    block.archived,
                    json.dumps(block.raw_data),
                )
                saved.append(BlockRow(**self.to_record(row)))

            removed = await conn.execute(
                """
                DELETE FROM notion_blocks
                WHERE page_id = $1 AND NOT (notion_id = ANY($2::text[]))
                """,
                page_uuid,
                [block.notion_id for block in blocks],
            )
            logger.debug(f"Removed stale blocks for page {page_id}: {removed}")

        return saved

    async def get_page_blocks(self, page_id: str) -> list[BlockRow]:
        rows = await self.fetch_records(
            "SELECT * FROM notion_blocks WHERE page_id = $1 ORDER BY position",
            parse_uuid(page_id),
        )
        return [BlockRow(**row) for row in rows]

    async def get_block(self, block_id: str) -> BlockRow | None:
        row = await self.fetch_record(
            "SELECT * FROM notion_blocks WHERE id = $1", parse_uuid(block_id)
        )
        return BlockRow(**row) if row else None

    async def search_blocks(self, query: str, limit: int = 20) -> list[BlockSearchHit]:
        """Full-text search over block plain text, best matches first."""
        rows = await self.fetch_records(
            """
            SELECT b.*, p.title AS page_title, p.url AS page_url,
                   ts_rank(to_tsvector('simple', b.plain_text),
                           plainto_tsquery('simple', $1)) AS rank
            FROM notion_blocks b
            JOIN notion_pages p ON p.id = b.page_id
            WHERE b.archived = FALSE
              AND to_tsvector('simple', b.plain_text) @@ plainto_tsquery('simple', $1)
            ORDER BY rank DESC, b.position
            LIMIT $2
            """,
            query,
            limit,
        )

        hits = []
        for row in rows:
            page_title = row.pop("page_title")
            page_url = row.pop("page_url")
            row.pop("rank")
            hits.append(
                BlockSearchHit(
                    block=BlockRow(**row),
                    page_title=page_title,
                    page_url=page_url,
                )
            )
        return hits

    async def count_blocks(self) -> int:
        return await self.count()

    async def get_block_type_stats(self, limit: int = 10) -> list[BlockTypeCount]:
        rows = await self.fetch_records(
            """
            SELECT type, COUNT(*) AS count
            FROM notion_blocks
            WHERE archived = FALSE
            GROUP BY type
            ORDER BY count DESC, type
            LIMIT $1
            """,
            limit,
        )
        return [BlockTypeCount(type=row["type"], count=row["count"]) for row in rows]

    async def get_total_words(self) -> int:
        total = await self.fetch_scalar(
            r"""
            SELECT COALESCE(SUM(array_length(regexp_split_to_array(btrim(plain_text), '\s+'), 1)), 0)
            FROM notion_blocks
            WHERE archived = FALSE AND btrim(plain_text) <> ''
            """
        )
        return int(total or 0)


__all__ = ["BlockManager"]

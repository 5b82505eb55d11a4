"""Page CRUD operations."""

import json

from notion_native.core.database.base import TableManager
from notion_native.core.database.utils import format_timestamp
from notion_native.models.domain import PagePayload, PageRow

PAGE_JSON_COLUMNS = ("properties", "raw_data")


class PageManager(TableManager):
    """Manages notion_pages rows."""

    table = "notion_pages"
    json_columns = PAGE_JSON_COLUMNS

    async def save_page(self, page: PagePayload) -> PageRow:
        """Upsert a page keyed on its notion_id."""
        row = await self.fetch_record(
            """
            INSERT INTO notion_pages (
                notion_id, title, parent_id, database_id, url, icon_emoji,
                icon_url, cover_url, notion_created_time, notion_last_edited_time,
                archived, content_hash, properties, raw_data
            )
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14)
            ON CONFLICT (notion_id) DO UPDATE SET
                title = EXCLUDED.title,
                parent_id = EXCLUDED.parent_id,
                database_id = EXCLUDED.database_id,
                url = EXCLUDED.url,
                icon_emoji = EXCLUDED.icon_emoji,
                icon_url = EXCLUDED.icon_url,
                cover_url = EXCLUDED.cover_url,
                notion_created_time = EXCLUDED.notion_created_time,
                notion_last_edited_time = EXCLUDED.notion_last_edited_time,
                archived = EXCLUDED.archived,
                content_hash = EXCLUDED.content_hash,
                properties = EXCLUDED.properties,
                raw_data = EXCLUDED.raw_data,
                updated_at = NOW()
            RETURNING *
            """,
            page.notion_id,
            page.title,
            page.parent_id,
            page.database_id,
            page.url,
            page.icon_emoji,
            page.icon_url,
            page.cover_url,
            page.notion_created_time,
            page.notion_last_edited_time,
            page.archived,
            page.content_hash,
            json.dumps(page.properties),
            json.dumps(page.raw_data),
        )
        return PageRow(**row)

    async def get_page_by_notion_id(self, notion_id: str) -> PageRow | None:
        row = await self.fetch_record(
            "SELECT * FROM notion_pages WHERE notion_id = $1", notion_id
        )
        return PageRow(**row) if row else None

    async def count_pages(self) -> int:
        return await self.count()

    async def get_last_sync(self) -> str | None:
        return format_timestamp(
            await self.fetch_scalar("SELECT MAX(updated_at) FROM notion_pages")
        )


__all__ = ["PageManager"]

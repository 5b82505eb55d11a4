"""Notion API block source."""

from notion_native.core.services.notion.client import NotionAPIError, NotionClient

__all__ = ["NotionAPIError", "NotionClient"]

"""Database model operations - CRUD operations organized by entity."""

from notion_native.core.database.models.blocks import BlockManager
from notion_native.core.database.models.embeddings import EmbeddingManager
from notion_native.core.database.models.pages import PageManager

__all__ = ["PageManager", "BlockManager", "EmbeddingManager"]

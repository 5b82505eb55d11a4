"""PostgreSQL storage for migrated Notion content.

This package organizes database operations into focused modules:
- connection.py: Connection management and the composed DatabaseManager
- schema.py: Schema creation
- models/: Entity CRUD operations (pages, blocks, embeddings)
"""

from notion_native.core.database.connection import DatabaseManager

__all__ = ["DatabaseManager"]

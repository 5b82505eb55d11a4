"""Configuration models for notion-native."""

from notion_native.models.config.settings import *

__all__ = [
    "NotionConfig",
    "EmbeddingConfig",
    "ChunkingConfig",
    "MigrationConfig",
    "DatabaseConfig",
    "AppConfig",
    "DEFAULT_CONFIG_PATH",
]

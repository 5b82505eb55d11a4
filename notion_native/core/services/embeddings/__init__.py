"""Vector embedding services."""

from notion_native.core.services.embeddings.openai import EmbeddingService

__all__ = ["EmbeddingService"]

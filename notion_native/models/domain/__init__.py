"""Core domain models for the Notion migration pipeline."""

from notion_native.models.domain.blocks import *
from notion_native.models.domain.content import *
from notion_native.models.domain.migration import *
from notion_native.models.domain.storage import *

__all__ = [
    # Block models
    "BlockType",
    "Annotations",
    "RichTextRun",
    "FileReference",
    "Icon",
    "BlockPayload",
    "BlockParent",
    "RawBlock",
    "NotionPage",
    "PageWithBlocks",
    # Content models
    "ContentMetadata",
    "ExtractedContent",
    "PageSection",
    "PageContent",
    "ChunkMetadata",
    "TextChunk",
    # Migration models
    "MigrationStage",
    "MigrationResult",
    "MigrationSummary",
    "BatchMigrationResult",
    "BlockTypeCount",
    "ContentStats",
    "StorageStats",
    "MigrationStats",
    # Storage models
    "PagePayload",
    "PageRow",
    "BlockRowPayload",
    "BlockRow",
    "EmbeddingPayload",
    "SimilarEmbedding",
    "BlockSearchHit",
    "EmbeddingSearchHit",
    "ContentSearchResult",
]

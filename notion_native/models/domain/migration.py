"""Migration result models."""

from enum import Enum

from pydantic import BaseModel, Field


class MigrationStage(str, Enum):
    """Steps of the single-page migration pipeline."""

    FETCH = "fetch"
    AGGREGATE = "aggregate"
    SAVE_PAGE = "save_page"
    SAVE_BLOCKS = "save_blocks"
    CHUNK = "chunk"
    EMBED = "embed"
    SAVE_EMBEDDINGS = "save_embeddings"


class MigrationResult(BaseModel):
    """Outcome of migrating one page."""

    success: bool
    page_id: str | None = Field(default=None, description="Storage row id of the page")
    notion_page_id: str | None = None
    blocks_processed: int | None = Field(default=None, ge=0)
    embeddings_generated: int | None = Field(default=None, ge=0)
    errors: list[str] | None = None
    failed_stage: MigrationStage | None = None


class MigrationSummary(BaseModel):
    """Aggregate counters of a batch migration."""

    total: int = Field(default=0, ge=0)
    successful: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    total_blocks: int = Field(default=0, ge=0)
    total_embeddings: int = Field(default=0, ge=0)


class BatchMigrationResult(BaseModel):
    """Per-page results plus the batch summary."""

    results: list[MigrationResult] = Field(default_factory=list)
    summary: MigrationSummary = Field(default_factory=MigrationSummary)

    @property
    def errors(self) -> list[str]:
        """Flat list of every per-page error message."""
        return [error for result in self.results for error in (result.errors or [])]


class BlockTypeCount(BaseModel):
    type: str
    count: int = Field(ge=0)


class ContentStats(BaseModel):
    """Word and block-type statistics of migrated content."""

    total_words: int = Field(default=0, ge=0)
    average_words_per_page: int = Field(default=0, ge=0)
    top_content_types: list[BlockTypeCount] = Field(default_factory=list)


class StorageStats(BaseModel):
    """Row counts of the migrated store."""

    total_pages: int = Field(default=0, ge=0)
    total_blocks: int = Field(default=0, ge=0)
    total_embeddings: int = Field(default=0, ge=0)
    last_sync: str | None = None


class MigrationStats(BaseModel):
    storage: StorageStats
    content: ContentStats


__all__ = [
    "MigrationStage",
    "MigrationResult",
    "MigrationSummary",
    "BatchMigrationResult",
    "BlockTypeCount",
    "ContentStats",
    "StorageStats",
    "MigrationStats",
]

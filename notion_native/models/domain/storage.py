"""Payloads written to and rows read from the storage gateway."""

from pydantic import BaseModel, Field


class PagePayload(BaseModel):
    """Page row data, upserted on ``notion_id``."""

    notion_id: str
    title: str
    parent_id: str | None = None
    database_id: str | None = None
    url: str | None = None
    icon_emoji: str | None = None
    icon_url: str | None = None
    cover_url: str | None = None
    notion_created_time: str | None = None
    notion_last_edited_time: str | None = None
    archived: bool = False
    content_hash: str | None = None
    properties: dict = Field(default_factory=dict)
    raw_data: dict = Field(default_factory=dict)


class PageRow(PagePayload):
    """A persisted page."""

    id: str
    created_at: str | None = None
    updated_at: str | None = None


class BlockRowPayload(BaseModel):
    """Block row data, upserted on ``notion_id``."""

    notion_id: str
    parent_block_id: str | None = None
    type: str
    content: dict = Field(default_factory=dict)
    plain_text: str = ""
    html_content: str = ""
    content_hash: str = "0"
    position: int = Field(ge=0)
    depth: int = Field(default=0, ge=0)
    has_children: bool = False
    notion_created_time: str | None = None
    notion_last_edited_time: str | None = None
    archived: bool = False
    raw_data: dict = Field(default_factory=dict)


class BlockRow(BlockRowPayload):
    """A persisted block."""

    id: str
    page_id: str
    created_at: str | None = None
    updated_at: str | None = None


class EmbeddingPayload(BaseModel):
    """One embedding row per chunk."""

    block_id: str | None = None
    page_id: str
    embedding: list[float]
    content_hash: str
    chunk_index: int = Field(ge=0)
    chunk_text: str
    metadata: dict = Field(default_factory=dict)


class SimilarEmbedding(BaseModel):
    """Result of a vector similarity search."""

    id: str
    block_id: str | None = None
    page_id: str
    chunk_index: int
    chunk_text: str
    similarity: float
    metadata: dict = Field(default_factory=dict)


class BlockSearchHit(BaseModel):
    """Full-text search hit with the owning page's title and url."""

    block: BlockRow
    page_title: str | None = None
    page_url: str | None = None


class EmbeddingSearchHit(BaseModel):
    block: BlockRow | None = None
    chunk_text: str
    similarity: float


class ContentSearchResult(BaseModel):
    text_results: list[BlockSearchHit] = Field(default_factory=list)
    embedding_results: list[EmbeddingSearchHit] | None = None


__all__ = [
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

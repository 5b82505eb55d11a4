"""Abstract collaborators of the migration pipeline.

The pipeline depends only on these interfaces; ``NotionClient``,
``DatabaseManager`` and ``EmbeddingService`` are the shipped adapters.
"""

from abc import ABC, abstractmethod

from notion_native.models.domain import (
    BlockRow,
    BlockRowPayload,
    BlockSearchHit,
    BlockTypeCount,
    EmbeddingPayload,
    PagePayload,
    PageRow,
    PageWithBlocks,
    SimilarEmbedding,
    StorageStats,
)


class BlockSource(ABC):
    """Delivers a page and its depth-first flattened block tree."""

    @abstractmethod
    async def fetch_page_with_blocks(self, page_id: str) -> PageWithBlocks:
        """Fetch page properties plus every block down to the depth cap."""


class StorageGateway(ABC):
    """Persistence of pages, blocks and embeddings."""

    @abstractmethod
    async def save_page(self, page: PagePayload) -> PageRow:
        """Upsert a page on its ``notion_id``."""

    @abstractmethod
    async def save_blocks(
        self, page_id: str, blocks: list[BlockRowPayload]
    ) -> list[BlockRow]:
        """Upsert the page's blocks, removing blocks no longer present."""

    @abstractmethod
    async def save_embeddings(self, embeddings: list[EmbeddingPayload]) -> None:
        """Replace the embeddings of the pages referenced by the rows."""

    @abstractmethod
    async def get_page_by_notion_id(self, notion_id: str) -> PageRow | None: ...

    @abstractmethod
    async def get_page_blocks(self, page_id: str) -> list[BlockRow]:
        """Blocks of a page ordered by position."""

    @abstractmethod
    async def search_blocks(self, query: str, limit: int = 20) -> list[BlockSearchHit]:
        """Full-text search over block plain text."""

    @abstractmethod
    async def search_similar_embeddings(
        self, embedding: list[float], threshold: float = 0.7, limit: int = 10
    ) -> list[SimilarEmbedding]:
        """Cosine-similarity search over stored embeddings."""

    @abstractmethod
    async def get_block(self, block_id: str) -> BlockRow | None: ...

    @abstractmethod
    async def get_storage_stats(self) -> StorageStats: ...

    @abstractmethod
    async def get_block_type_stats(self, limit: int = 10) -> list[BlockTypeCount]: ...

    @abstractmethod
    async def get_total_words(self) -> int:
        """Sum of word counts over every stored block."""


class EmbeddingProvider(ABC):
    """Turns text into embedding vectors."""

    @abstractmethod
    async def embed_text(self, text: str) -> list[float]: ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed every text, returning one vector per input in order."""


__all__ = ["BlockSource", "StorageGateway", "EmbeddingProvider"]

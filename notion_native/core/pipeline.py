"""Migration pipeline: fetch, extract, persist, chunk and embed Notion pages."""

import asyncio
import logging

from notion_native.core.errors import (
    EmbeddingError,
    MigrationError,
    PageNotFoundError,
    PersistenceError,
    UpstreamFetchError,
    migration_step,
)
from notion_native.core.extraction import extract_content
from notion_native.core.interfaces import BlockSource, EmbeddingProvider, StorageGateway
from notion_native.core.text import TextChunker, aggregate_page_content, render_blocks
from notion_native.core.text.rendering import ExportFormat
from notion_native.models.config import MigrationConfig
from notion_native.models.domain import (
    BatchMigrationResult,
    BlockRow,
    BlockRowPayload,
    ContentSearchResult,
    ContentStats,
    EmbeddingPayload,
    EmbeddingSearchHit,
    MigrationResult,
    MigrationStage,
    MigrationStats,
    MigrationSummary,
    NotionPage,
    PageContent,
    PagePayload,
    PageRow,
    PageWithBlocks,
    RawBlock,
    TextChunk,
)

logger = logging.getLogger(__name__)

TOP_CONTENT_TYPES_LIMIT = 10


def build_page_payload(page: NotionPage, content: PageContent) -> PagePayload:
    """Map a fetched page to its storage row."""
    parent = page.parent
    icon = page.icon

    icon_url = None
    if icon is not None and icon.type in ("file", "external"):
        source = icon.file if icon.type == "file" else icon.external
        icon_url = source.url if source else None

    return PagePayload(
        notion_id=page.id,
        title=page.title,
        parent_id=(parent.page_id or parent.database_id) if parent else None,
        database_id=parent.database_id if parent and parent.type == "database_id" else None,
        url=page.url,
        icon_emoji=icon.emoji if icon is not None and icon.type == "emoji" else None,
        icon_url=icon_url,
        cover_url=page.cover_url,
        notion_created_time=page.created_time,
        notion_last_edited_time=page.last_edited_time,
        archived=page.archived,
        content_hash=content.content_hash,
        properties=page.properties,
        raw_data=page.model_dump(mode="json", exclude_none=True),
    )


def build_block_payloads(blocks: list[RawBlock]) -> list[BlockRowPayload]:
    """Map fetched blocks to storage rows, keeping their depth-first order."""
    payloads = []
    for position, block in enumerate(blocks):
        extracted = extract_content(block)
        payloads.append(
            BlockRowPayload(
                notion_id=block.id,
                parent_block_id=block.parent_block_id,
                type=block.type,
                content=block.payload_dict(),
                plain_text=extracted.plain_text,
                html_content=extracted.html_content,
                content_hash=extracted.content_hash,
                position=position,
                depth=block.depth,
                has_children=block.has_children,
                notion_created_time=block.created_time,
                notion_last_edited_time=block.last_edited_time,
                archived=block.archived,
                raw_data=block.model_dump(mode="json", exclude_none=True),
            )
        )
    return payloads


def build_embedding_payloads(
    page_row: PageRow,
    content: PageContent,
    chunks: list[TextChunk],
    vectors: list[list[float]],
    block_rows: list[BlockRow],
) -> list[EmbeddingPayload]:
    """Pair chunks with their vectors and link each to a saved block.

    A chunk links to the first saved block whose source id is among the
    chunk's block ids, falling back to the page's first block.
    """
    fallback_block_id = block_rows[0].id if block_rows else None
    payloads = []

    for chunk, vector in zip(chunks, vectors, strict=True):
        chunk_block_ids = set(chunk.metadata.block_ids)
        related = next(
            (row for row in block_rows if row.notion_id in chunk_block_ids), None
        )
        payloads.append(
            EmbeddingPayload(
                block_id=related.id if related else fallback_block_id,
                page_id=page_row.id,
                embedding=vector,
                content_hash=content.content_hash,
                chunk_index=chunk.metadata.chunk_index,
                chunk_text=chunk.text,
                metadata={
                    "section": chunk.metadata.section,
                    "block_ids": chunk.metadata.block_ids,
                    "start_offset": chunk.metadata.start_offset,
                    "end_offset": chunk.metadata.end_offset,
                    "page_title": page_row.title,
                },
            )
        )
    return payloads


class MigrationPipeline:
    """Migrates Notion pages into storage with text, HTML and embeddings.

    Each step of ``migrate_page`` is isolated: a failing step aborts the
    remaining steps of that page only, and work already persisted stays
    persisted. ``migrate_many`` runs pages concurrently in fixed windows.
    """

    def __init__(
        self,
        block_source: BlockSource,
        storage: StorageGateway,
        embedder: EmbeddingProvider,
        config: MigrationConfig | None = None,
    ):
        self.block_source = block_source
        self.storage = storage
        self.embedder = embedder
        self.config = config or MigrationConfig()
        self.chunker = TextChunker(
            max_chunk_size=self.config.chunking.max_chunk_size,
            overlap_size=self.config.chunking.overlap_size,
            include_subsections=self.config.chunking.include_subsections,
        )

    # ===================
    # Pipeline steps
    # ===================

    @migration_step(MigrationStage.FETCH, UpstreamFetchError)
    async def _fetch(self, page_id: str) -> PageWithBlocks:
        return await self.block_source.fetch_page_with_blocks(page_id)

    @migration_step(MigrationStage.SAVE_PAGE, PersistenceError)
    async def _save_page(self, payload: PagePayload) -> PageRow:
        return await self.storage.save_page(payload)

    @migration_step(MigrationStage.SAVE_BLOCKS, PersistenceError)
    async def _save_blocks(
        self, page_row_id: str, payloads: list[BlockRowPayload]
    ) -> list[BlockRow]:
        return await self.storage.save_blocks(page_row_id, payloads)

    @migration_step(MigrationStage.EMBED, EmbeddingError)
    async def _embed(self, chunks: list[TextChunk]) -> list[list[float]]:
        vectors = await self.embedder.embed_batch([chunk.text for chunk in chunks])
        if len(vectors) != len(chunks):
            raise EmbeddingError(
                f"Expected {len(chunks)} embeddings, got {len(vectors)}",
                stage=MigrationStage.EMBED,
            )
        return vectors

    @migration_step(MigrationStage.SAVE_EMBEDDINGS, PersistenceError)
    async def _save_embeddings(self, payloads: list[EmbeddingPayload]) -> None:
        await self.storage.save_embeddings(payloads)

    # ===================
    # Migration
    # ===================

    async def migrate_page(self, page_id: str) -> MigrationResult:
        """Run the full pipeline for one page.

        Returns a result instead of raising for step failures; ``errors``
        holds ``"<stage>: <message>"`` lines and ``failed_stage`` names the
        failed step.
        """
        page_row: PageRow | None = None
        blocks_processed: int | None = None
        embeddings_generated = 0

        logger.info(f"Starting migration of page {page_id}")

        try:
            data = await self._fetch(page_id)
            logger.debug(f"Fetched {len(data.blocks)} blocks for page {page_id}")

            content = aggregate_page_content(data.blocks)
            logger.debug(
                f"Extracted {content.word_count} words in {len(content.sections)} sections"
            )

            page_row = await self._save_page(build_page_payload(data.page, content))

            block_rows = await self._save_blocks(
                page_row.id, build_block_payloads(data.blocks)
            )
            blocks_processed = len(block_rows)

            chunks = self.chunker.chunk_page(content)
            if chunks:
                vectors = await self._embed(chunks)
                await self._save_embeddings(
                    build_embedding_payloads(page_row, content, chunks, vectors, block_rows)
                )
                embeddings_generated = len(vectors)
            else:
                logger.debug(f"No chunks for page {page_id}, skipping embeddings")

        except MigrationError as e:
            logger.error(f"Migration of page {page_id} failed at {e.describe()}")
            return MigrationResult(
                success=False,
                page_id=page_row.id if page_row else None,
                notion_page_id=page_id,
                blocks_processed=blocks_processed,
                embeddings_generated=embeddings_generated,
                errors=[e.describe()],
                failed_stage=e.stage,
            )

        logger.info(
            f"Migrated page {page_id}: {blocks_processed} blocks, {embeddings_generated} embeddings"
        )
        return MigrationResult(
            success=True,
            page_id=page_row.id,
            notion_page_id=page_id,
            blocks_processed=blocks_processed,
            embeddings_generated=embeddings_generated,
        )

    async def migrate_many(
        self, page_ids: list[str], batch_size: int | None = None
    ) -> BatchMigrationResult:
        """Migrate pages in concurrent windows of ``batch_size``.

        One page's failure, even an unexpected exception, never affects the
        other pages. Windows are separated by ``batch_delay_seconds``.
        """
        if batch_size is None:
            batch_size = self.config.batch_size
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        total = len(page_ids)
        total_batches = (total + batch_size - 1) // batch_size
        results: list[MigrationResult] = []

        logger.info(f"Migrating {total} pages in batches of {batch_size}")

        for batch_num, start in enumerate(range(0, total, batch_size), start=1):
            batch = page_ids[start : start + batch_size]
            logger.info(f"Processing batch {batch_num}/{total_batches}")

            settled = await asyncio.gather(
                *(self.migrate_page(page_id) for page_id in batch),
                return_exceptions=True,
            )

            for page_id, outcome in zip(batch, settled):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                if isinstance(outcome, BaseException):
                    logger.error(
                        f"Unexpected error migrating page {page_id}: {outcome!r}"
                    )
                    outcome = MigrationResult(
                        success=False,
                        notion_page_id=page_id,
                        errors=[str(outcome) or type(outcome).__name__],
                    )
                results.append(outcome)

            if start + batch_size < total:
                await asyncio.sleep(self.config.batch_delay_seconds)

        summary = MigrationSummary(
            total=total,
            successful=sum(1 for r in results if r.success),
            failed=sum(1 for r in results if not r.success),
            total_blocks=sum(r.blocks_processed or 0 for r in results if r.success),
            total_embeddings=sum(
                r.embeddings_generated or 0 for r in results if r.success
            ),
        )
        logger.info(f"Migration finished: {summary.successful}/{total} successful")

        return BatchMigrationResult(results=results, summary=summary)

    # ===================
    # Read side
    # ===================

    async def get_content_in_format(self, page_id: str, fmt: str) -> str:
        """Render a migrated page's stored blocks as json, markdown, html or plain.

        Raises:
            ValueError: Unsupported format
            PageNotFoundError: The page has not been migrated
        """
        try:
            ExportFormat(fmt)
        except ValueError:
            raise ValueError(f"Unsupported format: {fmt}") from None

        page_row = await self.storage.get_page_by_notion_id(page_id)
        if page_row is None:
            raise PageNotFoundError(f"Page not found: {page_id}")

        blocks = await self.storage.get_page_blocks(page_row.id)
        return render_blocks(page_row, blocks, fmt)

    async def search_content(
        self,
        query: str,
        use_embeddings: bool = False,
        limit: int = 20,
        threshold: float = 0.7,
    ) -> ContentSearchResult:
        """Full-text block search, optionally combined with vector search."""
        text_results = await self.storage.search_blocks(query, limit)

        embedding_results = None
        if use_embeddings:
            query_vector = await self.embedder.embed_text(query)
            similar = await self.storage.search_similar_embeddings(
                query_vector, threshold, limit
            )
            blocks = await asyncio.gather(
                *(
                    self.storage.get_block(row.block_id) if row.block_id else _none()
                    for row in similar
                )
            )
            embedding_results = [
                EmbeddingSearchHit(
                    block=block, chunk_text=row.chunk_text, similarity=row.similarity
                )
                for row, block in zip(similar, blocks)
            ]

        return ContentSearchResult(
            text_results=text_results, embedding_results=embedding_results
        )

    async def get_migration_stats(self) -> MigrationStats:
        storage_stats = await self.storage.get_storage_stats()
        total_words = await self.storage.get_total_words()
        top_types = await self.storage.get_block_type_stats(TOP_CONTENT_TYPES_LIMIT)

        average = 0
        if storage_stats.total_pages > 0:
            average = int(total_words / storage_stats.total_pages + 0.5)

        return MigrationStats(
            storage=storage_stats,
            content=ContentStats(
                total_words=total_words,
                average_words_per_page=average,
                top_content_types=top_types,
            ),
        )


async def _none() -> None:
    return None


__all__ = [
    "MigrationPipeline",
    "build_page_payload",
    "build_block_payloads",
    "build_embedding_payloads",
]

"""Embedding row storage and vector similarity search."""

import json
import logging

from notion_native.core.database.base import TableManager
from notion_native.core.database.utils import convert_embedding_to_postgres, parse_uuid
from notion_native.models.domain import EmbeddingPayload, SimilarEmbedding

logger = logging.getLogger(__name__)


class EmbeddingManager(TableManager):
    """Manages notion_embeddings rows."""

    table = "notion_embeddings"
    json_columns = ("metadata",)

    async def save_embeddings(self, embeddings: list[EmbeddingPayload]) -> None:
        """Replace the stored embeddings of every page present in the input."""
        if not embeddings:
            return

        page_ids = sorted({embedding.page_id for embedding in embeddings})

        async with self.transaction() as conn:
            await conn.execute(
                "DELETE FROM notion_embeddings WHERE page_id = ANY($1::uuid[])",
                [parse_uuid(page_id) for page_id in page_ids],
            )
            await conn.executemany(
                """
                INSERT INTO notion_embeddings (
                    block_id, page_id, embedding, content_hash,
                    chunk_index, chunk_text, metadata
                )
                VALUES ($1, $2, $3::vector, $4, $5, $6, $7)
                """,
                [
                    (
                        parse_uuid(embedding.block_id) if embedding.block_id else None,
                        parse_uuid(embedding.page_id),
                        convert_embedding_to_postgres(embedding.embedding),
                        embedding.content_hash,
                        embedding.chunk_index,
                        embedding.chunk_text,
                        json.dumps(embedding.metadata),
                    )
                    for embedding in embeddings
                ],
            )

        logger.debug(f"Stored {len(embeddings)} embeddings for {len(page_ids)} page(s)")

    async def search_similar_embeddings(
        self, embedding: list[float], threshold: float = 0.7, limit: int = 10
    ) -> list[SimilarEmbedding]:
        """Cosine similarity search, most similar first."""
        rows = await self.fetch_records(
            """
            SELECT id, block_id, page_id, chunk_index, chunk_text, metadata,
                   1 - (embedding <=> $1::vector) AS similarity
            FROM notion_embeddings
            WHERE 1 - (embedding <=> $1::vector) >= $2
            ORDER BY embedding <=> $1::vector
            LIMIT $3
            """,
            convert_embedding_to_postgres(embedding),
            threshold,
            limit,
        )
        return [SimilarEmbedding(**row) for row in rows]

    async def count_embeddings(self) -> int:
        return await self.count()


__all__ = ["EmbeddingManager"]

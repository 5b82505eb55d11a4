"""OpenAI embedding service."""

import asyncio
import logging

import openai
from openai import APITimeoutError, RateLimitError

from notion_native.core.interfaces import EmbeddingProvider
from notion_native.core.utils import TextUtils
from notion_native.models.config import EmbeddingConfig

logger = logging.getLogger(__name__)


class EmbeddingService(EmbeddingProvider):
    """Service for generating text embeddings using OpenAI API."""

    # Embedding dimensions for different models
    DIMENSIONS = {
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
        "text-embedding-ada-002": 1536,
    }

    def __init__(
        self,
        api_key: str | None = None,
        config: EmbeddingConfig | None = None,
        client: openai.AsyncOpenAI | None = None,
    ):
        self.config = config or EmbeddingConfig()
        self.model = self.config.model
        self.api_key = api_key or self.config.api_key

        if client is not None:
            self.client = client
        elif self.api_key:
            self.client = openai.AsyncOpenAI(
                api_key=self.api_key,
                timeout=self.config.timeout,
                max_retries=0,  # retries are handled here
            )
        else:
            logger.warning(
                "No OpenAI API key provided. Embedding service will not work."
            )
            self.client = None

    def _prepare_text(self, text: str) -> str:
        return TextUtils.prepare_for_embedding(text, self.config.max_chars)

    async def _create(self, inputs: str | list[str], label: str) -> list[list[float]]:
        """Call the embeddings endpoint with retry and exponential backoff."""
        max_retries = self.config.max_retries
        base_delay = 1.0

        for attempt in range(max_retries):
            try:
                response = await asyncio.wait_for(
                    self.client.embeddings.create(model=self.model, input=inputs),
                    timeout=self.config.timeout,
                )
                return [data.embedding for data in response.data]

            except RateLimitError:
                if attempt < max_retries - 1:
                    delay = base_delay * (2**attempt) + (attempt * 5)
                    logger.warning(
                        f"Rate limit hit on {label}, retrying in {delay}s (attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error(f"Rate limit exceeded for {label} after {max_retries} attempts")
                raise

            except (APITimeoutError, asyncio.TimeoutError):
                if attempt < max_retries - 1:
                    delay = base_delay * (2**attempt)
                    logger.warning(
                        f"Timeout on {label}, retrying in {delay}s (attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue
                logger.error(f"{label} timed out after {max_retries} attempts")
                raise

        raise RuntimeError(f"Embedding request for {label} made no attempts")

    async def embed_text(self, text: str) -> list[float]:
        """Generate embedding for a single text."""
        if not self.client:
            raise ValueError("OpenAI API key not configured")

        prepared = self._prepare_text(text)
        if not prepared:
            raise ValueError("Cannot embed empty text")

        embeddings = await self._create(prepared, "single text")
        logger.debug(f"Generated embedding for text (length: {len(prepared)})")
        return embeddings[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embeddings for texts in sub-batches, preserving order.

        Any sub-batch failure raises; partial results are never returned.
        """
        if not self.client:
            raise ValueError("OpenAI API key not configured")
        if not texts:
            return []

        prepared_texts = [self._prepare_text(text) for text in texts]
        if any(not text for text in prepared_texts):
            raise ValueError("Cannot embed empty text")

        batch_size = self.config.batch_size
        total_batches = (len(prepared_texts) + batch_size - 1) // batch_size
        all_embeddings: list[list[float]] = []

        for batch_idx in range(0, len(prepared_texts), batch_size):
            batch = prepared_texts[batch_idx : batch_idx + batch_size]
            batch_num = (batch_idx // batch_size) + 1

            logger.debug(
                f"Processing embedding batch {batch_num}/{total_batches} ({len(batch)} texts)"
            )
            batch_embeddings = await self._create(batch, f"batch {batch_num}")
            if len(batch_embeddings) != len(batch):
                raise ValueError(
                    f"Embedding batch {batch_num} returned {len(batch_embeddings)} vectors for {len(batch)} texts"
                )
            all_embeddings.extend(batch_embeddings)

        logger.info(f"Generated {len(all_embeddings)} embeddings")
        return all_embeddings

    def get_dimension(self) -> int:
        """Get the embedding dimension for the current model."""
        return self.DIMENSIONS.get(self.model, 1536)


__all__ = ["EmbeddingService"]

"""Section-based text chunking for embedding generation."""

import logging

from notion_native.models.domain import ChunkMetadata, PageContent, PageSection, TextChunk

logger = logging.getLogger(__name__)

# A window is only shortened to a word boundary found in its last 20%
WORD_BOUNDARY_RATIO = 0.8


class TextChunker:
    """Splits page sections into overlapping chunks of bounded size."""

    def __init__(
        self,
        max_chunk_size: int = 1000,
        overlap_size: int = 100,
        include_subsections: bool = False,
    ):
        if max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")
        if overlap_size < 0 or overlap_size >= max_chunk_size:
            raise ValueError("overlap_size must be in [0, max_chunk_size)")

        self.max_chunk_size = max_chunk_size
        self.overlap_size = overlap_size
        self.include_subsections = include_subsections

    def _sections(self, content: PageContent):
        for section in content.sections:
            if self.include_subsections:
                yield from section.iter_sections()
            else:
                yield section

    def chunk_page(self, content: PageContent) -> list[TextChunk]:
        """Chunk every section of a page.

        Each chunk carries the heading and block ids of its section. Chunk
        indices run from 0 across the whole page. A page without sections
        yields no chunks.
        """
        chunks: list[TextChunk] = []

        for section in self._sections(content):
            section_text = self.section_text(section)
            for text, start, end in self.split_text(section_text):
                chunks.append(
                    TextChunk(
                        text=text,
                        metadata=ChunkMetadata(
                            chunk_index=len(chunks),
                            section=section.heading,
                            block_ids=list(section.block_ids),
                            start_offset=start,
                            end_offset=end,
                        ),
                    )
                )

        logger.debug(f"Created {len(chunks)} chunks from {len(content.sections)} sections")
        return chunks

    @staticmethod
    def section_text(section: PageSection) -> str:
        return f"{section.heading}\n\n{section.content}".strip()

    def split_text(self, text: str) -> list[tuple[str, int, int]]:
        """Split text into (chunk_text, start_offset, end_offset) windows.

        Windows hold at most ``max_chunk_size`` characters and consecutive
        windows overlap by up to ``overlap_size`` characters. The start
        offset always advances, so the loop terminates.
        """
        if not text:
            return []
        if len(text) <= self.max_chunk_size:
            return [(text, 0, len(text))]

        windows = []
        start = 0
        length = len(text)

        while start < length:
            end = min(start + self.max_chunk_size, length)

            if end < length:
                last_space = text.rfind(" ", 0, end + 1)
                if last_space > start + self.max_chunk_size * WORD_BOUNDARY_RATIO:
                    end = last_space

            chunk_text = text[start:end].strip()
            if chunk_text:
                windows.append((chunk_text, start, end))

            if end == length:
                break
            start = max(start + 1, end - self.overlap_size)

        return windows


__all__ = ["TextChunker"]

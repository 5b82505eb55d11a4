"""Text processing: aggregation, chunking and rendering."""

from notion_native.core.text.aggregation import aggregate_page_content
from notion_native.core.text.chunking import TextChunker
from notion_native.core.text.rendering import ExportFormat, render_blocks

__all__ = ["aggregate_page_content", "TextChunker", "ExportFormat", "render_blocks"]

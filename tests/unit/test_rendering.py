"""Unit tests for stored-block rendering."""

import json

import pytest

from notion_native.core.text.rendering import block_to_markdown, render_blocks
from notion_native.models.domain import BlockRow, PageRow


def make_row(position: int, block_type: str, plain_text: str, html: str = "", **content):
    return BlockRow(
        id=f"row-{position}",
        page_id="page-row-1",
        notion_id=f"block-{position}",
        type=block_type,
        content=content,
        plain_text=plain_text,
        html_content=html or f"<p>{plain_text}</p>",
        position=position,
    )


@pytest.fixture
def page_row() -> PageRow:
    return PageRow(id="page-row-1", notion_id="page-1", title="My Page")


@pytest.fixture
def block_rows() -> list[BlockRow]:
    return [
        make_row(0, "heading_1", "Title", "<h1>Title</h1>"),
        make_row(1, "paragraph", "Body text"),
        make_row(2, "bulleted_list_item", "Item", "<li>Item</li>"),
    ]


class TestBlockToMarkdown:
    """Test per-block Markdown conversion."""

    def test_prefixed_types(self):
        assert block_to_markdown(make_row(0, "heading_2", "Sub")) == "## Sub"
        assert block_to_markdown(make_row(0, "numbered_list_item", "One")) == "1. One"
        assert block_to_markdown(make_row(0, "quote", "Said")) == "> Said"

    def test_code_block_with_language(self):
        row = make_row(0, "code", "print(1)", language="python")
        assert block_to_markdown(row) == "```python\nprint(1)\n```"

    def test_to_do(self):
        assert block_to_markdown(make_row(0, "to_do", "☑️ Done", checked=True)) == "- [x] Done"
        assert block_to_markdown(make_row(0, "to_do", "☐ Open")) == "- [ ] Open"

    def test_other_types_use_plain_text(self):
        assert block_to_markdown(make_row(0, "paragraph", "Just text")) == "Just text"


class TestRenderBlocks:
    """Test whole-page rendering."""

    def test_markdown(self, page_row, block_rows):
        assert render_blocks(page_row, block_rows, "markdown") == "# Title\n\nBody text\n\n- Item"

    def test_html(self, page_row, block_rows):
        assert render_blocks(page_row, block_rows, "html") == (
            "<h1>Title</h1>\n<p>Body text</p>\n<li>Item</li>"
        )

    def test_plain(self, page_row, block_rows):
        assert render_blocks(page_row, block_rows, "plain") == "Title\nBody text\nItem"

    def test_json(self, page_row, block_rows):
        data = json.loads(render_blocks(page_row, block_rows, "json"))
        assert data["page"]["notion_id"] == "page-1"
        assert [b["notion_id"] for b in data["blocks"]] == ["block-0", "block-1", "block-2"]

    def test_unknown_format(self, page_row, block_rows):
        with pytest.raises(ValueError, match="Unsupported format"):
            render_blocks(page_row, block_rows, "pdf")

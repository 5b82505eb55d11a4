"""Render stored block rows as plain text, HTML, Markdown or JSON."""

import json
from enum import Enum

from notion_native.models.domain import BlockRow, PageRow


class ExportFormat(str, Enum):
    """Supported export formats."""

    JSON = "json"
    MARKDOWN = "markdown"
    HTML = "html"
    PLAIN = "plain"


_MARKDOWN_PREFIXES = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "bulleted_list_item": "- ",
    "numbered_list_item": "1. ",
    "quote": "> ",
}


def block_to_markdown(block: BlockRow) -> str:
    """Convert one stored block to a Markdown fragment."""
    text = block.plain_text
    if block.type in _MARKDOWN_PREFIXES:
        return f"{_MARKDOWN_PREFIXES[block.type]}{text}"
    if block.type == "code":
        language = block.content.get("language", "")
        if language in ("plain text", "text"):
            language = ""
        return f"```{language}\n{text}\n```"
    if block.type == "to_do":
        # plain_text already starts with the checkbox glyph
        checked = bool(block.content.get("checked"))
        body = text.split(" ", 1)[1] if " " in text else ""
        return f"- [{'x' if checked else ' '}] {body}"
    if block.type == "equation":
        return f"$${text}$$"
    return text


def render_plain(blocks: list[BlockRow]) -> str:
    return "\n".join(block.plain_text for block in blocks)


def render_html(blocks: list[BlockRow]) -> str:
    return "\n".join(block.html_content for block in blocks)


def render_markdown(blocks: list[BlockRow]) -> str:
    return "\n\n".join(block_to_markdown(block) for block in blocks)


def render_json(page: PageRow, blocks: list[BlockRow]) -> str:
    return json.dumps(
        {
            "page": page.model_dump(mode="json"),
            "blocks": [block.model_dump(mode="json") for block in blocks],
        },
        indent=2,
        ensure_ascii=False,
    )


def render_blocks(page: PageRow, blocks: list[BlockRow], fmt: str) -> str:
    """Render a page's stored blocks in the requested format.

    Raises:
        ValueError: If ``fmt`` is not one of json, markdown, html, plain
    """
    try:
        export_format = ExportFormat(fmt)
    except ValueError:
        raise ValueError(f"Unsupported format: {fmt}") from None

    if export_format is ExportFormat.JSON:
        return render_json(page, blocks)
    elif export_format is ExportFormat.HTML:
        return render_html(blocks)
    elif export_format is ExportFormat.PLAIN:
        return render_plain(blocks)
    return render_markdown(blocks)


__all__ = [
    "ExportFormat",
    "block_to_markdown",
    "render_plain",
    "render_html",
    "render_markdown",
    "render_json",
    "render_blocks",
]

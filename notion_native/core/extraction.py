"""Block content extraction: plain text and HTML for a single Notion block.

Every function in this module is pure. ``extract_content`` is total: a block
with a missing payload or an unsupported type degrades to empty or fallback
content instead of raising.
"""

import logging
from typing import Callable

from notion_native.core.utils import TextUtils
from notion_native.models.domain import (
    BlockPayload,
    BlockType,
    ContentMetadata,
    ExtractedContent,
    RawBlock,
    RichTextRun,
)

logger = logging.getLogger(__name__)

DEFAULT_CALLOUT_ICON = "💡"
DEFAULT_CODE_LANGUAGE = "text"
FILE_LINK_LABEL = "Download file"


def _build(
    plain_text: str,
    html_content: str,
    content_type: str,
    has_formatting: bool,
    level: int | None = None,
    list_type: str | None = None,
) -> ExtractedContent:
    return ExtractedContent(
        plain_text=plain_text,
        html_content=html_content,
        content_hash=TextUtils.content_hash(plain_text),
        metadata=ContentMetadata(
            type=content_type,
            level=level,
            list_type=list_type,
            has_formatting=has_formatting,
            word_count=TextUtils.count_words(plain_text),
            character_count=TextUtils.count_characters(plain_text),
        ),
    )


def join_plain_text(runs: list[RichTextRun] | None) -> str:
    """Concatenate the plain text of rich text runs."""
    return "".join(run.plain_text for run in runs or [])


def render_run(run: RichTextRun) -> tuple[str, bool]:
    """Render one rich text run as inline HTML.

    Returns:
        The HTML fragment and whether any formatting wrapper was applied
    """
    html = TextUtils.escape_html(run.plain_text)
    annotations = run.annotations
    formatted = False

    # Innermost first: code, strong, em, del, u, color span, link
    wrappers = (
        (annotations.code, "<code>", "</code>"),
        (annotations.bold, "<strong>", "</strong>"),
        (annotations.italic, "<em>", "</em>"),
        (annotations.strikethrough, "<del>", "</del>"),
        (annotations.underline, "<u>", "</u>"),
    )
    for enabled, open_tag, close_tag in wrappers:
        if enabled:
            html = f"{open_tag}{html}{close_tag}"
            formatted = True

    if annotations.color and annotations.color != "default":
        color = TextUtils.escape_html(annotations.color)
        html = f'<span class="notion-{color}">{html}</span>'
        formatted = True

    if run.href:
        href = TextUtils.escape_html(run.href)
        html = f'<a href="{href}" target="_blank" rel="noopener noreferrer">{html}</a>'
        formatted = True

    return html, formatted


def render_runs(runs: list[RichTextRun] | None) -> tuple[str, str, bool]:
    """Render a run sequence to (plain text, inline HTML, has_formatting)."""
    plain_parts = []
    html_parts = []
    has_formatting = False
    for run in runs or []:
        html, formatted = render_run(run)
        plain_parts.append(run.plain_text)
        html_parts.append(html)
        has_formatting = has_formatting or formatted
    return "".join(plain_parts), "".join(html_parts), has_formatting


def _wrapped_text(tag: str, content_type: str) -> Callable:
    def handler(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
        plain, html, formatted = render_runs(payload.rich_text)
        if tag:
            html = f"<{tag}>{html}</{tag}>"
        return _build(plain, html, content_type, formatted)

    return handler


def _extract_heading(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    level = int(block_type.value.rsplit("_", 1)[1])
    plain, html, formatted = render_runs(payload.rich_text)
    return _build(plain, f"<h{level}>{html}</h{level}>", "heading", formatted, level=level)


def _extract_list_item(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    plain, html, formatted = render_runs(payload.rich_text)
    list_type = "bulleted" if block_type is BlockType.BULLETED_LIST_ITEM else "numbered"
    return _build(plain, f"<li>{html}</li>", "list_item", formatted, list_type=list_type)


def _extract_code(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    # Annotations inside code blocks are ignored
    code = join_plain_text(payload.rich_text)
    language = TextUtils.escape_html(payload.language or DEFAULT_CODE_LANGUAGE)
    html = (
        f'<pre><code class="language-{language}">'
        f"{TextUtils.escape_html(code)}</code></pre>"
    )
    return _build(code, html, "code", True)


def _extract_callout(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    plain, html, formatted = render_runs(payload.rich_text)
    icon = DEFAULT_CALLOUT_ICON
    if payload.icon and payload.icon.emoji:
        icon = TextUtils.escape_html(payload.icon.emoji)
    html = (
        f'<div class="notion-callout"><span class="callout-icon">{icon}</span>'
        f'<div class="callout-content">{html}</div></div>'
    )
    return _build(plain, html, "callout", formatted)


def _extract_table_row(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    plain_cells = []
    html_cells = []
    for cell in payload.cells or []:
        plain, html, _ = render_runs(cell)
        plain_cells.append(plain + "\t")
        html_cells.append(f"<td>{html}</td>")
    plain_text = "".join(plain_cells).strip()
    return _build(plain_text, f"<tr>{''.join(html_cells)}</tr>", "table_row", True)


def _extract_to_do(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    plain, html, formatted = render_runs(payload.rich_text)
    checked = bool(payload.checked)
    checkbox = "☑️" if checked else "☐"
    checked_attr = "checked " if checked else ""
    html = (
        f'<div class="notion-todo"><input type="checkbox" {checked_attr}disabled> '
        f"{html}</div>"
    )
    return _build(f"{checkbox} {plain}", html, "todo", formatted)


def _extract_divider(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    return _build("---", '<hr class="notion-divider">', "divider", False)


def _extract_media(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    url = ""
    if payload.external and payload.external.url:
        url = payload.external.url
    elif payload.file and payload.file.url:
        url = payload.file.url
    caption = join_plain_text(payload.caption)
    tag = block_type.value

    safe_url = TextUtils.escape_html(url)
    safe_caption = TextUtils.escape_html(caption)

    if block_type is BlockType.IMAGE:
        html = (
            f'<figure class="notion-image"><img src="{safe_url}" alt="{safe_caption}" '
            f'loading="lazy"><figcaption>{safe_caption}</figcaption></figure>'
        )
    elif block_type is BlockType.VIDEO:
        html = (
            f'<figure class="notion-video"><video src="{safe_url}" controls>'
            f'<track kind="captions"></video><figcaption>{safe_caption}</figcaption></figure>'
        )
    else:
        label = safe_caption or FILE_LINK_LABEL
        html = (
            f'<div class="notion-file"><a href="{safe_url}" target="_blank" '
            f'rel="noopener noreferrer">📎 {label}</a></div>'
        )

    return _build(caption or f"[{tag.upper()}]", html, tag, True)


def _extract_bookmark(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    url = payload.url or ""
    caption = join_plain_text(payload.caption)
    label = caption or url
    html = (
        f'<div class="notion-bookmark"><a href="{TextUtils.escape_html(url)}" '
        f'target="_blank" rel="noopener noreferrer">{TextUtils.escape_html(label)}</a></div>'
    )
    return _build(label, html, "bookmark", True)


def _extract_equation(payload: BlockPayload, block_type: BlockType) -> ExtractedContent:
    expression = payload.expression or ""
    html = f'<div class="notion-equation">$${TextUtils.escape_html(expression)}$$</div>'
    return _build(expression, html, "equation", True)


_HANDLERS: dict[BlockType, Callable[[BlockPayload, BlockType], ExtractedContent]] = {
    BlockType.PARAGRAPH: _wrapped_text("p", "paragraph"),
    BlockType.HEADING_1: _extract_heading,
    BlockType.HEADING_2: _extract_heading,
    BlockType.HEADING_3: _extract_heading,
    BlockType.BULLETED_LIST_ITEM: _extract_list_item,
    BlockType.NUMBERED_LIST_ITEM: _extract_list_item,
    BlockType.CODE: _extract_code,
    BlockType.QUOTE: _wrapped_text("blockquote", "quote"),
    BlockType.CALLOUT: _extract_callout,
    BlockType.TABLE_ROW: _extract_table_row,
    BlockType.TOGGLE: _wrapped_text("", "toggle"),
    BlockType.TO_DO: _extract_to_do,
    BlockType.DIVIDER: _extract_divider,
    BlockType.IMAGE: _extract_media,
    BlockType.VIDEO: _extract_media,
    BlockType.FILE: _extract_media,
    BlockType.BOOKMARK: _extract_bookmark,
    BlockType.LINK_PREVIEW: _extract_bookmark,
    BlockType.EQUATION: _extract_equation,
}


def _extract_fallback(block: RawBlock) -> ExtractedContent:
    payload = block.payload
    if payload is not None and payload.rich_text is not None:
        plain_text = join_plain_text(payload.rich_text)
    elif payload is not None and isinstance(payload.title, str):
        plain_text = payload.title
    elif payload is not None and payload.title is not None:
        plain_text = join_plain_text(payload.title)
    else:
        plain_text = f"[{block.type.upper()}]"

    css_type = TextUtils.escape_html(block.type)
    html = f'<div class="notion-{css_type}">{TextUtils.escape_html(plain_text)}</div>'
    return _build(plain_text, html, block.type, False)


def extract_content(block: RawBlock) -> ExtractedContent:
    """Extract plain text, HTML and metadata from a single block.

    Args:
        block: The block to extract

    Returns:
        Extracted content. A block without a payload yields empty text with
        ``metadata.type`` set to the raw type tag.
    """
    if block.payload is None:
        return _build("", "", block.type, False)

    block_type = BlockType.from_tag(block.type)
    if block_type is None:
        logger.debug(f"Unsupported block type '{block.type}' ({block.id}), using fallback")
        return _extract_fallback(block)

    return _HANDLERS[block_type](block.payload, block_type)


__all__ = ["extract_content", "render_run", "render_runs", "join_plain_text"]

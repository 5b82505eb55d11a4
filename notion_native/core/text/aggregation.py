"""Page content aggregation: flat text, HTML and the heading section tree."""

import logging
from dataclasses import dataclass, field

from notion_native.core.extraction import extract_content
from notion_native.core.utils import TextUtils
from notion_native.models.domain import PageContent, PageSection, RawBlock

logger = logging.getLogger(__name__)


@dataclass
class _SectionNode:
    """Mutable section under construction; children are arena indices."""

    id: str
    heading: str
    level: int
    content: list[str] = field(default_factory=list)
    html_content: list[str] = field(default_factory=list)
    block_ids: list[str] = field(default_factory=list)
    children: list[int] = field(default_factory=list)


class _SectionTreeBuilder:
    """Builds the section tree in one pass over headings and body blocks.

    Sections live in an arena addressed by index. ``stack`` holds the indices
    of sections that are still open, outermost first.
    """

    def __init__(self):
        self.arena: list[_SectionNode] = []
        self.stack: list[int] = []
        self.roots: list[int] = []

    def _close_top(self) -> None:
        closed = self.stack.pop()
        if self.stack:
            self.arena[self.stack[-1]].children.append(closed)
        else:
            self.roots.append(closed)

    def open_heading(self, block_id: str, heading: str, level: int) -> None:
        while self.stack and self.arena[self.stack[-1]].level >= level:
            self._close_top()
        self.arena.append(
            _SectionNode(id=block_id, heading=heading, level=level, block_ids=[block_id])
        )
        self.stack.append(len(self.arena) - 1)

    def append_body(self, block_id: str, plain_text: str, html_content: str) -> None:
        if not self.stack:
            return
        node = self.arena[self.stack[-1]]
        node.content.append(plain_text + "\n")
        node.html_content.append(html_content + "\n")
        node.block_ids.append(block_id)

    def finish(self) -> list[PageSection]:
        while self.stack:
            self._close_top()
        return [self._freeze(index) for index in self.roots]

    def _freeze(self, index: int) -> PageSection:
        node = self.arena[index]
        return PageSection(
            id=node.id,
            heading=node.heading,
            content="".join(node.content),
            html_content="".join(node.html_content),
            level=node.level,
            block_ids=list(node.block_ids),
            subsections=[self._freeze(child) for child in node.children],
        )


def aggregate_page_content(blocks: list[RawBlock]) -> PageContent:
    """Aggregate a page's blocks into flat text, HTML and sections.

    Content before the first heading only contributes to the flat text and
    HTML. A heading closes every open section of the same or a deeper level.

    Args:
        blocks: Depth-first flattened blocks of one page

    Returns:
        Aggregated page content; ``sections`` is empty when the page has no
        headings
    """
    builder = _SectionTreeBuilder()
    text_parts: list[str] = []
    html_parts: list[str] = []

    for block in blocks:
        extracted = extract_content(block)
        text_parts.append(extracted.plain_text + "\n")
        html_parts.append(extracted.html_content + "\n")

        if extracted.metadata.type == "heading":
            builder.open_heading(
                block.id, extracted.plain_text, extracted.metadata.level or 1
            )
        else:
            builder.append_body(block.id, extracted.plain_text, extracted.html_content)

    sections = builder.finish()
    full_text = "".join(text_parts).strip()

    logger.debug(
        f"Aggregated {len(blocks)} blocks into {len(sections)} top-level sections"
    )

    return PageContent(
        full_text=full_text,
        html_structure="".join(html_parts),
        sections=sections,
        content_hash=TextUtils.content_hash(full_text),
        word_count=TextUtils.count_words(full_text),
        character_count=TextUtils.count_characters(full_text),
    )


__all__ = ["aggregate_page_content"]

"""Block-related domain models (raw input from the Notion API)."""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class BlockType(str, Enum):
    """Block type tags handled by the content extractor."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    CODE = "code"
    QUOTE = "quote"
    CALLOUT = "callout"
    TABLE_ROW = "table_row"
    TOGGLE = "toggle"
    TO_DO = "to_do"
    DIVIDER = "divider"
    IMAGE = "image"
    VIDEO = "video"
    FILE = "file"
    BOOKMARK = "bookmark"
    LINK_PREVIEW = "link_preview"
    EQUATION = "equation"

    @classmethod
    def from_tag(cls, tag: str) -> "BlockType | None":
        """Resolve a raw type tag, returning None for unsupported tags."""
        try:
            return cls(tag)
        except ValueError:
            return None


class Annotations(BaseModel):
    """Formatting flags of a rich text run."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: str = "default"


class RichTextRun(BaseModel):
    """A span of text with uniform formatting."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    plain_text: str = ""
    annotations: Annotations = Field(default_factory=Annotations)
    href: str | None = None


class FileReference(BaseModel):
    """Hosted or external file location."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    url: str = ""


class Icon(BaseModel):
    """Block or page icon (emoji or file)."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = "emoji"
    emoji: str | None = None
    external: FileReference | None = None
    file: FileReference | None = None


class BlockPayload(BaseModel):
    """Type-specific content of a block.

    Only the fields read by the extractor are typed; anything else the API
    returns is kept as extra data so block rows can be stored losslessly.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    rich_text: list[RichTextRun] | None = None
    # child_page and child_database blocks send a plain string title
    title: str | list[RichTextRun] | None = None
    language: str | None = None
    checked: bool | None = None
    icon: Icon | None = None
    cells: list[list[RichTextRun]] | None = None
    url: str | None = None
    caption: list[RichTextRun] | None = None
    external: FileReference | None = None
    file: FileReference | None = None
    expression: str | None = None


class BlockParent(BaseModel):
    """Parent pointer of a block."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = "page_id"
    page_id: str | None = None
    block_id: str | None = None
    database_id: str | None = None


class RawBlock(BaseModel):
    """A single Notion block as delivered by the block source."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    has_children: bool = False
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False
    parent: BlockParent = Field(default_factory=BlockParent)
    payload: BlockPayload | None = None
    depth: int = Field(default=0, ge=0, description="Nesting depth in the page tree")

    @property
    def parent_block_id(self) -> str | None:
        """Id of the parent block, or None for top-level blocks."""
        if self.parent.type == "block_id":
            return self.parent.block_id
        return None

    @classmethod
    def from_notion(cls, data: dict, depth: int = 0) -> "RawBlock":
        """Build a block from the Notion API JSON shape.

        The API stores the typed payload under the key named by ``type``.
        Payloads that fail validation degrade to ``None`` instead of raising.
        """
        block_type = data.get("type", "unsupported")
        payload = None
        if isinstance(data.get(block_type), dict):
            try:
                payload = BlockPayload(**data[block_type])
            except ValidationError as e:
                logger.warning(
                    f"Dropping malformed {block_type} payload of block {data.get('id')}: {e.error_count()} error(s)"
                )
        return cls(
            id=data["id"],
            type=block_type,
            has_children=data.get("has_children", False),
            created_time=data.get("created_time"),
            last_edited_time=data.get("last_edited_time"),
            archived=data.get("archived", False),
            parent=BlockParent(**(data.get("parent") or {})),
            payload=payload,
            depth=depth,
        )

    def payload_dict(self) -> dict:
        """Payload as a plain dict for storage."""
        if self.payload is None:
            return {}
        return self.payload.model_dump(exclude_none=True)


class NotionPage(BaseModel):
    """Page-level properties of a Notion page."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    url: str | None = None
    parent: BlockParent | None = None
    icon: Icon | None = None
    cover: dict | None = None
    properties: dict = Field(default_factory=dict)
    created_time: str | None = None
    last_edited_time: str | None = None
    archived: bool = False

    @property
    def title(self) -> str:
        """Text of the first title property, or "Untitled"."""
        for prop in self.properties.values():
            if isinstance(prop, dict) and prop.get("type") == "title":
                runs = prop.get("title") or []
                return "".join(run.get("plain_text", "") for run in runs)
        return "Untitled"

    @property
    def cover_url(self) -> str | None:
        if not self.cover:
            return None
        source = self.cover.get(self.cover.get("type", ""), {})
        return source.get("url") if isinstance(source, dict) else None


class PageWithBlocks(BaseModel):
    """A page plus its depth-first flattened block list."""

    page: NotionPage
    blocks: list[RawBlock] = Field(default_factory=list)


__all__ = [
    "BlockType",
    "Annotations",
    "RichTextRun",
    "FileReference",
    "Icon",
    "BlockPayload",
    "BlockParent",
    "RawBlock",
    "NotionPage",
    "PageWithBlocks",
]

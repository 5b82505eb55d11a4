"""Content models derived from blocks: extracted text, sections and chunks."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ContentMetadata(BaseModel):
    """Descriptive metadata of an extracted block."""

    type: str
    level: int | None = Field(default=None, ge=1, le=3)
    list_type: Literal["bulleted", "numbered"] | None = None
    has_formatting: bool = False
    word_count: int = Field(default=0, ge=0)
    character_count: int = Field(default=0, ge=0)


class ExtractedContent(BaseModel):
    """Plain text and HTML rendition of a single block."""

    plain_text: str
    html_content: str
    content_hash: str
    metadata: ContentMetadata


class PageSection(BaseModel):
    """A heading plus everything up to the next heading of equal or lesser level."""

    id: str
    heading: str
    content: str = ""
    html_content: str = ""
    level: int = Field(ge=1)
    block_ids: list[str] = Field(default_factory=list)
    subsections: list["PageSection"] = Field(default_factory=list)

    def iter_sections(self):
        """Yield this section and all nested subsections depth-first."""
        yield self
        for subsection in self.subsections:
            yield from subsection.iter_sections()


class PageContent(BaseModel):
    """Aggregated content of a whole page."""

    full_text: str
    html_structure: str
    sections: list[PageSection] = Field(default_factory=list)
    content_hash: str
    word_count: int = Field(ge=0)
    character_count: int = Field(ge=0)


class ChunkMetadata(BaseModel):
    """Position of a chunk inside its page."""

    chunk_index: int = Field(ge=0)
    section: str | None = None
    block_ids: list[str] = Field(default_factory=list)
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)

    @field_validator("end_offset")
    @classmethod
    def validate_end_offset(cls, v: int, info) -> int:
        """Ensure end_offset >= start_offset."""
        start = info.data.get("start_offset")
        if start is not None and v < start:
            raise ValueError("end_offset must be >= start_offset")
        return v


class TextChunk(BaseModel):
    """A bounded piece of page text sized for embedding."""

    text: str
    metadata: ChunkMetadata


__all__ = [
    "ContentMetadata",
    "ExtractedContent",
    "PageSection",
    "PageContent",
    "ChunkMetadata",
    "TextChunk",
]

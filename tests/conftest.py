"""Shared fixtures for the unit tests."""

import pytest

from notion_native.models.domain import RawBlock

from tests.builders import text_block


@pytest.fixture
def sample_blocks() -> list[RawBlock]:
    """A small page: intro paragraph, then h1 A containing h2 B containing C."""
    return [
        text_block("b0", "paragraph", "Intro text"),
        text_block("b1", "heading_1", "A"),
        text_block("b2", "heading_2", "B"),
        text_block("b3", "paragraph", "C"),
    ]

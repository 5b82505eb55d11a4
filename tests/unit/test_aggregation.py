"""Unit tests for page content aggregation."""

from notion_native.core.text import aggregate_page_content
from notion_native.core.utils import TextUtils

from tests.builders import make_block, text_block


class TestSectionTree:
    """Test heading-based section nesting."""

    def test_nested_sections(self, sample_blocks):
        """Test h1 A / h2 B / p C nests as A > B > C."""
        content = aggregate_page_content(sample_blocks)

        assert len(content.sections) == 1
        section_a = content.sections[0]
        assert section_a.heading == "A"
        assert section_a.level == 1
        assert section_a.block_ids == ["b1"]
        assert section_a.content == ""

        assert len(section_a.subsections) == 1
        section_b = section_a.subsections[0]
        assert section_b.heading == "B"
        assert section_b.level == 2
        assert section_b.content == "C\n"
        assert section_b.html_content == "<p>C</p>\n"
        assert section_b.block_ids == ["b2", "b3"]

    def test_content_before_first_heading_is_not_sectioned(self, sample_blocks):
        content = aggregate_page_content(sample_blocks)
        all_block_ids = [
            block_id
            for section in content.sections
            for sub in section.iter_sections()
            for block_id in sub.block_ids
        ]
        assert "b0" not in all_block_ids
        assert content.full_text.startswith("Intro text")

    def test_same_level_headings_are_siblings(self):
        blocks = [
            text_block("h1", "heading_2", "First"),
            text_block("p1", "paragraph", "one"),
            text_block("h2", "heading_2", "Second"),
            text_block("p2", "paragraph", "two"),
        ]
        content = aggregate_page_content(blocks)

        assert [s.heading for s in content.sections] == ["First", "Second"]
        assert content.sections[0].content == "one\n"
        assert content.sections[1].content == "two\n"

    def test_higher_level_heading_closes_deeper_sections(self):
        blocks = [
            text_block("a", "heading_1", "A"),
            text_block("b", "heading_2", "B"),
            text_block("c", "heading_3", "C"),
            text_block("d", "heading_1", "D"),
            text_block("e", "heading_3", "E"),
        ]
        content = aggregate_page_content(blocks)

        assert [s.heading for s in content.sections] == ["A", "D"]
        b = content.sections[0].subsections[0]
        assert b.heading == "B"
        assert [s.heading for s in b.subsections] == ["C"]
        assert [s.heading for s in content.sections[1].subsections] == ["E"]

    def test_child_levels_exceed_parent_levels(self):
        blocks = [
            text_block("a", "heading_1", "A"),
            text_block("b", "heading_3", "B"),
            text_block("c", "heading_2", "C"),
        ]
        content = aggregate_page_content(blocks)

        def check(section):
            for sub in section.subsections:
                assert sub.level > section.level
                check(sub)

        for section in content.sections:
            check(section)
        assert [s.heading for s in content.sections[0].subsections] == ["B", "C"]

    def test_no_headings_means_no_sections(self):
        blocks = [text_block("p1", "paragraph", "one"), text_block("p2", "paragraph", "two")]
        content = aggregate_page_content(blocks)
        assert content.sections == []
        assert content.full_text == "one\ntwo"


class TestFlatContent:
    """Test flat text, HTML and derived counts."""

    def test_full_text_and_html(self, sample_blocks):
        content = aggregate_page_content(sample_blocks)

        assert content.full_text == "Intro text\nA\nB\nC"
        assert content.html_structure == "<p>Intro text</p>\n<h1>A</h1>\n<h2>B</h2>\n<p>C</p>\n"

    def test_counts_derive_from_full_text(self, sample_blocks):
        content = aggregate_page_content(sample_blocks)

        assert content.word_count == 5
        assert content.character_count == len(content.full_text)
        assert content.content_hash == TextUtils.content_hash(content.full_text)

    def test_empty_page(self):
        content = aggregate_page_content([])
        assert content.full_text == ""
        assert content.content_hash == "0"
        assert content.word_count == 0
        assert content.sections == []

    def test_blocks_without_payload_contribute_blank_lines(self):
        blocks = [
            text_block("a", "paragraph", "first"),
            make_block("b", "paragraph"),
            text_block("c", "paragraph", "last"),
        ]
        assert aggregate_page_content(blocks).full_text == "first\n\nlast"

    def test_aggregation_is_deterministic(self, sample_blocks):
        assert aggregate_page_content(sample_blocks) == aggregate_page_content(sample_blocks)

"""Unit tests for single-block content extraction."""

from notion_native.core.extraction import extract_content, render_run
from notion_native.models.domain import RichTextRun

from tests.builders import make_block, rich_text, text_block


class TestTextBlocks:
    """Test paragraph, heading, quote, toggle and list extraction."""

    def test_paragraph(self):
        result = extract_content(text_block("b1", "paragraph", "Hello world"))

        assert result.plain_text == "Hello world"
        assert result.html_content == "<p>Hello world</p>"
        assert result.metadata.type == "paragraph"
        assert result.metadata.word_count == 2
        assert result.metadata.character_count == 11
        assert result.metadata.has_formatting is False

    def test_headings_carry_level(self):
        for level in (1, 2, 3):
            result = extract_content(text_block("h", f"heading_{level}", "Title"))
            assert result.html_content == f"<h{level}>Title</h{level}>"
            assert result.metadata.type == "heading"
            assert result.metadata.level == level

    def test_quote(self):
        result = extract_content(text_block("q", "quote", "Wise words"))
        assert result.html_content == "<blockquote>Wise words</blockquote>"
        assert result.metadata.type == "quote"

    def test_toggle_has_no_container(self):
        result = extract_content(text_block("t", "toggle", "Details"))
        assert result.html_content == "Details"
        assert result.metadata.type == "toggle"

    def test_bulleted_list_item(self):
        result = extract_content(text_block("l", "bulleted_list_item", "Item"))
        assert result.html_content == "<li>Item</li>"
        assert result.metadata.type == "list_item"
        assert result.metadata.list_type == "bulleted"

    def test_numbered_list_item_keeps_escaped_formatting(self):
        block = make_block(
            "l",
            "numbered_list_item",
            {"rich_text": [rich_text("a<b", bold=True)]},
        )
        result = extract_content(block)
        assert result.plain_text == "a<b"
        assert result.html_content == "<li><strong>a&lt;b</strong></li>"
        assert result.metadata.list_type == "numbered"
        assert result.metadata.has_formatting is True

    def test_text_is_escaped(self):
        result = extract_content(text_block("p", "paragraph", "<script>&"))
        assert result.html_content == "<p>&lt;script&gt;&amp;</p>"
        assert result.plain_text == "<script>&"


class TestInlineFormatting:
    """Test annotation wrapping order and links."""

    def test_wrapping_order(self):
        run = RichTextRun.model_validate(
            rich_text(
                "x",
                href="https://example.com/?a=1&b=2",
                bold=True,
                italic=True,
                strikethrough=True,
                underline=True,
                code=True,
                color="red",
            )
        )
        html, formatted = render_run(run)

        assert formatted is True
        assert html == (
            '<a href="https://example.com/?a=1&amp;b=2" target="_blank" '
            'rel="noopener noreferrer"><span class="notion-red">'
            "<u><del><em><strong><code>x</code></strong></em></del></u></span></a>"
        )

    def test_default_color_is_not_wrapped(self):
        run = RichTextRun.model_validate(rich_text("plain"))
        assert render_run(run) == ("plain", False)

    def test_runs_are_concatenated(self):
        block = make_block(
            "p",
            "paragraph",
            {"rich_text": [rich_text("Hello "), rich_text("world", italic=True)]},
        )
        result = extract_content(block)
        assert result.plain_text == "Hello world"
        assert result.html_content == "<p>Hello <em>world</em></p>"
        assert result.metadata.has_formatting is True


class TestSpecialBlocks:
    """Test code, callout, table, to-do and divider extraction."""

    def test_code_ignores_annotations(self):
        block = make_block(
            "c",
            "code",
            {"rich_text": [rich_text("if a < b:", bold=True)], "language": "python"},
        )
        result = extract_content(block)
        assert result.plain_text == "if a < b:"
        assert result.html_content == (
            '<pre><code class="language-python">if a &lt; b:</code></pre>'
        )
        assert result.metadata.type == "code"
        assert result.metadata.has_formatting is True

    def test_code_default_language(self):
        result = extract_content(make_block("c", "code", {"rich_text": [rich_text("x")]}))
        assert 'class="language-text"' in result.html_content

    def test_callout_default_icon(self):
        result = extract_content(text_block("c", "callout", "Note"))
        assert result.html_content == (
            '<div class="notion-callout"><span class="callout-icon">💡</span>'
            '<div class="callout-content">Note</div></div>'
        )
        assert result.metadata.type == "callout"

    def test_callout_custom_icon(self):
        block = make_block(
            "c",
            "callout",
            {"rich_text": [rich_text("Warn")], "icon": {"type": "emoji", "emoji": "⚠️"}},
        )
        assert '<span class="callout-icon">⚠️</span>' in extract_content(block).html_content

    def test_table_row(self):
        block = make_block(
            "r",
            "table_row",
            {"cells": [[rich_text("a")], [rich_text("b", bold=True)], []]},
        )
        result = extract_content(block)
        assert result.plain_text == "a\tb"
        assert result.html_content == "<tr><td>a</td><td><strong>b</strong></td><td></td></tr>"
        assert result.metadata.type == "table_row"

    def test_to_do_checked(self):
        block = make_block(
            "t", "to_do", {"rich_text": [rich_text("Ship it")], "checked": True}
        )
        result = extract_content(block)
        assert result.plain_text == "☑️ Ship it"
        assert result.html_content == (
            '<div class="notion-todo"><input type="checkbox" checked disabled> Ship it</div>'
        )
        assert result.metadata.type == "todo"

    def test_to_do_unchecked(self):
        block = make_block("t", "to_do", {"rich_text": [rich_text("Later")]})
        result = extract_content(block)
        assert result.plain_text == "☐ Later"
        assert '<input type="checkbox" disabled>' in result.html_content

    def test_divider(self):
        result = extract_content(make_block("d", "divider", {}))
        assert result.plain_text == "---"
        assert result.html_content == '<hr class="notion-divider">'
        assert result.metadata.type == "divider"


class TestMediaBlocks:
    """Test image, video, file, bookmark and equation extraction."""

    def test_image_with_caption_is_escaped(self):
        block = make_block(
            "i",
            "image",
            {
                "type": "external",
                "external": {"url": 'https://x.test/a.png?"q"'},
                "caption": [rich_text("A <cat>")],
            },
        )
        result = extract_content(block)
        assert result.plain_text == "A <cat>"
        assert result.html_content == (
            '<figure class="notion-image"><img src="https://x.test/a.png?&quot;q&quot;" '
            'alt="A &lt;cat&gt;" loading="lazy"><figcaption>A &lt;cat&gt;</figcaption></figure>'
        )
        assert result.metadata.type == "image"

    def test_image_without_caption_uses_placeholder(self):
        block = make_block("i", "image", {"file": {"url": "https://x.test/b.png"}})
        assert extract_content(block).plain_text == "[IMAGE]"

    def test_video(self):
        block = make_block("v", "video", {"external": {"url": "https://x.test/v.mp4"}})
        result = extract_content(block)
        assert result.plain_text == "[VIDEO]"
        assert '<video src="https://x.test/v.mp4" controls><track kind="captions"></video>' in (
            result.html_content
        )

    def test_file_link(self):
        block = make_block("f", "file", {"file": {"url": "https://x.test/doc.pdf"}})
        result = extract_content(block)
        assert result.plain_text == "[FILE]"
        assert result.html_content == (
            '<div class="notion-file"><a href="https://x.test/doc.pdf" target="_blank" '
            'rel="noopener noreferrer">📎 Download file</a></div>'
        )

    def test_bookmark_uses_url_without_caption(self):
        block = make_block("b", "bookmark", {"url": "https://example.com"})
        result = extract_content(block)
        assert result.plain_text == "https://example.com"
        assert result.metadata.type == "bookmark"
        assert '<a href="https://example.com"' in result.html_content

    def test_link_preview_is_a_bookmark(self):
        block = make_block(
            "b", "link_preview", {"url": "https://example.com", "caption": [rich_text("Ex")]}
        )
        result = extract_content(block)
        assert result.plain_text == "Ex"
        assert result.metadata.type == "bookmark"

    def test_equation(self):
        result = extract_content(make_block("e", "equation", {"expression": "e=mc^2"}))
        assert result.plain_text == "e=mc^2"
        assert result.html_content == '<div class="notion-equation">$$e=mc^2$$</div>'


class TestDegradedInput:
    """Test fallback and missing-payload behavior."""

    def test_missing_payload_yields_empty_content(self):
        result = extract_content(make_block("p", "paragraph"))
        assert result.plain_text == ""
        assert result.html_content == ""
        assert result.content_hash == "0"
        assert result.metadata.type == "paragraph"

    def test_unknown_type_with_rich_text(self):
        block = make_block("s", "synced_block", {"rich_text": [rich_text("<x>")]})
        result = extract_content(block)
        assert result.plain_text == "<x>"
        assert result.html_content == '<div class="notion-synced_block">&lt;x&gt;</div>'
        assert result.metadata.type == "synced_block"

    def test_unknown_type_with_title(self):
        block = make_block("c", "child_page", {"title": [rich_text("Sub page")]})
        assert extract_content(block).plain_text == "Sub page"

    def test_child_page_string_title(self):
        block = make_block("c", "child_page", {"title": "Sub <page>"})
        result = extract_content(block)
        assert result.plain_text == "Sub <page>"
        assert result.html_content == '<div class="notion-child_page">Sub &lt;page&gt;</div>'
        assert block.payload_dict() == {"title": "Sub <page>"}

    def test_child_database_string_title(self):
        block = make_block("d", "child_database", {"title": "Tasks"})
        assert extract_content(block).plain_text == "Tasks"

    def test_malformed_payload_degrades_to_empty_content(self):
        block = make_block("p", "paragraph", {"rich_text": "not a list"})
        assert block.payload is None
        result = extract_content(block)
        assert result.plain_text == ""
        assert result.metadata.type == "paragraph"

    def test_unknown_type_without_text(self):
        result = extract_content(make_block("x", "breadcrumb", {}))
        assert result.plain_text == "[BREADCRUMB]"
        assert result.html_content == '<div class="notion-breadcrumb">[BREADCRUMB]</div>'

    def test_extraction_is_deterministic(self):
        block = text_block("p", "paragraph", "Same input")
        assert extract_content(block) == extract_content(block)

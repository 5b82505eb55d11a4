"""
Unit tests for text utility functions.
"""

from notion_native.core.utils import TextUtils


class TestContentHash:
    """Test the 32-bit rolling content hash."""

    def test_empty_text_hashes_to_zero(self):
        assert TextUtils.content_hash("") == "0"
        assert TextUtils.content_hash("   \n\t ") == "0"

    def test_known_values(self):
        """Test small inputs against hand-computed values."""
        assert TextUtils.content_hash("a") == "61"
        # 97 * 31 + 98
        assert TextUtils.content_hash("ab") == "c21"

    def test_hash_ignores_surrounding_whitespace(self):
        assert TextUtils.content_hash("  Hello world \n") == TextUtils.content_hash(
            "Hello world"
        )

    def test_hash_uses_utf16_code_units(self):
        """Test that astral characters count as two surrogate units."""
        # 0xD83D * 31 + 0xDE00
        assert TextUtils.content_hash("😀") == "1b0d63"

    def test_hash_wraps_to_32_bits(self):
        """Test that long inputs stay within 32 bits."""
        digest = TextUtils.content_hash("lorem ipsum dolor sit amet " * 200)
        assert len(digest) <= 8
        assert int(digest, 16) <= 0x80000000

    def test_hash_is_deterministic(self):
        text = "Deterministic content"
        assert TextUtils.content_hash(text) == TextUtils.content_hash(text)
        assert TextUtils.content_hash(text) != TextUtils.content_hash(text + "!")


class TestCounting:
    """Test word and character counting."""

    def test_count_words(self):
        assert TextUtils.count_words("Hello world") == 2
        assert TextUtils.count_words("  spaced   out\n\twords  ") == 3
        assert TextUtils.count_words("") == 0

    def test_count_characters(self):
        assert TextUtils.count_characters("Hello") == 5
        assert TextUtils.count_characters("") == 0


class TestEscapeHtml:
    """Test HTML escaping."""

    def test_escapes_all_special_characters(self):
        result = TextUtils.escape_html("<a href=\"x\">Tom & Jerry's</a>")
        assert result == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#039;s&lt;/a&gt;"
        )

    def test_plain_text_unchanged(self):
        assert TextUtils.escape_html("plain text") == "plain text"


class TestPrepareForEmbedding:
    """Test embedding text preparation."""

    def test_collapses_whitespace(self):
        assert TextUtils.prepare_for_embedding("  a\n\n b\t c  ") == "a b c"

    def test_truncates_to_max_chars(self):
        result = TextUtils.prepare_for_embedding("x" * 9000)
        assert len(result) == 8000

    def test_custom_max_chars(self):
        assert TextUtils.prepare_for_embedding("abcdef", max_chars=3) == "abc"

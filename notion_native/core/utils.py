"""
Common text utility functions.

Hashing, counting and escaping helpers shared by the extractor, the
aggregator and the embedding service.
"""

# Use standard logging to avoid circular import
import logging
import re

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s+")

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}


class TextUtils:
    """
    Text processing utility functions.

    All methods are pure and safe to call from any coroutine.
    """

    @staticmethod
    def content_hash(text: str) -> str:
        """
        Compute the 32-bit rolling content hash of a text.

        The hash runs ``h = h * 31 + unit`` over the UTF-16 code units of the
        stripped text, wrapping to a signed 32-bit integer after every step.
        It is meant for fast change detection only and is not collision
        resistant.

        Args:
            text: Text to hash

        Returns:
            Lowercase hex of the absolute hash value, "0" for blank text
        """
        normalized = text.strip()
        if not normalized:
            return "0"

        encoded = normalized.encode("utf-16-le")
        h = 0
        for i in range(0, len(encoded), 2):
            unit = encoded[i] | (encoded[i + 1] << 8)
            h = (h * 31 + unit) & 0xFFFFFFFF

        if h >= 0x80000000:
            h -= 0x100000000

        return format(abs(h), "x")

    @staticmethod
    def count_words(text: str) -> int:
        """
        Count whitespace-separated tokens in text.

        Args:
            text: Text to count words in

        Returns:
            Number of words
        """
        return len(text.split())

    @staticmethod
    def count_characters(text: str) -> int:
        return len(text)

    @staticmethod
    def escape_html(text: str) -> str:
        """Escape the five HTML-significant characters."""
        return "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)

    @staticmethod
    def prepare_for_embedding(text: str, max_chars: int = 8000) -> str:
        """
        Normalize text before sending it to an embedding model.

        Args:
            text: Raw text
            max_chars: Maximum length of the returned text

        Returns:
            Text with whitespace runs collapsed to one space, stripped and
            truncated to ``max_chars``
        """
        prepared = _WHITESPACE_RUN.sub(" ", text).strip()
        if len(prepared) > max_chars:
            logger.debug(
                f"Truncated text from {len(prepared)} to {max_chars} characters"
            )
            prepared = prepared[:max_chars]
        return prepared


__all__ = ["TextUtils"]

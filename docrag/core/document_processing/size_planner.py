"""
Adaptive chunk size planner.

Derives a chunk size from document length and sentence complexity, and an
overlap from the chunk size. Results are advisory: explicit sizes on an
ingestion request always win.

Dependencies: re
System role: Optional sizing step before segmentation
"""

import re

from ..exceptions import ConfigurationError

SHORT_DOCUMENT_WORDS = 500
LONG_DOCUMENT_WORDS = 2000
COMPLEX_SENTENCE_WORDS = 20

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")


class AdaptiveSizePlanner:
    """Plan chunk size and overlap in words."""

    def __init__(self, base_size: int = 200) -> None:
        """
        Initialize planner.

        Args:
            base_size: Base chunk size in words

        Raises:
            ConfigurationError: When base_size < 2
        """
        if base_size < 2:
            raise ConfigurationError("base_size must be >= 2", field="base_size")
        self._base_size = base_size

    @property
    def base_size(self) -> int:
        return self._base_size

    def plan_chunk_size(self, text: str) -> int:
        """
        Choose a chunk size for a document.

        Short documents get half the base size and long ones double it.
        In between, documents with long sentences get one and a half times
        the base size.

        Args:
            text: Full document text

        Returns:
            int: Chunk size in words
        """
        word_count = _count_words(text)
        if word_count < SHORT_DOCUMENT_WORDS:
            return self._base_size // 2
        if word_count > LONG_DOCUMENT_WORDS:
            return self._base_size * 2

        if _average_sentence_length(text) > COMPLEX_SENTENCE_WORDS:
            return self._base_size * 3 // 2

        return self._base_size

    def plan_overlap(self, unit_size: int) -> int:
        """
        Choose the overlap for a chunk size.

        Args:
            unit_size: Planned chunk size

        Returns:
            int: Overlap in words, always smaller than unit_size
        """
        if unit_size < 50:
            return unit_size // 5
        if unit_size < 150:
            return unit_size // 4
        if unit_size < 300:
            return unit_size // 3
        if unit_size < 500:
            return unit_size // 4
        return unit_size // 5

    def plan(self, texts: list[str]) -> tuple[int, int]:
        """Plan size and overlap for a document given as page texts."""
        chunk_size = self.plan_chunk_size("\n".join(texts))
        return chunk_size, self.plan_overlap(chunk_size)


def _count_words(text: str) -> int:
    return len(text.split())


def _average_sentence_length(text: str) -> int:
    sentences = _SENTENCE_SPLIT.split(text)
    total_words = sum(_count_words(sentence) for sentence in sentences)
    return total_words // max(len(sentences), 1)

"""
Tokenizers used to measure chunk sizes.

A tokenizer turns a line of text into countable units and back. The
segmenter and the token counts stored on records use the same tokenizer
so sizes are consistent across the pipeline.

Dependencies: None
System role: Pluggable unit measure for chunking
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Tokenizer(Protocol):
    """Capability to split text into units and rebuild text from units."""

    def encode(self, text: str) -> list[str]: ...

    def decode(self, units: list[str]) -> str: ...

    def count(self, text: str) -> int: ...


class WordTokenizer:
    """Whitespace-separated words."""

    def encode(self, text: str) -> list[str]:
        return text.split()

    def decode(self, units: list[str]) -> str:
        return " ".join(units)

    def count(self, text: str) -> int:
        return len(text.split())


class CharacterTokenizer:
    """Single characters, for callers that size chunks in characters."""

    def encode(self, text: str) -> list[str]:
        return list(text)

    def decode(self, units: list[str]) -> str:
        return "".join(units)

    def count(self, text: str) -> int:
        return len(text)

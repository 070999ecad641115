"""
Overlapping text segmentation.

Splits unit text into bounded chunks whose size is measured by a pluggable
tokenizer. Lines are the preferred cut points: a chunk ends on the last
line boundary inside its window when one lies past the overlap region,
otherwise exactly at the window end. Consecutive chunks share exactly
`overlap` units.

Dependencies: docrag.core.document_processing.tokenizers
System role: Second stage of the ingestion pipeline (pure, thread-safe)
"""

from .models import TextChunk
from .tokenizers import Tokenizer, WordTokenizer
from ..exceptions import ConfigurationError


class Segmenter:
    """Split text into overlapping chunks of at most `unit_size` units."""

    def __init__(
        self,
        unit_size: int,
        overlap: int,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        """
        Initialize segmenter with sizing parameters.

        Args:
            unit_size: Maximum chunk body size in tokenizer units
            overlap: Units shared by consecutive chunks
            tokenizer: Unit measure (WordTokenizer if None)

        Raises:
            ConfigurationError: When unit_size < 1, overlap < 0 or overlap >= unit_size
        """
        if unit_size < 1:
            raise ConfigurationError("unit_size must be >= 1", field="unit_size")
        if overlap < 0:
            raise ConfigurationError("overlap must be >= 0", field="overlap")
        if overlap >= unit_size:
            raise ConfigurationError(
                f"overlap ({overlap}) must be smaller than unit_size ({unit_size})",
                field="overlap",
            )

        self._unit_size = unit_size
        self._overlap = overlap
        self._tokenizer = tokenizer or WordTokenizer()

    @property
    def unit_size(self) -> int:
        return self._unit_size

    @property
    def overlap(self) -> int:
        return self._overlap

    @property
    def tokenizer(self) -> Tokenizer:
        return self._tokenizer

    def segment(
        self,
        text: str,
        header: str | None = None,
        source_unit_index: int = 0,
    ) -> list[TextChunk]:
        """
        Split text into chunks.

        Args:
            text: Unit text to split
            header: Prefix copied verbatim onto every chunk (not counted)
            source_unit_index: Unit the text came from

        Returns:
            list[TextChunk]: Chunks in production order, empty for blank text
        """
        if not text or not text.strip():
            return []

        units, line_of_unit, boundaries = self._encode_lines(text)
        total = len(units)
        if total == 0:
            return []

        prefix = header or ""
        chunks: list[TextChunk] = []
        start = 0

        while True:
            end = self._chunk_end(start, total, boundaries)
            chunks.append(
                TextChunk(
                    content=prefix + self._decode_span(units, line_of_unit, start, end),
                    source_unit_index=source_unit_index,
                    sequence_in_unit=len(chunks),
                    unit_count=end - start,
                )
            )
            if end >= total:
                break
            start = end - self._overlap

        return chunks

    def _encode_lines(self, text: str) -> tuple[list[str], list[int], list[int]]:
        """Encode line by line, remembering which line each unit belongs to."""
        units: list[str] = []
        line_of_unit: list[int] = []
        boundaries: list[int] = []

        for line_no, line in enumerate(text.splitlines()):
            encoded = self._tokenizer.encode(line)
            units.extend(encoded)
            line_of_unit.extend([line_no] * len(encoded))
            if encoded:
                boundaries.append(len(units))

        return units, line_of_unit, boundaries

    def _chunk_end(self, start: int, total: int, boundaries: list[int]) -> int:
        window_end = min(start + self._unit_size, total)
        if window_end == total:
            return total

        # A cut must leave the next chunk starting after this one
        floor = start + self._overlap
        best = None
        for boundary in boundaries:
            if boundary > window_end:
                break
            if boundary > floor:
                best = boundary
        return best if best is not None else window_end

    def _decode_span(
        self,
        units: list[str],
        line_of_unit: list[int],
        start: int,
        end: int,
    ) -> str:
        lines: list[str] = []
        current_line = line_of_unit[start]
        current: list[str] = []

        for i in range(start, end):
            if line_of_unit[i] != current_line:
                lines.append(self._tokenizer.decode(current))
                current = []
                current_line = line_of_unit[i]
            current.append(units[i])
        lines.append(self._tokenizer.decode(current))

        return "\n".join(lines)


def segment(
    text: str,
    unit_size: int,
    overlap: int,
    header: str | None = None,
    tokenizer: Tokenizer | None = None,
) -> list[TextChunk]:
    """
    Split text into overlapping chunks.

    Convenience wrapper around Segmenter for one-off calls.

    Raises:
        ConfigurationError: When the sizing parameters are invalid
    """
    return Segmenter(unit_size, overlap, tokenizer).segment(text, header=header)

"""Tests for overlapping text segmentation.

Covers:
- Empty, short and long inputs
- Overlap invariant and full coverage of the source text
- Line-boundary preference
- Header handling and tokenizer plugging
- Parameter validation
"""

import pytest

from conftest import words
from docrag.core.document_processing import CharacterTokenizer, Segmenter, WordTokenizer, segment
from docrag.core.exceptions import ConfigurationError


def _body_words(chunk, header: str = "") -> list[str]:
    return chunk.content[len(header):].split()


def _reconstruct(chunks, overlap: int, header: str = "") -> list[str]:
    """Concatenate chunk bodies, dropping each overlap region."""
    result = _body_words(chunks[0], header)
    for chunk in chunks[1:]:
        result.extend(_body_words(chunk, header)[overlap:])
    return result


# ============================================================================
# Basic Behaviour
# ============================================================================


class TestSegmentBasics:
    """Test edge-case inputs."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\n\t"])
    def test_blank_text_yields_no_chunks(self, text: str) -> None:
        """Should return an empty list for empty or whitespace input."""
        assert segment(text, unit_size=10, overlap=2) == []

    def test_short_text_yields_single_chunk(self) -> None:
        """Should return one chunk when the text is shorter than the chunk size."""
        chunks = segment("only a few words here", unit_size=100, overlap=10)

        assert len(chunks) == 1
        assert chunks[0].content == "only a few words here"
        assert chunks[0].sequence_in_unit == 0
        assert chunks[0].unit_count == 5

    def test_text_exactly_one_window(self) -> None:
        """Should not emit a trailing overlap-only chunk."""
        chunks = segment(words(100), unit_size=100, overlap=20)

        assert len(chunks) == 1
        assert chunks[0].unit_count == 100

    def test_sequence_numbers_are_monotonic(self) -> None:
        """Should number chunks 0..n-1 in production order."""
        chunks = Segmenter(30, 5).segment(words(200), source_unit_index=7)

        assert [c.sequence_in_unit for c in chunks] == list(range(len(chunks)))
        assert all(c.source_unit_index == 7 for c in chunks)


# ============================================================================
# Overlap and Coverage
# ============================================================================


class TestOverlapInvariant:
    """Test that consecutive chunks share exactly `overlap` units."""

    def test_250_units_size_100_overlap_20(self) -> None:
        """Should produce exactly 3 chunks where chunk 2 starts with units [80,100)."""
        source = words(250).split()

        chunks = segment(" ".join(source), unit_size=100, overlap=20)

        assert len(chunks) == 3
        assert chunks[1].content.split()[:20] == source[80:100]
        assert chunks[2].content.split()[:20] == source[160:180]
        assert chunks[2].content.split()[-1] == "w249"

    def test_chunk_bodies_never_exceed_unit_size(self) -> None:
        """Should cap every chunk body at unit_size units."""
        text = "\n".join(words(n, f"l{n}_") for n in (3, 17, 40, 1, 25, 60, 8))

        chunks = segment(text, unit_size=32, overlap=6)

        assert chunks
        assert all(c.unit_count <= 32 for c in chunks)
        assert all(len(c.content.split()) == c.unit_count for c in chunks)

    @pytest.mark.parametrize(
        ("unit_size", "overlap"),
        [(10, 0), (10, 3), (25, 24), (64, 16), (500, 100)],
    )
    def test_coverage_reconstructs_single_line(self, unit_size: int, overlap: int) -> None:
        """Should reconstruct the source when overlap regions are removed."""
        source = words(333).split()

        chunks = segment(" ".join(source), unit_size=unit_size, overlap=overlap)

        assert _reconstruct(chunks, overlap) == source

    def test_coverage_reconstructs_multiline(self) -> None:
        """Should reconstruct multi-line text cut on line boundaries."""
        lines = [words(n, f"p{i}_") for i, n in enumerate((12, 7, 30, 2, 19, 44, 5, 11))]
        source = " ".join(lines).split()

        chunks = segment("\n".join(lines), unit_size=40, overlap=8)

        assert _reconstruct(chunks, 8) == source

    def test_coverage_with_header(self) -> None:
        """Should prefix the header without counting it."""
        header = "manual.pdf\nPage: 3\n"
        source = words(120).split()

        chunks = segment(" ".join(source), unit_size=50, overlap=10, header=header)

        assert all(c.content.startswith(header) for c in chunks)
        assert all(c.unit_count <= 50 for c in chunks)
        assert _reconstruct(chunks, 10, header) == source


# ============================================================================
# Line Boundaries
# ============================================================================


class TestLineBoundaries:
    """Test that chunks prefer to end on line boundaries."""

    def test_ends_on_last_line_boundary_in_window(self) -> None:
        """Should cut after the third 30-word line instead of mid-line."""
        text = "\n".join(words(30, f"line{i}_") for i in range(5))

        chunks = segment(text, unit_size=100, overlap=10)

        assert len(chunks) == 2
        assert chunks[0].unit_count == 90
        assert chunks[0].content.count("\n") == 2
        assert chunks[1].content.split()[:10] == words(30, "line2_").split()[20:]

    def test_boundary_inside_overlap_region_is_ignored(self) -> None:
        """Should cut at the window end when the only boundary lies in the overlap region."""
        text = words(5, "a") + "\n" + words(200, "b")

        chunks = segment(text, unit_size=50, overlap=10)

        assert chunks[0].unit_count == 50

    def test_line_structure_is_preserved(self) -> None:
        """Should keep newlines between lines inside a chunk."""
        chunks = segment("alpha beta\ngamma delta\nepsilon", unit_size=10, overlap=2)

        assert chunks[0].content == "alpha beta\ngamma delta\nepsilon"


# ============================================================================
# Tokenizers
# ============================================================================


class TestTokenizers:
    """Test pluggable unit measures."""

    def test_character_tokenizer(self) -> None:
        """Should size chunks in characters."""
        chunks = segment("abcdefghij", unit_size=4, overlap=1, tokenizer=CharacterTokenizer())

        assert [c.content for c in chunks] == ["abcd", "defg", "ghij"]

    def test_word_tokenizer_round_trip(self) -> None:
        """Should count and rebuild whitespace words."""
        tokenizer = WordTokenizer()

        assert tokenizer.count("one  two\tthree") == 3
        assert tokenizer.decode(tokenizer.encode("one  two three")) == "one two three"


# ============================================================================
# Validation
# ============================================================================


class TestSegmenterValidation:
    """Test parameter validation at construction."""

    @pytest.mark.parametrize(
        ("unit_size", "overlap", "field"),
        [(0, 0, "unit_size"), (-5, 0, "unit_size"), (10, -1, "overlap"), (10, 10, "overlap"), (10, 15, "overlap")],
    )
    def test_invalid_parameters_raise(self, unit_size: int, overlap: int, field: str) -> None:
        """Should raise ConfigurationError naming the bad parameter."""
        with pytest.raises(ConfigurationError) as exc_info:
            Segmenter(unit_size, overlap)

        assert exc_info.value.details["field"] == field

    def test_function_form_validates_before_splitting(self) -> None:
        """Should reject bad parameters even for blank text."""
        with pytest.raises(ConfigurationError):
            segment("", unit_size=5, overlap=5)

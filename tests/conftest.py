"""
Shared test fixtures and configuration for entire test suite.

Provides: Fake embedder and extractor, in-memory store, settings, temp files
Dependencies: pytest, pytest-asyncio
System role: Test infrastructure and fixture management
"""

import asyncio
import hashlib
from pathlib import Path

import pytest

from docrag.boundary.vdb.memory_store import InMemoryVectorStore
from docrag.configs.ingestion import IngestionSettings
from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.document_processing import BatchIngestionCoordinator, SourceUnit
from docrag.core.exceptions import EmbeddingError
from docrag.core.retrieval_tools import RetrievalToolSurface
from docrag.core.scopes import ScopedCollectionRegistry

EMBEDDING_DIMENSION = 512


def words(count: int, prefix: str = "w") -> str:
    """Single-line text of `count` distinct words: w0 w1 w2 ..."""
    return " ".join(f"{prefix}{i}" for i in range(count))


class BagOfWordsEmbedder:
    """
    Deterministic embedder hashing words into buckets.

    Texts sharing words score high; texts with no common words score 0.
    Tracks concurrent in-flight calls and can be told to fail or stall.
    """

    def __init__(
        self,
        dimension: int = EMBEDDING_DIMENSION,
        delay: float = 0.0,
        fail_on: str | None = None,
    ) -> None:
        self.dimension = dimension
        self.delay = delay
        self.fail_on = fail_on
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail_on and self.fail_on in text.split():
                raise EmbeddingError(f"provider rejected text containing {self.fail_on}")
            vector = [0.0] * self.dimension
            for word in text.lower().split():
                bucket = int(hashlib.md5(word.encode()).hexdigest(), 16) % self.dimension
                vector[bucket] += 1.0
            return vector
        finally:
            self.in_flight -= 1


class FakeExtractor:
    """Extractor returning fixed units, or raising a fixed error."""

    def __init__(self, units: list[SourceUnit] | None = None, error: Exception | None = None) -> None:
        self.units = units or []
        self.error = error
        self.paths: list[str] = []

    def extract(self, path: str) -> list[SourceUnit]:
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return list(self.units)


def text_units(*page_texts: str) -> list[SourceUnit]:
    """Text units numbered from page 1."""
    return [SourceUnit(text=text, unit_index=number) for number, text in enumerate(page_texts, start=1)]


@pytest.fixture
def embedder() -> BagOfWordsEmbedder:
    return BagOfWordsEmbedder()


@pytest.fixture
def memory_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def vector_settings() -> VectorStoreSettings:
    return VectorStoreSettings(store_type="memory", embedding_provider="fake")


@pytest.fixture
def registry(vector_settings: VectorStoreSettings) -> ScopedCollectionRegistry:
    return ScopedCollectionRegistry(vector_settings)


@pytest.fixture
def ingestion_settings() -> IngestionSettings:
    """Small chunks, no pacing."""
    return IngestionSettings(
        batch_size=2,
        inter_batch_delay_ms=0,
        chunk_size=50,
        chunk_overlap=10,
    )


@pytest.fixture
def make_coordinator(embedder, memory_store, registry, ingestion_settings):
    """Factory building a coordinator around a FakeExtractor with the given units."""

    def _make(units=None, error=None, **kwargs) -> BatchIngestionCoordinator:
        options = {
            "extractor": FakeExtractor(units, error),
            "embedder": embedder,
            "vector_store": memory_store,
            "registry": registry,
            "settings": ingestion_settings,
        }
        options.update(kwargs)
        return BatchIngestionCoordinator(**options)

    return _make


@pytest.fixture
def tool_surface(embedder, memory_store, registry, vector_settings) -> RetrievalToolSurface:
    return RetrievalToolSurface(
        embedder=embedder,
        vector_store=memory_store,
        registry=registry,
        settings=vector_settings,
    )


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    """Two-page text file separated by a form feed."""
    path = tmp_path / "notes.txt"
    path.write_text(f"{words(30, 'first')}\f{words(20, 'second')}", encoding="utf-8")
    return path

"""Tests for the LangChain embedder adapter."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from docrag.boundary.embeddings import LangChainEmbedder, get_embeddings
from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.exceptions import ConfigurationError, EmbeddingError


class TestLangChainEmbedder:
    """Test embed() over LangChain models."""

    async def test_embeds_with_fixed_dimension(self) -> None:
        """Should return a deterministic vector of the model's size."""
        embedder = LangChainEmbedder(DeterministicFakeEmbedding(size=16))

        first = await embedder.embed("pump valve")
        second = await embedder.embed("pump valve")

        assert len(first) == 16
        assert first == second

    async def test_provider_failure_wrapped(self) -> None:
        """Should raise EmbeddingError when the provider fails."""
        model = MagicMock()
        model.aembed_query = AsyncMock(side_effect=RuntimeError("429 quota exceeded"))

        with pytest.raises(EmbeddingError) as exc_info:
            await LangChainEmbedder(model, max_attempts=3, retry_initial_wait=0).embed("text")

        assert "quota" in str(exc_info.value)
        assert model.aembed_query.await_count == 3

    async def test_transient_failure_retried(self) -> None:
        """Should succeed when a retry gets a vector."""
        model = MagicMock()
        model.aembed_query = AsyncMock(side_effect=[RuntimeError("503 unavailable"), [0.1, 0.2]])

        vector = await LangChainEmbedder(model, retry_initial_wait=0).embed("text")

        assert vector == [0.1, 0.2]
        assert model.aembed_query.await_count == 2

    async def test_empty_vector_rejected(self) -> None:
        """Should raise EmbeddingError for an empty response."""
        model = MagicMock()
        model.aembed_query = AsyncMock(return_value=[])

        with pytest.raises(EmbeddingError):
            await LangChainEmbedder(model, retry_initial_wait=0).embed("text")


class TestGetEmbeddings:
    """Test embedding model selection."""

    def test_fake_provider(self) -> None:
        """Should build deterministic fake embeddings of the configured size."""
        model = get_embeddings(VectorStoreSettings(embedding_provider="fake", embedding_dimension=24))

        assert isinstance(model, DeterministicFakeEmbedding)
        assert model.size == 24

    def test_invalid_provider(self) -> None:
        """Should reject unknown providers."""
        with pytest.raises(ConfigurationError) as exc_info:
            get_embeddings(VectorStoreSettings(embedding_provider="openai"))

        assert exc_info.value.details["field"] == "embedding_provider"


class TestFixedDimensionEmbeddings:
    """Test dimension pinning on the Gemini wrapper, provider calls patched."""

    @pytest.fixture
    def gemini(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "test-key")
        from docrag.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings

        return FixedDimensionEmbeddings(output_dimensionality=8)

    async def test_requests_configured_dimension(self, gemini) -> None:
        """Should always pass the pinned dimension to the provider."""
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        with patch.object(GoogleGenerativeAIEmbeddings, "aembed_query", AsyncMock(return_value=[0.5] * 8)) as call:
            vector = await gemini.aembed_query("pump")

        assert vector == [0.5] * 8
        assert call.await_args.kwargs["output_dimensionality"] == 8

    async def test_wrong_dimension_rejected(self, gemini) -> None:
        """Should fail instead of returning a vector of another size."""
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        with patch.object(GoogleGenerativeAIEmbeddings, "aembed_query", AsyncMock(return_value=[0.5] * 3072)):
            with pytest.raises(EmbeddingError):
                await LangChainEmbedder(gemini, max_attempts=1).embed("pump")

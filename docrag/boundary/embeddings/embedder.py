"""
Embedder adapter over LangChain embedding models.

Exposes the single async `embed` capability the pipeline needs, retries
transient provider failures with exponential backoff and maps the final
failure to EmbeddingError.

Dependencies: langchain_core, tenacity, docrag.boundary.embeddings.embeddings_wrapper
System role: Embedding generation for ingestion and search
"""

import logging

from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings
from tenacity import AsyncRetrying, stop_after_attempt, wait_exponential_jitter

from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.exceptions import ConfigurationError, EmbeddingError

logger = logging.getLogger(__name__)


class LangChainEmbedder:
    """Async embedder backed by any LangChain Embeddings model."""

    def __init__(
        self,
        embeddings: Embeddings,
        max_attempts: int = 3,
        retry_initial_wait: float = 1.0,
    ) -> None:
        """
        Initialize embedder.

        Args:
            embeddings: LangChain embedding model
            max_attempts: Provider calls per text before giving up
            retry_initial_wait: First backoff in seconds (0 retries immediately)
        """
        self._embeddings = embeddings
        self._max_attempts = max(1, max_attempts)
        self._retry_initial_wait = retry_initial_wait

    @property
    def embeddings(self) -> Embeddings:
        """Underlying LangChain model, shared with stores that need it."""
        return self._embeddings

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(
                initial=self._retry_initial_wait,
                max=30,
                jitter=self._retry_initial_wait,
            ),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:embed - Retry {retry_state.attempt_number}/{self._max_attempts} "
                f"after {type(retry_state.outcome.exception()).__name__}"
            ),
            reraise=True,
        )

    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Raises:
            EmbeddingError: When every provider attempt fails or no vector is returned
        """
        try:
            async for attempt in self._retrying():
                with attempt:
                    vector = await self._embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"{__name__}:embed - FAILED: {type(e).__name__}: {e}")
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e

        if not vector:
            raise EmbeddingError("Embedding provider returned an empty vector")
        return list(vector)


def get_embeddings(settings: VectorStoreSettings) -> Embeddings:
    """
    Build the embedding model named by settings.

    Raises:
        ConfigurationError: If the provider is unknown
    """
    provider = settings.embedding_provider.lower()

    if provider == "google":
        from docrag.boundary.embeddings.embeddings_wrapper import FixedDimensionEmbeddings

        logger.info(
            f"{__name__}:get_embeddings - Creating FixedDimensionEmbeddings with "
            f"model={settings.embedding_model}, dimension={settings.embedding_dimension}"
        )
        return FixedDimensionEmbeddings(
            model=settings.embedding_model,
            output_dimensionality=settings.embedding_dimension,
        )

    elif provider == "fake":
        logger.info(f"{__name__}:get_embeddings - Creating deterministic fake embeddings")
        return DeterministicFakeEmbedding(size=settings.embedding_dimension)

    else:
        raise ConfigurationError(
            f"Invalid embedding_provider: {provider}. Must be 'google' or 'fake'.",
            field="embedding_provider",
        )

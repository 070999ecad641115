"""
Vector store factory for selecting between in-memory and FAISS stores.

Depends on VECTOR_STORE_STORE_TYPE environment variable.
Provides consistent interface regardless of underlying implementation.

Dependencies: docrag.boundary.vdb, docrag.configs
System role: Vector store instantiation and selection
"""

import logging

from langchain_core.embeddings import Embeddings

from docrag.boundary.vdb.faiss_store import FAISSVectorStore
from docrag.boundary.vdb.memory_store import InMemoryVectorStore
from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_vector_store(
    settings: VectorStoreSettings,
    embeddings: Embeddings | None = None,
) -> InMemoryVectorStore | FAISSVectorStore:
    """
    Factory function to get vector store based on configuration.

    Args:
        settings: Vector store settings
        embeddings: Embedding model (required for FAISS index reloads)

    Returns:
        InMemoryVectorStore or FAISSVectorStore: Configured vector store instance

    Raises:
        ConfigurationError: If store_type is invalid or FAISS lacks embeddings
    """
    store_type = settings.store_type.lower()

    if store_type == "memory":
        logger.info(f"{__name__}:get_vector_store - Creating in-memory vector store")
        return InMemoryVectorStore()

    elif store_type == "faiss":
        if embeddings is None:
            raise ConfigurationError("FAISS vector store requires an embedding model", field="embeddings")
        logger.info(f"{__name__}:get_vector_store - Creating FAISS vector store at {settings.index_dir}")
        return FAISSVectorStore(index_dir=settings.index_dir, embeddings=embeddings)

    else:
        raise ConfigurationError(
            f"Invalid store_type: {store_type}. Must be 'memory' or 'faiss'.",
            field="store_type",
        )

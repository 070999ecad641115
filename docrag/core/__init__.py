"""
Core business logic module.

Contains chunking, ingestion, scoping, retrieval tools and lifecycle
cascades, plus the exception hierarchy shared by every layer.
"""

from docrag.core.exceptions import (
    ConfigurationError,
    DocRagException,
    DocumentProcessingError,
    EmbeddingError,
    ExtractionError,
    RetrievalError,
    StorageError,
)

__all__ = [
    "DocRagException",
    "ConfigurationError",
    "DocumentProcessingError",
    "ExtractionError",
    "EmbeddingError",
    "StorageError",
    "RetrievalError",
]

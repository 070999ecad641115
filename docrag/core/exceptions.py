"""
Exception hierarchy for the document ingestion and retrieval pipeline.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the package
"""

from typing import Any


class DocRagException(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(DocRagException):
    """Raised synchronously, before any I/O, when parameters are invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize configuration error.

        Args:
            message: Error message
            field: Name of the offending parameter
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentProcessingError(DocRagException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            source_path: Path of the document that failed
            details: Additional context
        """
        details = details or {}
        if source_path:
            details["source_path"] = source_path
        super().__init__(message, details)


class ExtractionError(DocumentProcessingError):
    """Raised when a source document is unreadable or corrupt. Fatal to the ingestion."""

    def __init__(
        self,
        message: str,
        source_path: str | None = None,
        file_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            message: Error message
            source_path: Path of the document
            file_type: Type of file that failed extraction
            details: Additional context
        """
        details = details or {}
        if file_type:
            details["file_type"] = file_type
        super().__init__(message, source_path, details)


class EmbeddingError(DocumentProcessingError):
    """Raised when embedding generation fails."""

    pass


class StorageError(DocRagException):
    """Raised when vector or file store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize storage error.

        Args:
            message: Error message
            operation: Operation that failed (upsert, query, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RetrievalError(DocRagException):
    """Raised when a scoped search cannot be served."""

    def __init__(
        self,
        message: str,
        scope: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if scope:
            details["scope"] = scope
        super().__init__(message, details)

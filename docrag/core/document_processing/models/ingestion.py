"""
Ingestion request and report models.

The request is validated by the coordinator before any I/O; the report is
the structured per-chunk outcome returned to the caller.

Dependencies: pydantic, docrag.core.scopes
System role: Input and output contract of the batch ingestion coordinator
"""

from datetime import timedelta
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from docrag.core.exceptions import ConfigurationError
from docrag.core.scopes import ScopeDescriptor


class IngestionState(str, Enum):
    """States of a single ingestion run."""

    EXTRACTING = "extracting"
    CHUNKING = "chunking"
    EMBEDDING_BATCH = "embedding_batch"
    STORED = "stored"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class IngestionRequest(BaseModel):
    """Document to ingest into one scope."""

    source_path: str = Field(description="Local path of the document")
    scope: ScopeDescriptor
    batch_size: int | None = Field(
        default=None,
        description="Chunks processed concurrently per batch (settings default if None)",
    )
    inter_batch_delay: timedelta | None = Field(
        default=None,
        description="Pause between batches (settings default if None)",
    )
    metadata: dict[str, Any] | None = Field(default=None, description="Extra record metadata")
    chunk_size: int | None = Field(default=None, description="Explicit chunk size, overrides planner")
    chunk_overlap: int | None = Field(default=None, description="Explicit overlap, overrides planner")
    file_name: str | None = Field(default=None, description="Display name used for citations")
    replace_existing: bool = Field(
        default=True,
        description="Delete earlier records of the same file in the scope first",
    )

    @property
    def display_name(self) -> str:
        """File name shown in citations, without a file:// prefix."""
        name = self.file_name or Path(self.source_path).name
        return name.removeprefix("file://")

    def validate_parameters(self) -> None:
        """
        Check numeric parameters.

        Raises:
            ConfigurationError: On batch_size < 1, negative delay or invalid chunk sizing
        """
        if self.batch_size is not None and self.batch_size < 1:
            raise ConfigurationError("batch_size must be >= 1", field="batch_size")
        if self.inter_batch_delay is not None and self.inter_batch_delay < timedelta(0):
            raise ConfigurationError("inter_batch_delay must not be negative", field="inter_batch_delay")
        if self.chunk_size is not None and self.chunk_size < 1:
            raise ConfigurationError("chunk_size must be >= 1", field="chunk_size")
        if self.chunk_overlap is not None and self.chunk_overlap < 0:
            raise ConfigurationError("chunk_overlap must be >= 0", field="chunk_overlap")
        if (
            self.chunk_size is not None
            and self.chunk_overlap is not None
            and self.chunk_overlap >= self.chunk_size
        ):
            raise ConfigurationError(
                "chunk_overlap must be smaller than chunk_size", field="chunk_overlap"
            )


class ChunkOutcome(BaseModel):
    """Result of embedding and storing one chunk."""

    key: str
    source_unit_index: int
    sequence_in_unit: int
    stored: bool
    error: str | None = None


class IngestionReport(BaseModel):
    """Structured result of one ingestion run."""

    source_path: str
    scope: ScopeDescriptor
    state: IngestionState
    chunk_size: int
    chunk_overlap: int
    total_chunks: int = 0
    stored_count: int = 0
    failed_count: int = 0
    replaced_count: int = Field(default=0, description="Earlier records removed by replace_existing")
    skipped_units: list[int] = Field(default_factory=list)
    outcomes: list[ChunkOutcome] = Field(default_factory=list)
    processing_time_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        """True when every produced chunk was stored."""
        return self.state is IngestionState.COMPLETED and self.failed_count == 0

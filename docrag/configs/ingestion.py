"""
Document ingestion configuration settings.

Controls batch sizing, inter-batch pacing, chunk sizing defaults and the
partial-failure policy of the ingestion coordinator.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline configuration
"""

import os

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from docrag.configs.base import BaseSettings

MAX_DEFAULT_BATCH_SIZE = 4


def default_batch_size() -> int:
    """Derive the default batch size from available parallelism, capped small."""
    return max(1, min(os.cpu_count() or 1, MAX_DEFAULT_BATCH_SIZE))


class IngestionSettings(BaseSettings):
    """Settings for the batch ingestion coordinator."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DOC_INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    batch_size: int = Field(
        default_factory=default_batch_size,
        ge=1,
        description="Maximum chunks embedded and stored concurrently per batch",
    )
    inter_batch_delay_ms: int = Field(
        default=100,
        ge=0,
        description="Pause between batches to stay under provider rate limits",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=250,
        ge=1,
        description="Default chunk size in tokenizer units when adaptive chunking is off",
    )
    chunk_overlap: int = Field(
        default=50,
        ge=0,
        description="Default overlap between consecutive chunks in tokenizer units",
    )
    adaptive_chunking: bool = Field(
        default=False,
        description="Derive chunk size and overlap from the document text",
    )
    base_chunk_size: int = Field(
        default=200,
        ge=2,
        description="Base chunk size in words used by the adaptive size planner",
    )

    fail_on_embedding_error: bool = Field(
        default=False,
        description="Abort the ingestion on the first embedding failure",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self

"""
Vector database schemas.

Pydantic models for stored records and search results.
Used for type-safe vector store interactions.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    """
    One stored chunk.

    scope_metadata always contains the scope filter keys of the partition the
    record was written to, so every scoped query and delete can match it.
    Records are never mutated; re-ingestion writes new records.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(description="Unique key within the partition")
    text: str = Field(description="Chunk content including header")
    embedding: list[float] = Field(description="Chunk embedding vector")
    scope_metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utc_now)
    reference_description: str | None = Field(default=None, description="Citation label")
    reference_link: str | None = Field(default=None, description="Citation link")
    token_count: int | None = Field(default=None, description="Chunk size in tokenizer units")

    def matches(self, filter: dict[str, str]) -> bool:
        """True when every filter key is present with an equal value."""
        return all(self.scope_metadata.get(key) == value for key, value in filter.items())


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    record: Record = Field(description="Matched record")
    similarity_score: float = Field(description="Cosine similarity (higher is closer)")

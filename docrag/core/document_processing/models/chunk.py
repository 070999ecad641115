"""
Text chunk model for document processing pipeline.

Dependencies: pydantic
System role: Segmenter output, embedded and discarded after storage
"""

from pydantic import BaseModel, ConfigDict, Field


class TextChunk(BaseModel):
    """Bounded span of unit text ready for embedding."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Header followed by the chunk body")
    source_unit_index: int = Field(description="Unit (page) the chunk was cut from")
    sequence_in_unit: int = Field(ge=0, description="Position of the chunk within its unit")
    unit_count: int = Field(ge=0, description="Body length in tokenizer units")

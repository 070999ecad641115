"""
Models for document processing pipeline.

Exports: SourceUnit, TextChunk, IngestionRequest, IngestionReport, ChunkOutcome, IngestionState
"""

from .chunk import TextChunk
from .ingestion import ChunkOutcome, IngestionReport, IngestionRequest, IngestionState
from .source_unit import SourceUnit

__all__ = [
    "SourceUnit",
    "TextChunk",
    "IngestionRequest",
    "IngestionReport",
    "ChunkOutcome",
    "IngestionState",
]

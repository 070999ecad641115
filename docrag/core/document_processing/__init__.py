"""
Document processing pipeline.

Chunking, sizing, key allocation and batch ingestion for scoped retrieval.

Usage:
    from docrag.core.document_processing import BatchIngestionCoordinator, IngestionRequest
    report = await coordinator.ingest(IngestionRequest(source_path="manual.pdf", scope=scope))
"""

from .coordinator import BatchIngestionCoordinator
from .key_generators import (
    ContentHashKeyGenerator,
    KeyGenerator,
    SequentialKeyGenerator,
    UuidKeyGenerator,
)
from .models import (
    ChunkOutcome,
    IngestionReport,
    IngestionRequest,
    IngestionState,
    SourceUnit,
    TextChunk,
)
from .segmenter import Segmenter, segment
from .size_planner import AdaptiveSizePlanner
from .tokenizers import CharacterTokenizer, Tokenizer, WordTokenizer

__all__ = [
    "AdaptiveSizePlanner",
    "BatchIngestionCoordinator",
    "CharacterTokenizer",
    "ChunkOutcome",
    "ContentHashKeyGenerator",
    "IngestionReport",
    "IngestionRequest",
    "IngestionState",
    "KeyGenerator",
    "Segmenter",
    "SequentialKeyGenerator",
    "SourceUnit",
    "TextChunk",
    "Tokenizer",
    "UuidKeyGenerator",
    "WordTokenizer",
    "segment",
]

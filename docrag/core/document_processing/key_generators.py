"""
Record key generators.

Keys must be unique within a partition. Every scope of one kind shares a
partition, so generators receive the scope and the document name and keep
keys of different scopes apart. The default is a random UUID; the
sequential and content-hash variants exist for deterministic tests and for
re-ingestion that overwrites identical chunks.

Dependencies: hashlib, uuid
System role: Key allocation for stored records
"""

import hashlib
import itertools
import threading
import uuid
from typing import Protocol

from .models import TextChunk


class KeyGenerator(Protocol):
    """Capability to allocate a record key for a chunk."""

    def generate(self, chunk: TextChunk, source: str = "", scope: str = "") -> str: ...


class UuidKeyGenerator:
    """Random UUID4 keys."""

    def generate(self, chunk: TextChunk, source: str = "", scope: str = "") -> str:
        return str(uuid.uuid4())


class SequentialKeyGenerator:
    """
    Counting keys: `<prefix>:<scope>:<source>-000001`, then `-000002`, ...

    The counter lives in the process. Scope and source are part of the key so
    a restarted process only reuses keys of the same document in the same
    scope, which replace_existing deletes before writing.
    """

    def __init__(self, prefix: str = "chunk", start: int = 1) -> None:
        self._prefix = prefix
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def generate(self, chunk: TextChunk, source: str = "", scope: str = "") -> str:
        with self._lock:
            value = next(self._counter)
        stem = ":".join(part for part in (self._prefix, scope, source) if part)
        return f"{stem}-{value:06d}"


class ContentHashKeyGenerator:
    """Deterministic keys from scope, source, chunk content and position."""

    def generate(self, chunk: TextChunk, source: str = "", scope: str = "") -> str:
        """
        Generate deterministic key.

        Args:
            chunk: Chunk to key
            source: Document identifier mixed into the hash
            scope: Scope the record is written to, e.g. `conversation:A`

        Returns:
            str: First 16 hex characters of SHA-256 over scope, content, source and position
        """
        hash_input = (
            f"{scope}:{chunk.content}:{source}:{chunk.source_unit_index}:{chunk.sequence_in_unit}"
        )
        return hashlib.sha256(hash_input.encode()).hexdigest()[:16]

"""
In-memory vector store.

Keeps records per partition in dictionaries and ranks them by cosine
similarity with numpy. Writers are serialized with an asyncio lock.
Used for tests and single-process deployments.

Dependencies: numpy, docrag.boundary.vdb.vector_schemas
System role: Default vector store
"""

import asyncio
import logging

import numpy as np

from docrag.boundary.vdb.vector_schemas import Record, VectorSearchResult
from docrag.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class InMemoryVectorStore:
    """Partitioned in-memory vector store with metadata filtering."""

    def __init__(self) -> None:
        self._partitions: dict[str, dict[str, Record]] = {}
        self._lock = asyncio.Lock()

    async def upsert(self, partition: str, record: Record) -> None:
        """
        Insert or replace a record by key.

        Raises:
            StorageError: When the embedding is empty or its dimension
                differs from records already in the partition
        """
        if not record.embedding:
            raise StorageError("Record embedding is empty", operation="upsert")

        async with self._lock:
            records = self._partitions.setdefault(partition, {})
            if records:
                dimension = len(next(iter(records.values())).embedding)
                if len(record.embedding) != dimension:
                    raise StorageError(
                        f"Embedding dimension {len(record.embedding)} does not match "
                        f"partition dimension {dimension}",
                        operation="upsert",
                        details={"partition": partition, "key": record.key},
                    )
            records[record.key] = record

        logger.debug(f"{__name__}:upsert - partition={partition}, key={record.key}")

    async def query(
        self,
        partition: str,
        filter: dict[str, str],
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]:
        """
        Rank matching records by cosine similarity.

        Returns:
            list[VectorSearchResult]: At most top_k results, best first
        """
        async with self._lock:
            candidates = [
                record
                for record in self._partitions.get(partition, {}).values()
                if record.matches(filter)
            ]

        if not candidates or top_k < 1:
            return []

        query_vector = np.asarray(vector, dtype=np.float32)
        try:
            matrix = np.asarray([record.embedding for record in candidates], dtype=np.float32)
            scores = matrix @ query_vector
        except ValueError as e:
            raise StorageError(f"Query vector dimension mismatch: {e}", operation="query") from e

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query_vector)
        scores = np.divide(scores, norms, out=np.zeros_like(scores), where=norms > 0)

        # Stable sort keeps insertion order among equal scores
        order = np.argsort(-scores, kind="stable")[:top_k]
        return [
            VectorSearchResult(record=candidates[i], similarity_score=float(scores[i]))
            for i in order
        ]

    async def delete(self, partition: str, filter: dict[str, str]) -> int:
        """
        Delete records matching the filter.

        Returns:
            int: Number of records removed (0 when nothing matched)
        """
        async with self._lock:
            records = self._partitions.get(partition, {})
            keys = [key for key, record in records.items() if record.matches(filter)]
            for key in keys:
                del records[key]

        logger.debug(f"{__name__}:delete - partition={partition}, filter={filter}, deleted={len(keys)}")
        return len(keys)

    def count(self, partition: str) -> int:
        """Number of records in a partition."""
        return len(self._partitions.get(partition, {}))

"""
FAISS vector store for local persistence.

Keeps one LangChain FAISS index per partition under an index directory and
persists it after every write. Vectors are L2-normalized and searched by
inner product, so scores are cosine similarities. Records are stored in the
document metadata so scoped queries can return them intact.

Dependencies: faiss-cpu, langchain_community, docrag.boundary.vdb.vector_schemas
System role: Local persistent vector store
"""

import asyncio
import logging
from pathlib import Path

import faiss
from langchain_community.docstore.in_memory import InMemoryDocstore
from langchain_community.vectorstores import FAISS
from langchain_community.vectorstores.utils import DistanceStrategy
from langchain_core.embeddings import Embeddings

from docrag.boundary.vdb.vector_schemas import Record, VectorSearchResult
from docrag.core.exceptions import StorageError

logger = logging.getLogger(__name__)

RECORD_KEY = "record"


class FAISSVectorStore:
    """
    FAISS vector store with one persisted index per partition.

    Indexes are created lazily on the first upsert, sized from the first
    embedding, and loaded from disk when present.
    """

    def __init__(self, index_dir: str, embeddings: Embeddings) -> None:
        """
        Initialize FAISS vector store.

        Args:
            index_dir: Directory holding one index per partition
            embeddings: Embedding model, required by FAISS to reload indexes
        """
        self._index_dir = Path(index_dir)
        self._index_dir.mkdir(parents=True, exist_ok=True)
        self._embeddings = embeddings
        self._stores: dict[str, FAISS] = {}
        self._lock = asyncio.Lock()
        logger.info(f"{__name__}:__init__ - index_dir={self._index_dir}")

    def _load(self, partition: str) -> FAISS | None:
        """Return the cached or persisted index for a partition, if any."""
        if partition in self._stores:
            return self._stores[partition]

        if not (self._index_dir / f"{partition}.faiss").exists():
            return None

        logger.info(f"{__name__}:_load - START: Loading partition {partition} from {self._index_dir}")
        store = FAISS.load_local(
            str(self._index_dir),
            self._embeddings,
            index_name=partition,
            allow_dangerous_deserialization=True,
            normalize_L2=True,
            distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
        )
        self._stores[partition] = store
        logger.info(f"{__name__}:_load - SUCCESS: {store.index.ntotal} vectors")
        return store

    def _create(self, partition: str, dimension: int) -> FAISS:
        logger.info(f"{__name__}:_create - Creating partition {partition} with dimension={dimension}")
        store = FAISS(
            embedding_function=self._embeddings,
            index=faiss.IndexFlatIP(dimension),
            docstore=InMemoryDocstore(),
            index_to_docstore_id={},
            normalize_L2=True,
            distance_strategy=DistanceStrategy.MAX_INNER_PRODUCT,
        )
        self._stores[partition] = store
        return store

    def _save(self, partition: str, store: FAISS) -> None:
        store.save_local(str(self._index_dir), index_name=partition)

    def _upsert_sync(self, partition: str, record: Record) -> None:
        store = self._load(partition) or self._create(partition, len(record.embedding))
        if store.index.d != len(record.embedding):
            raise StorageError(
                f"Embedding dimension {len(record.embedding)} does not match "
                f"partition dimension {store.index.d}",
                operation="upsert",
                details={"partition": partition, "key": record.key},
            )

        if record.key in store.index_to_docstore_id.values():
            store.delete(ids=[record.key])

        metadata = dict(record.scope_metadata)
        metadata[RECORD_KEY] = record.model_dump(mode="json", exclude={"embedding"})
        store.add_embeddings(
            text_embeddings=[(record.text, record.embedding)],
            metadatas=[metadata],
            ids=[record.key],
        )
        self._save(partition, store)

    def _query_sync(
        self,
        partition: str,
        filter: dict[str, str],
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]:
        store = self._load(partition)
        if store is None or store.index.ntotal == 0 or top_k < 1:
            return []

        # Fetch the whole partition before filtering so scoping never drops matches
        hits = store.similarity_search_with_score_by_vector(
            vector,
            k=top_k,
            filter=dict(filter) if filter else None,
            fetch_k=store.index.ntotal,
        )

        results = []
        for doc, score in hits:
            stored = doc.metadata.get(RECORD_KEY)
            if not stored:
                continue
            record = Record.model_validate({**stored, "embedding": list(vector)})
            results.append(VectorSearchResult(record=record, similarity_score=float(score)))
        return results

    def _delete_sync(self, partition: str, filter: dict[str, str]) -> int:
        store = self._load(partition)
        if store is None:
            return 0

        keys = [
            doc_id
            for doc_id in store.index_to_docstore_id.values()
            if _metadata_matches(store.docstore.search(doc_id), filter)
        ]
        if not keys:
            return 0

        store.delete(ids=keys)
        self._save(partition, store)
        return len(keys)

    async def upsert(self, partition: str, record: Record) -> None:
        """
        Insert or replace a record by key and persist the partition.

        Raises:
            StorageError: When the write or save fails
        """
        async with self._lock:
            try:
                await asyncio.to_thread(self._upsert_sync, partition, record)
            except StorageError:
                raise
            except Exception as e:
                logger.error(f"{__name__}:upsert - FAILED: {type(e).__name__}: {e}", exc_info=True)
                raise StorageError(f"FAISS upsert failed: {e}", operation="upsert") from e

    async def query(
        self,
        partition: str,
        filter: dict[str, str],
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]:
        """
        Search a partition by vector within a metadata filter.

        Returned records carry the query vector in place of their stored
        embedding; FAISS keeps only the normalized vector.
        """
        async with self._lock:
            try:
                return await asyncio.to_thread(self._query_sync, partition, filter, vector, top_k)
            except Exception as e:
                logger.error(f"{__name__}:query - FAILED: {type(e).__name__}: {e}", exc_info=True)
                raise StorageError(f"FAISS query failed: {e}", operation="query") from e

    async def delete(self, partition: str, filter: dict[str, str]) -> int:
        """Delete records matching the filter; returns the number removed."""
        async with self._lock:
            try:
                deleted = await asyncio.to_thread(self._delete_sync, partition, filter)
            except Exception as e:
                logger.error(f"{__name__}:delete - FAILED: {type(e).__name__}: {e}", exc_info=True)
                raise StorageError(f"FAISS delete failed: {e}", operation="delete") from e

        logger.info(f"{__name__}:delete - partition={partition}, filter={filter}, deleted={deleted}")
        return deleted


def _metadata_matches(doc: object, filter: dict[str, str]) -> bool:
    metadata = getattr(doc, "metadata", None) or {}
    return all(metadata.get(key) == value for key, value in filter.items())

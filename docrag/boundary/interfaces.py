"""
Collaborator capabilities consumed by the pipeline.

Concrete implementations live in the sibling packages (extractors,
embeddings, vdb, storage, vision); tests substitute small fakes.

Dependencies: typing
System role: Boundary contracts between core logic and external systems
"""

from typing import Protocol, runtime_checkable

from docrag.boundary.vdb.vector_schemas import Record, VectorSearchResult
from docrag.core.document_processing.models import SourceUnit


@runtime_checkable
class Extractor(Protocol):
    """Turns a document on disk into ordered source units. Blocking; run in a thread."""

    def extract(self, path: str) -> list[SourceUnit]: ...


@runtime_checkable
class Embedder(Protocol):
    """Maps text to a fixed-dimension vector."""

    async def embed(self, text: str) -> list[float]: ...


@runtime_checkable
class VectorStore(Protocol):
    """Partitioned vector storage with metadata filtering."""

    async def upsert(self, partition: str, record: Record) -> None: ...

    async def query(
        self,
        partition: str,
        filter: dict[str, str],
        vector: list[float],
        top_k: int,
    ) -> list[VectorSearchResult]: ...

    async def delete(self, partition: str, filter: dict[str, str]) -> int: ...


@runtime_checkable
class FileStore(Protocol):
    """Raw uploaded bytes grouped by folder. Blocking; run in a thread."""

    def delete_files_by_folder(self, folder: str) -> int: ...


@runtime_checkable
class VisionService(Protocol):
    """Transcribes or describes an image as text."""

    async def describe_image(self, image: bytes, mime_type: str) -> str: ...

"""
Document collection service.

Composition root for the pipeline: builds the extractor, embedder, vector
store, file store and optional vision service from settings and exposes
loading, searching, deletion, tool construction and lifecycle cascades
behind one object. Every collaborator can be injected instead.

Dependencies: docrag.core, docrag.boundary, docrag.configs
System role: Document management orchestration
"""

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

from langchain_core.tools import BaseTool

from docrag.boundary.embeddings import LangChainEmbedder, get_embeddings
from docrag.boundary.extractors import AutoExtractor
from docrag.boundary.interfaces import Embedder, Extractor, FileStore, VectorStore, VisionService
from docrag.boundary.storage import get_file_store
from docrag.boundary.vdb import VectorSearchResult, get_vector_store
from docrag.configs import Settings, get_settings
from docrag.core.document_processing import (
    BatchIngestionCoordinator,
    IngestionReport,
    IngestionRequest,
    KeyGenerator,
)
from docrag.core.lifecycle import CascadeResult, LifecycleBinder, SessionResolver
from docrag.core.retrieval_tools import RetrievalToolSurface
from docrag.core.scopes import ConversationScope, GlobalScope, ScopedCollectionRegistry, parse_scope
from docrag.observability.logger import configure_logging

logger = logging.getLogger(__name__)

ScopeLike = GlobalScope | ConversationScope | Mapping[str, Any]


class DocumentCollectionService:
    """
    Document collection orchestrator.

    Handles the document lifecycle across both scopes: load, search,
    delete, tool construction and conversation cleanup.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        extractor: Extractor | None = None,
        embedder: Embedder | None = None,
        vector_store: VectorStore | None = None,
        file_store: FileStore | None = None,
        vision_service: VisionService | None = None,
        key_generator: KeyGenerator | None = None,
        session_resolver: SessionResolver | None = None,
    ) -> None:
        """
        Initialize service, building missing collaborators from settings.

        Args:
            settings: Application settings (cached environment settings if None)
            extractor: Document extractor (suffix dispatch if None)
            embedder: Text embedder (configured embedding provider if None)
            vector_store: Vector store (configured store type if None)
            file_store: Raw file store (configured backend if None)
            vision_service: Image-to-text service (Gemini when vision is enabled)
            key_generator: Record key allocation (random UUIDs if None)
            session_resolver: Session to conversation mapping (identity if None)
        """
        self._settings = settings or get_settings()

        embeddings = None
        if embedder is None or vector_store is None:
            embeddings = get_embeddings(self._settings.vector_store)
        self._embedder = embedder or LangChainEmbedder(embeddings)
        self._vector_store = vector_store or get_vector_store(self._settings.vector_store, embeddings)
        self._file_store = file_store or get_file_store(self._settings.file_storage)

        if vision_service is None and self._settings.vision.enabled:
            from docrag.boundary.vision import GeminiVisionService

            vision_service = GeminiVisionService(model_name=self._settings.vision.model)

        self._registry = ScopedCollectionRegistry(self._settings.vector_store)
        self._coordinator = BatchIngestionCoordinator(
            extractor=extractor or AutoExtractor(extract_pdf_images=self._settings.vision.extract_pdf_images),
            embedder=self._embedder,
            vector_store=self._vector_store,
            registry=self._registry,
            settings=self._settings.ingestion,
            key_generator=key_generator,
            vision_service=vision_service,
        )
        self._tool_surface = RetrievalToolSurface(
            embedder=self._embedder,
            vector_store=self._vector_store,
            registry=self._registry,
            settings=self._settings.vector_store,
            coordinator=self._coordinator,
        )
        self._lifecycle = LifecycleBinder(
            tool_surface=self._tool_surface,
            file_store=self._file_store,
            session_resolver=session_resolver,
        )
        logger.info(
            f"{__name__}:__init__ - store={type(self._vector_store).__name__}, "
            f"file_store={type(self._file_store).__name__}, vision={vision_service is not None}"
        )

    @property
    def tool_surface(self) -> RetrievalToolSurface:
        return self._tool_surface

    @property
    def lifecycle(self) -> LifecycleBinder:
        return self._lifecycle

    async def load_document(
        self,
        source_path: str,
        scope: ScopeLike,
        file_name: str | None = None,
        metadata: dict[str, Any] | None = None,
        batch_size: int | None = None,
        inter_batch_delay: timedelta | None = None,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
    ) -> IngestionReport:
        """
        Ingest one document into a scope.

        Returns:
            IngestionReport: Per-chunk outcomes; check failed_count to decide on a re-run

        Raises:
            ConfigurationError: Invalid scope or batching parameters
            ExtractionError: Unreadable document
        """
        request = IngestionRequest(
            source_path=source_path,
            scope=parse_scope(scope),
            file_name=file_name,
            metadata=metadata,
            batch_size=batch_size,
            inter_batch_delay=inter_batch_delay,
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
        )
        return await self._tool_surface.load_document(request)

    async def search(
        self,
        scope: ScopeLike,
        query_text: str,
        top_k: int | None = None,
    ) -> list[VectorSearchResult]:
        return await self._tool_surface.search(scope, query_text, top_k)

    async def delete_document(self, scope: ScopeLike, file_name: str) -> int:
        """Delete every record of one file within a scope."""
        return await self._tool_surface.delete(scope, {"file_name": file_name.removeprefix("file://")})

    async def delete_documents(self, scope: ScopeLike) -> int:
        """Delete every record in a scope."""
        return await self._tool_surface.delete_all(scope)

    def get_tools(self, scope: ScopeLike) -> list[BaseTool]:
        """Fresh LLM tools for one request."""
        return self._tool_surface.as_callable_tools(scope)

    async def on_conversation_deleted(self, conversation_id: str) -> CascadeResult:
        return await self._lifecycle.on_conversation_deleted(conversation_id)

    async def on_session_deleted(self, session_id: str) -> CascadeResult:
        return await self._lifecycle.on_session_deleted(session_id)


def create_document_collection_service(
    settings: Settings | None = None,
    **collaborators: Any,
) -> DocumentCollectionService:
    """
    Application startup: apply the configured log level, then build the service.

    Args:
        settings: Application settings (cached environment settings if None)
        **collaborators: Passed through to DocumentCollectionService

    Returns:
        DocumentCollectionService: Ready-to-use service
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    logger.info(f"{__name__}:create_document_collection_service - log_level={settings.log_level}")
    return DocumentCollectionService(settings=settings, **collaborators)

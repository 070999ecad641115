"""
Retrieval tool surface.

Scoped search and deletion over the vector store, plus the LangChain tools
handed to a function-calling chat model for one request. Every operation
resolves its scope through the registry so results and deletions never
cross scopes.

Dependencies: langchain_core.tools, docrag.core.scopes
System role: Seam between the RAG pipeline and the chat orchestrator
"""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from langchain_core.tools import BaseTool, tool

from docrag.boundary.interfaces import Embedder, VectorStore
from docrag.boundary.vdb.vector_schemas import VectorSearchResult
from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.exceptions import ConfigurationError, EmbeddingError, RetrievalError
from docrag.core.scopes import (
    ConversationScope,
    GlobalScope,
    ScopedCollectionRegistry,
    parse_scope,
)

if TYPE_CHECKING:
    from docrag.core.document_processing import (
        BatchIngestionCoordinator,
        IngestionReport,
        IngestionRequest,
    )

logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No relevant documents found."
IMAGE_SOURCE_FILTER = {"source_type": "image"}


def format_results(results: list[VectorSearchResult]) -> str:
    """
    Render search results as a citation block for a chat model.

    Args:
        results: Ranked search results

    Returns:
        str: One delimited block per result, or a fixed message when empty
    """
    if not results:
        return NO_RESULTS_MESSAGE

    formatted_chunks = []
    for result in results:
        record = result.record
        chunk_text = f"""---
key: {record.key}
file_name: {record.scope_metadata.get("file_name", "")}
page: {record.scope_metadata.get("page", "")}
reference: {record.reference_description or ""}
link: {record.reference_link or ""}
relevance_score: {result.similarity_score:.3f}

{record.text}
---"""
        formatted_chunks.append(chunk_text)

    return "\n".join(formatted_chunks)


class RetrievalToolSurface:
    """Scoped search, deletion and tool construction."""

    def __init__(
        self,
        embedder: Embedder,
        vector_store: VectorStore,
        registry: ScopedCollectionRegistry | None = None,
        settings: VectorStoreSettings | None = None,
        coordinator: "BatchIngestionCoordinator | None" = None,
    ) -> None:
        """
        Initialize tool surface.

        Args:
            embedder: Embeds query text
            vector_store: Partitioned record storage
            registry: Scope resolver (built from settings if None)
            settings: Search defaults and limits (defaults if None)
            coordinator: Ingestion coordinator behind load_document
        """
        self._settings = settings or VectorStoreSettings()
        self._embedder = embedder
        self._vector_store = vector_store
        self._registry = registry or ScopedCollectionRegistry(self._settings)
        self._coordinator = coordinator

    async def search(
        self,
        scope: GlobalScope | ConversationScope | Mapping[str, Any],
        query_text: str,
        top_k: int | None = None,
        match_metadata: Mapping[str, Any] | None = None,
    ) -> list[VectorSearchResult]:
        """
        Search records within one scope.

        Args:
            scope: Scope descriptor
            query_text: Natural-language query
            top_k: Result count (settings default if None, capped at max_top_k)
            match_metadata: Extra metadata the records must match

        Returns:
            list[VectorSearchResult]: Results above the similarity threshold, best first

        Raises:
            ConfigurationError: On invalid scope or top_k < 1
            RetrievalError: When the query cannot be embedded
            StorageError: When the vector store fails
        """
        scope = parse_scope(scope)
        top_k = self._settings.top_k if top_k is None else top_k
        if top_k < 1:
            raise ConfigurationError("top_k must be >= 1", field="top_k")
        top_k = min(top_k, self._settings.max_top_k)

        if not query_text or not query_text.strip():
            return []

        handle = self._registry.resolve(scope)
        logger.info(f"{__name__}:search - START scope={scope}, query_len={len(query_text)}, top_k={top_k}")

        try:
            vector = await self._embedder.embed(query_text)
        except EmbeddingError as e:
            raise RetrievalError(f"Failed to embed query: {e}", scope=str(scope)) from e

        results = await self._vector_store.query(
            handle.partition,
            handle.merged_filter(match_metadata),
            vector,
            top_k,
        )
        threshold = self._settings.similarity_threshold
        if threshold > 0:
            results = [result for result in results if result.similarity_score >= threshold]

        logger.info(f"{__name__}:search - END {len(results)} results")
        return results

    async def delete(
        self,
        scope: GlobalScope | ConversationScope | Mapping[str, Any],
        match_metadata: Mapping[str, Any] | None = None,
    ) -> int:
        """
        Delete records in a scope matching extra metadata.

        Idempotent: deleting absent records returns 0.

        Returns:
            int: Number of records removed
        """
        scope = parse_scope(scope)
        handle = self._registry.resolve(scope)
        deleted = await self._vector_store.delete(handle.partition, handle.merged_filter(match_metadata))
        logger.info(f"{__name__}:delete - scope={scope}, match={dict(match_metadata or {})}, deleted={deleted}")
        return deleted

    async def delete_all(self, scope: GlobalScope | ConversationScope | Mapping[str, Any]) -> int:
        """Delete every record in a scope; returns the number removed."""
        return await self.delete(scope)

    async def load_document(self, request: "IngestionRequest") -> "IngestionReport":
        """
        Ingest a document through the configured coordinator.

        Raises:
            ConfigurationError: When no coordinator was provided
        """
        if self._coordinator is None:
            raise ConfigurationError("No ingestion coordinator configured", field="coordinator")
        return await self._coordinator.ingest(request)

    def as_callable_tools(
        self,
        scope: GlobalScope | ConversationScope | Mapping[str, Any],
    ) -> list[BaseTool]:
        """
        Build fresh tools bound to one scope.

        Global scopes get `search_documents`; conversation scopes get
        `search_conversation_documents` and `analyze_image_content`.

        Returns:
            list[BaseTool]: Tools taking `{query: str}` and returning cited text
        """
        scope = parse_scope(scope)
        if isinstance(scope, GlobalScope):
            return [self._create_search_tool(scope)]
        return [
            self._create_conversation_search_tool(scope),
            self._create_image_tool(scope),
        ]

    def _create_search_tool(self, scope: GlobalScope) -> BaseTool:
        surface = self

        @tool
        async def search_documents(query: str) -> str:
            """Search the shared reference documents (manuals, policies) for relevant passages.

            Returns matching passages with file name, page and relevance score for citation.
            """
            return await surface._run_tool("search_documents", scope, query)

        return search_documents

    def _create_conversation_search_tool(self, scope: ConversationScope) -> BaseTool:
        surface = self

        @tool
        async def search_conversation_documents(query: str) -> str:
            """Search the documents attached to this conversation for relevant passages.

            Returns matching passages with file name, page and relevance score for citation.
            """
            return await surface._run_tool("search_conversation_documents", scope, query)

        return search_conversation_documents

    def _create_image_tool(self, scope: ConversationScope) -> BaseTool:
        surface = self

        @tool
        async def analyze_image_content(query: str) -> str:
            """Search the text transcribed from images attached to this conversation.

            Use this for questions about pictures, scans or screenshots the user uploaded.
            """
            return await surface._run_tool(
                "analyze_image_content", scope, query, match_metadata=IMAGE_SOURCE_FILTER
            )

        return analyze_image_content

    async def _run_tool(
        self,
        name: str,
        scope: GlobalScope | ConversationScope,
        query: str,
        match_metadata: Mapping[str, Any] | None = None,
    ) -> str:
        logger.info(f"{__name__}:{name} - START query_len={len(query)}")
        try:
            results = await self.search(scope, query, match_metadata=match_metadata)
        except Exception as e:
            logger.error(f"{__name__}:{name} - search FAILED: {type(e).__name__}: {e}")
            raise

        if not results:
            logger.warning(f"{__name__}:{name} - No results found")

        output = format_results(results)
        logger.info(f"{__name__}:{name} - END output_len={len(output)}")
        return output

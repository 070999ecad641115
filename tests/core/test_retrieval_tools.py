"""Tests for the retrieval tool surface."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.tools import BaseTool

from docrag.boundary.vdb.vector_schemas import Record, VectorSearchResult
from docrag.configs.vector_store import VectorStoreSettings
from docrag.core.exceptions import ConfigurationError, EmbeddingError, RetrievalError
from docrag.core.retrieval_tools import NO_RESULTS_MESSAGE, RetrievalToolSurface, format_results
from docrag.core.scopes import ConversationScope, GlobalScope

CONV_A = ConversationScope(conversation_id="A")
CONV_B = ConversationScope(conversation_id="B")
MANUALS = GlobalScope(category_id="manuals")


async def _store(surface_store, embedder, partition, key, text, **metadata) -> Record:
    record = Record(
        key=key,
        text=text,
        embedding=await embedder.embed(text),
        scope_metadata={k: str(v) for k, v in metadata.items()},
        reference_description=f"{metadata.get('file_name', 'doc')}#page=1",
    )
    await surface_store.upsert(partition, record)
    return record


@pytest.fixture
async def seeded(memory_store, embedder):
    """Two conversations and one category with overlapping vocabulary."""
    await _store(memory_store, embedder, "conversation_documents", "a1", "pump valve pressure", conversation_id="A", file_name="a.pdf", source_type="text")
    await _store(memory_store, embedder, "conversation_documents", "a2", "pump wiring diagram", conversation_id="A", file_name="a.png", source_type="image")
    await _store(memory_store, embedder, "conversation_documents", "b1", "pump valve pressure", conversation_id="B", file_name="b.pdf", source_type="text")
    await _store(memory_store, embedder, "global_documents", "g1", "pump valve maintenance manual", category="manuals", file_name="m.pdf")
    return memory_store


# ============================================================================
# Search
# ============================================================================


class TestSearch:
    """Test scoped search."""

    async def test_scope_isolation(self, tool_surface, seeded) -> None:
        """Should never return another conversation's records, however similar."""
        results = await tool_surface.search(CONV_B, "pump valve pressure", top_k=10)

        assert [r.record.key for r in results] == ["b1"]

    async def test_results_ranked_by_similarity(self, tool_surface, seeded) -> None:
        """Should return the closest record first."""
        results = await tool_surface.search(CONV_A, "pump valve pressure", top_k=10)

        assert [r.record.key for r in results] == ["a1", "a2"]
        assert results[0].similarity_score > results[1].similarity_score

    async def test_global_scope_search(self, tool_surface, seeded) -> None:
        """Should search only the category's records."""
        results = await tool_surface.search(MANUALS, "pump valve")

        assert [r.record.key for r in results] == ["g1"]

    async def test_search_accepts_tagged_dict(self, tool_surface, seeded) -> None:
        """Should accept a scope given as a plain dict."""
        results = await tool_surface.search({"kind": "conversation", "conversation_id": "B"}, "pump")

        assert [r.record.key for r in results] == ["b1"]

    async def test_search_does_not_mutate(self, tool_surface, seeded) -> None:
        """Should leave the store unchanged."""
        await tool_surface.search(CONV_A, "pump")

        assert seeded.count("conversation_documents") == 3

    async def test_blank_query_returns_nothing(self, tool_surface, seeded) -> None:
        """Should return no results for an empty query."""
        assert await tool_surface.search(CONV_A, "   ") == []

    async def test_top_k_validation(self, tool_surface) -> None:
        """Should reject top_k below 1."""
        with pytest.raises(ConfigurationError):
            await tool_surface.search(CONV_A, "pump", top_k=0)

    async def test_top_k_capped(self, embedder) -> None:
        """Should cap top_k at the configured maximum."""
        store = MagicMock()
        store.query = AsyncMock(return_value=[])
        surface = RetrievalToolSurface(embedder, store, settings=VectorStoreSettings(max_top_k=50))

        await surface.search(CONV_A, "pump", top_k=500)

        assert store.query.await_args.args[3] == 50

    async def test_similarity_threshold(self, embedder, seeded) -> None:
        """Should drop results below the threshold."""
        surface = RetrievalToolSurface(embedder, seeded, settings=VectorStoreSettings(similarity_threshold=0.99))

        results = await surface.search(CONV_A, "pump valve pressure", top_k=10)

        assert [r.record.key for r in results] == ["a1"]

    async def test_embedding_failure_raises_retrieval_error(self, memory_store) -> None:
        """Should wrap query embedding failures."""
        failing = MagicMock()
        failing.embed = AsyncMock(side_effect=EmbeddingError("quota exceeded"))
        surface = RetrievalToolSurface(failing, memory_store)

        with pytest.raises(RetrievalError) as exc_info:
            await surface.search(CONV_A, "pump")

        assert exc_info.value.details["scope"] == "conversation:A"


# ============================================================================
# Delete
# ============================================================================


class TestDelete:
    """Test scoped, idempotent deletion."""

    async def test_delete_all_is_idempotent(self, tool_surface, seeded) -> None:
        """Should return a positive count once, then zero, without error."""
        assert await tool_surface.delete_all(CONV_A) == 2
        assert await tool_surface.delete_all(CONV_A) == 0

    async def test_delete_all_leaves_other_scopes(self, tool_surface, seeded) -> None:
        """Should keep other conversations and the global partition intact."""
        await tool_surface.delete_all(CONV_A)

        assert [r.record.key for r in await tool_surface.search(CONV_B, "pump")] == ["b1"]
        assert seeded.count("global_documents") == 1

    async def test_delete_by_metadata(self, tool_surface, seeded) -> None:
        """Should delete only records matching the extra metadata."""
        assert await tool_surface.delete(CONV_A, {"file_name": "a.png"}) == 1
        assert await tool_surface.delete(CONV_A, {"file_name": "a.png"}) == 0
        assert [r.record.key for r in await tool_surface.search(CONV_A, "pump")] == ["a1"]

    async def test_delete_cannot_escape_scope(self, tool_surface, seeded) -> None:
        """Should ignore attempts to override the scope key through metadata."""
        assert await tool_surface.delete(CONV_A, {"conversation_id": "B"}) == 2
        assert [r.record.key for r in await tool_surface.search(CONV_B, "pump")] == ["b1"]


# ============================================================================
# Tools
# ============================================================================


class TestCallableTools:
    """Test LangChain tool construction."""

    def test_global_scope_tools(self, tool_surface) -> None:
        """Should expose a single search_documents tool."""
        tools = tool_surface.as_callable_tools(MANUALS)

        assert [t.name for t in tools] == ["search_documents"]
        assert all(isinstance(t, BaseTool) for t in tools)

    def test_conversation_scope_tools(self, tool_surface) -> None:
        """Should expose conversation search and image analysis tools."""
        tools = tool_surface.as_callable_tools(CONV_A)

        assert [t.name for t in tools] == ["search_conversation_documents", "analyze_image_content"]

    def test_tool_input_schema_is_query_only(self, tool_surface) -> None:
        """Should declare a single string query argument."""
        for tool in tool_surface.as_callable_tools(CONV_A):
            assert list(tool.args) == ["query"]
            assert tool.args["query"]["type"] == "string"

    def test_tools_are_fresh_per_call(self, tool_surface) -> None:
        """Should build new tool objects on every call."""
        first = tool_surface.as_callable_tools(CONV_A)
        second = tool_surface.as_callable_tools(CONV_A)

        assert first[0] is not second[0]

    async def test_search_tool_output(self, tool_surface, seeded) -> None:
        """Should return cited text for the bound scope only."""
        search_tool = tool_surface.as_callable_tools(CONV_B)[0]

        output = await search_tool.ainvoke({"query": "pump valve pressure"})

        assert "key: b1" in output
        assert "file_name: b.pdf" in output
        assert "pump valve pressure" in output
        assert "key: a1" not in output

    async def test_image_tool_restricted_to_images(self, tool_surface, seeded) -> None:
        """Should only search records transcribed from images."""
        image_tool = tool_surface.as_callable_tools(CONV_A)[1]

        output = await image_tool.ainvoke({"query": "pump valve pressure"})

        assert "key: a2" in output
        assert "key: a1" not in output

    async def test_tool_without_results(self, tool_surface) -> None:
        """Should report that nothing was found."""
        output = await tool_surface.as_callable_tools(MANUALS)[0].ainvoke({"query": "pump"})

        assert output == NO_RESULTS_MESSAGE


# ============================================================================
# Formatting and Loading
# ============================================================================


def test_format_results_includes_citation() -> None:
    """Should render reference, page and score for each result."""
    record = Record(
        key="k1",
        text="body",
        embedding=[1.0],
        scope_metadata={"file_name": "m.pdf", "page": "4"},
        reference_description="m.pdf#page=4",
        reference_link="file://m.pdf#page=4",
    )

    output = format_results([VectorSearchResult(record=record, similarity_score=0.8766)])

    assert "reference: m.pdf#page=4" in output
    assert "link: file://m.pdf#page=4" in output
    assert "page: 4" in output
    assert "relevance_score: 0.877" in output
    assert output.startswith("---") and output.endswith("---")


def test_format_results_empty() -> None:
    """Should return the fixed no-results message."""
    assert format_results([]) == NO_RESULTS_MESSAGE


async def test_load_document_requires_coordinator(tool_surface) -> None:
    """Should refuse to load without an ingestion coordinator."""
    with pytest.raises(ConfigurationError):
        await tool_surface.load_document(MagicMock())


async def test_load_document_delegates(embedder, memory_store) -> None:
    """Should pass the request to the coordinator."""
    coordinator = MagicMock()
    coordinator.ingest = AsyncMock(return_value="report")
    surface = RetrievalToolSurface(embedder, memory_store, coordinator=coordinator)
    request = MagicMock()

    assert await surface.load_document(request) == "report"
    coordinator.ingest.assert_awaited_once_with(request)

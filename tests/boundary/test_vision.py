"""Tests for the Gemini vision service."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage

from docrag.boundary.vision import GeminiVisionService
from docrag.core.exceptions import ExtractionError


@pytest.fixture
def llm() -> MagicMock:
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content="Wiring diagram: pump to valve"))
    return model


class TestGeminiVisionService:
    """Test describe_image with a mocked chat model."""

    async def test_sends_image_as_data_uri(self, llm) -> None:
        """Should send the prompt and the base64 image in one message."""
        service = GeminiVisionService(llm=llm, prompt="Describe")

        text = await service.describe_image(b"\x89PNG", "image/png")

        assert text == "Wiring diagram: pump to valve"
        message = llm.ainvoke.await_args.args[0][0]
        assert message.content[0] == {"type": "text", "text": "Describe"}
        encoded = base64.b64encode(b"\x89PNG").decode("ascii")
        expected = f"data:image/png;base64,{encoded}"
        assert message.content[1]["image_url"]["url"] == expected

    async def test_list_content_joined(self, llm) -> None:
        """Should join text parts of structured responses."""
        llm.ainvoke.return_value = AIMessage(
            content=[{"type": "text", "text": "Page 1 "}, {"type": "text", "text": "scan"}]
        )

        assert await GeminiVisionService(llm=llm).describe_image(b"img", "image/jpeg") == "Page 1 scan"

    async def test_model_failure_raises_extraction_error(self, llm) -> None:
        """Should wrap model errors as ExtractionError."""
        llm.ainvoke.side_effect = RuntimeError("safety block")

        with pytest.raises(ExtractionError) as exc_info:
            await GeminiVisionService(llm=llm).describe_image(b"img", "image/png")

        assert exc_info.value.details["file_type"] == "image/png"

"""
Image-to-text conversion with a Gemini multimodal model.

Dependencies: langchain_google_genai, langchain_core.messages
System role: Converts image units to text before chunking
"""

import base64
import logging

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage

from docrag.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

DESCRIBE_IMAGE_PROMPT = (
    "Transcribe all text visible in this image exactly as written. "
    "If the image has no text, describe its content in detail. "
    "Return plain text only."
)


class GeminiVisionService:
    """Describe images with ChatGoogleGenerativeAI."""

    def __init__(
        self,
        model_name: str = "gemini-2.5-flash",
        llm: BaseChatModel | None = None,
        prompt: str = DESCRIBE_IMAGE_PROMPT,
    ) -> None:
        """
        Initialize vision service.

        Args:
            model_name: Gemini model ID
            llm: Chat model to use instead of creating one
            prompt: Instruction sent alongside each image
        """
        if llm is None:
            from langchain_google_genai import ChatGoogleGenerativeAI

            llm = ChatGoogleGenerativeAI(model=model_name, temperature=0)
        self._llm = llm
        self._prompt = prompt
        logger.info(f"Initialized vision service with {model_name}")

    async def describe_image(self, image: bytes, mime_type: str) -> str:
        """
        Convert an image to text.

        Raises:
            ExtractionError: When the model call fails
        """
        encoded = base64.b64encode(image).decode("ascii")
        message = HumanMessage(
            content=[
                {"type": "text", "text": self._prompt},
                {"type": "image_url", "image_url": {"url": f"data:{mime_type};base64,{encoded}"}},
            ]
        )

        try:
            response = await self._llm.ainvoke([message])
        except Exception as e:
            logger.error(f"{__name__}:describe_image - FAILED: {type(e).__name__}: {e}")
            raise ExtractionError(f"Vision model failed: {e}", file_type=mime_type) from e

        return _content_text(response.content)


def _content_text(content: str | list) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)

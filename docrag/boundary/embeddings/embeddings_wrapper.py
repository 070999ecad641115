"""
Gemini embeddings pinned to one output dimension.

Every call, sync or async, requests the configured dimension and checks the
vectors that come back, because a partition rejects vectors of a different
size and a silent provider default would poison it.

Dependencies: langchain_google_genai, python-dotenv
System role: Production embedding model behind LangChainEmbedder
"""

import logging
from typing import List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """GoogleGenerativeAIEmbeddings returning vectors of exactly one dimension."""

    _output_dimensionality: int = 1024

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 1024,
        **kwargs,
    ) -> None:
        """
        Args:
            model: Gemini embedding model ID
            output_dimensionality: Dimension requested and enforced on every call
            **kwargs: Passed through to GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(f"{__name__}:__init__ - model={model}, dimension={output_dimensionality}")

    @property
    def dimension(self) -> int:
        return self._output_dimensionality

    def _checked(self, vectors: List[List[float]]) -> List[List[float]]:
        for vector in vectors:
            if len(vector) != self._output_dimensionality:
                raise ValueError(
                    f"Provider returned a {len(vector)}-dimensional vector, "
                    f"expected {self._output_dimensionality}"
                )
        return vectors

    def embed_documents(self, texts: List[str], **kwargs) -> List[List[float]]:
        kwargs["output_dimensionality"] = self._output_dimensionality
        return self._checked(super().embed_documents(texts, **kwargs))

    def embed_query(self, text: str, **kwargs) -> List[float]:
        kwargs["output_dimensionality"] = self._output_dimensionality
        return self._checked([super().embed_query(text, **kwargs)])[0]

    async def aembed_documents(self, texts: List[str], **kwargs) -> List[List[float]]:
        kwargs["output_dimensionality"] = self._output_dimensionality
        return self._checked(await super().aembed_documents(texts, **kwargs))

    async def aembed_query(self, text: str, **kwargs) -> List[float]:
        kwargs["output_dimensionality"] = self._output_dimensionality
        return self._checked([await super().aembed_query(text, **kwargs)])[0]

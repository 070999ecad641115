"""
Embedding boundary: LangChain adapter and Gemini embeddings.
"""

from docrag.boundary.embeddings.embedder import LangChainEmbedder, get_embeddings

__all__ = ["LangChainEmbedder", "get_embeddings"]

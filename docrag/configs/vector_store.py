"""
Vector store configuration settings.

Selects the vector store backend, names the storage partitions used by the
two retrieval scopes, and holds embedding model and search defaults.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docrag.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (in-memory for tests, FAISS for local persistence)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="memory",
        description="Vector store type: 'memory' or 'faiss'",
    )
    index_dir: str = Field(
        default="/tmp/.docrag_index",
        description="Directory where FAISS partitions are persisted",
    )

    # Partition names
    global_partition: str = Field(
        default="global_documents",
        description="Partition shared by all conversations, filtered by category",
    )
    conversation_partition: str = Field(
        default="conversation_documents",
        description="Partition holding conversation-private attachments",
    )

    embedding_provider: str = Field(
        default="google",
        description="Embedding provider: 'google' (Gemini) or 'fake' (deterministic, offline)",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=1024,
        description="Embedding vector dimension",
    )

    top_k: int = Field(default=5, ge=1, description="Number of top results to retrieve")
    max_top_k: int = Field(
        default=50,
        ge=1,
        description="Upper bound on results returned by a single search",
    )
    similarity_threshold: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Minimum similarity score for retrieval (0.0-1.0)",
    )

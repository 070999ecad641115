"""
Vector database boundary: record schemas, stores and factory.
"""

from docrag.boundary.vdb.memory_store import InMemoryVectorStore
from docrag.boundary.vdb.vector_schemas import Record, VectorSearchResult
from docrag.boundary.vdb.vector_store_factory import get_vector_store

__all__ = [
    "InMemoryVectorStore",
    "Record",
    "VectorSearchResult",
    "get_vector_store",
]

"""
Scoped document ingestion and retrieval for RAG chat.

Dependencies: pydantic, pydantic_settings, langchain_core
System role: Package root
"""

"""
Boundary layer for external system integrations.

Handles all interactions with external systems (extractors, embedding
models, vector stores, file storage, vision models). Provides adapters
behind the protocols in `docrag.boundary.interfaces`.
"""

"""
Application services.
"""

from docrag.application.services.document_collection_service import (
    DocumentCollectionService,
    create_document_collection_service,
)

__all__ = ["DocumentCollectionService", "create_document_collection_service"]

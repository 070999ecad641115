"""
Raw file storage boundary: local disk and S3.
"""

from docrag.boundary.storage.local_file_store import LocalFileStore
from docrag.boundary.storage.s3_file_store import S3FileStore, get_file_store

__all__ = ["LocalFileStore", "S3FileStore", "get_file_store"]

"""
S3 file store for uploaded documents.

Objects are keyed `<folder>/<file name>`; deleting a folder removes every
object under its prefix in batches of up to 1000 keys.

Dependencies: boto3
System role: Raw file storage cleared when a conversation is deleted
"""

import logging

import boto3
from botocore.exceptions import ClientError

from docrag.boundary.storage.local_file_store import LocalFileStore
from docrag.configs.file_storage import FileStorageSettings
from docrag.core.exceptions import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

DELETE_BATCH_SIZE = 1000


class S3FileStore:
    """S3 client for document bucket folder operations."""

    def __init__(self, bucket: str, region: str = "ap-southeast-2", client=None) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            client: Preconfigured boto3 S3 client (created if None)
        """
        self._bucket = bucket
        self._region = region
        self._s3_client = client or boto3.client("s3", region_name=region)

    @staticmethod
    def _prefix(folder: str) -> str:
        folder = folder.strip("/")
        if not folder:
            raise StorageError("Folder name must not be empty", operation="delete")
        return f"{folder}/"

    def upload_file(self, folder: str, file_name: str, content: bytes) -> str:
        """Upload bytes under a folder and return the object key."""
        key = f"{self._prefix(folder)}{file_name}"
        try:
            self._s3_client.put_object(Bucket=self._bucket, Key=key, Body=content)
        except ClientError as e:
            raise StorageError(f"Failed to upload {key}: {e}", operation="upload") from e
        return key

    def delete_files_by_folder(self, folder: str) -> int:
        """
        Delete every object under the folder prefix.

        Args:
            folder: Folder name (conversation ID)

        Returns:
            int: Number of objects deleted

        Raises:
            StorageError: If listing or deletion fails
        """
        prefix = self._prefix(folder)
        deleted = 0

        try:
            paginator = self._s3_client.get_paginator("list_objects_v2")
            keys: list[str] = []
            for page in paginator.paginate(Bucket=self._bucket, Prefix=prefix):
                keys.extend(obj["Key"] for obj in page.get("Contents", []))

            for start in range(0, len(keys), DELETE_BATCH_SIZE):
                batch = keys[start:start + DELETE_BATCH_SIZE]
                response = self._s3_client.delete_objects(
                    Bucket=self._bucket,
                    Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
                )
                errors = response.get("Errors", [])
                if errors:
                    raise StorageError(
                        f"Failed to delete {len(errors)} objects under {prefix}",
                        operation="delete",
                        details={"first_error": errors[0]},
                    )
                deleted += len(batch)
        except ClientError as e:
            raise StorageError(f"S3 delete failed for {prefix}: {e}", operation="delete") from e

        logger.info(f"{__name__}:delete_files_by_folder - bucket={self._bucket}, prefix={prefix}, deleted={deleted}")
        return deleted


def get_file_store(settings: FileStorageSettings) -> LocalFileStore | S3FileStore:
    """
    Factory function to get the file store named by settings.

    Raises:
        ConfigurationError: If the backend is unknown
    """
    backend = settings.backend.lower()
    if backend == "local":
        return LocalFileStore(settings.root_dir)
    elif backend == "s3":
        return S3FileStore(bucket=settings.bucket, region=settings.region)
    raise ConfigurationError(
        f"Invalid file storage backend: {backend}. Must be 'local' or 's3'.",
        field="backend",
    )

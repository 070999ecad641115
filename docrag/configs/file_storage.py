"""
Raw file storage configuration.

Settings for the store holding uploaded bytes, which the lifecycle binder
clears when a conversation is deleted.

Dependencies: pydantic_settings
System role: File storage configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FileStorageSettings(BaseSettings):
    """Settings for local or S3 raw file storage."""

    model_config = SettingsConfigDict(
        env_prefix="FILE_STORAGE_",
        case_sensitive=False,
        extra="ignore",
    )

    backend: str = Field(
        default="local",
        description="File store backend: 'local' or 's3'",
    )
    root_dir: str = Field(
        default="./data/uploads",
        description="Root directory for the local file store",
    )
    bucket: str = Field(
        default="docrag-dev-documents",
        description="S3 bucket for raw document storage",
    )
    region: str = Field(
        default="ap-southeast-2",
        description="AWS region for S3 bucket",
    )

"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.

Dependencies: All config modules
System role: Central configuration aggregator
"""

from functools import lru_cache

from pydantic import Field

from docrag.configs.base import BaseSettings
from docrag.configs.file_storage import FileStorageSettings
from docrag.configs.ingestion import IngestionSettings
from docrag.configs.vector_store import VectorStoreSettings
from docrag.configs.vision import VisionSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    file_storage: FileStorageSettings = Field(default_factory=FileStorageSettings)
    vision: VisionSettings = Field(default_factory=VisionSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once and cached.

    Returns:
        Settings: Application settings instance

    Usage:
        from docrag.configs import get_settings
        settings = get_settings()
    """
    return Settings()

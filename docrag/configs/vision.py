"""
Vision model configuration.

Settings for converting image units (scanned pages, embedded figures)
into text before chunking.

Dependencies: pydantic_settings
System role: Vision service configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VisionSettings(BaseSettings):
    """Vision service configuration."""

    model_config = SettingsConfigDict(
        env_prefix="VISION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=False, description="Convert image units to text")
    model: str = Field(
        default="gemini-2.5-flash",
        description="Google Gemini multimodal model used for image transcription",
    )
    extract_pdf_images: bool = Field(
        default=False,
        description="Also extract images embedded in PDF pages",
    )

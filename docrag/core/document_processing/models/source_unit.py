"""
Source unit model.

One page or segment of raw content produced by an extractor.

Dependencies: pydantic
System role: Extractor output consumed by the segmenter
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class SourceUnit(BaseModel):
    """A page of extracted text, or an image region awaiting transcription."""

    model_config = ConfigDict(frozen=True)

    text: str | None = Field(default=None, description="Extracted text")
    binary_payload: bytes | None = Field(default=None, description="Raw image bytes")
    mime_type: str | None = Field(default=None, description="MIME type of binary_payload")
    unit_index: int = Field(ge=0, description="Ordinal position, e.g. page number")

    @model_validator(mode="after")
    def _require_content(self) -> "SourceUnit":
        if self.text is None and self.binary_payload is None:
            raise ValueError("SourceUnit needs text or binary_payload")
        return self

    @property
    def is_binary(self) -> bool:
        """True when the unit still needs image-to-text conversion."""
        return self.text is None and self.binary_payload is not None

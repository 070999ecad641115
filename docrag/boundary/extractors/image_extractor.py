"""
Image extraction: a single binary unit holding the file bytes.

The coordinator converts the unit to text with a vision service.
"""

import mimetypes
from pathlib import Path

from docrag.core.document_processing.models import SourceUnit
from docrag.core.exceptions import ExtractionError


class ImageExtractor:
    """Wrap an image file as one binary source unit."""

    def extract(self, path: str) -> list[SourceUnit]:
        try:
            payload = Path(path).read_bytes()
        except OSError as e:
            raise ExtractionError(
                f"Failed to read image: {e}",
                source_path=path,
                file_type=Path(path).suffix,
            ) from e

        if not payload:
            raise ExtractionError("Image file is empty", source_path=path, file_type=Path(path).suffix)

        mime_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
        return [SourceUnit(binary_payload=payload, mime_type=mime_type, unit_index=1)]

"""
Plain-text extraction for .txt and .md files.

Form feeds split the file into pages; a file without them is one page.
"""

import logging
from pathlib import Path

from docrag.core.document_processing.models import SourceUnit
from docrag.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

PAGE_BREAK = "\f"


class TextFileExtractor:
    """Read UTF-8 text files into page units."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def extract(self, path: str) -> list[SourceUnit]:
        try:
            content = Path(path).read_text(encoding=self._encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ExtractionError(
                f"Failed to read text file: {e}",
                source_path=path,
                file_type=Path(path).suffix,
            ) from e

        units = [
            SourceUnit(text=page, unit_index=number)
            for number, page in enumerate(content.split(PAGE_BREAK), start=1)
        ]
        logger.info(f"{__name__}:extract - {path}: {len(units)} pages")
        return units

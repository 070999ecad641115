"""
PDF extraction using LangChain PyPDFLoader.

Produces one text unit per page and, optionally, one binary unit per image
embedded in a page so it can be transcribed by a vision model.

Dependencies: langchain_community.document_loaders, pypdf
System role: First stage of document ingestion pipeline
"""

import logging
import mimetypes
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from pypdf import PdfReader

from docrag.core.document_processing.models import SourceUnit
from docrag.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


class PdfExtractor:
    """Extract page text (and optionally page images) from PDF documents."""

    def __init__(self, extract_images: bool = False) -> None:
        """
        Initialize PDF extractor.

        Args:
            extract_images: Also emit embedded images as binary units
        """
        self._extract_images = extract_images

    def extract(self, path: str) -> list[SourceUnit]:
        """
        Extract pages as source units, numbered from 1.

        Args:
            path: Path to PDF document

        Returns:
            list[SourceUnit]: Text units in page order, each followed by its image units

        Raises:
            ExtractionError: When the file is missing, not a PDF, or unreadable
        """
        file_path = Path(path)
        if not file_path.exists():
            raise ExtractionError(f"File not found: {path}", source_path=path, file_type="pdf")
        if file_path.suffix.lower() != ".pdf":
            raise ExtractionError(
                f"Unsupported file format: {file_path.suffix}. Expected a PDF.",
                source_path=path,
                file_type=file_path.suffix,
            )

        try:
            documents = PyPDFLoader(path).load()
            images = self._extract_page_images(path) if self._extract_images else {}
        except Exception as e:
            raise ExtractionError(f"Failed to parse PDF: {e}", source_path=path, file_type="pdf") from e

        units: list[SourceUnit] = []
        for position, document in enumerate(documents):
            page_number = int(document.metadata.get("page", position)) + 1
            units.append(SourceUnit(text=document.page_content, unit_index=page_number))
            units.extend(images.get(page_number, []))

        logger.info(f"{__name__}:extract - {path}: {len(documents)} pages, {len(units)} units")
        return units

    def _extract_page_images(self, path: str) -> dict[int, list[SourceUnit]]:
        images: dict[int, list[SourceUnit]] = {}
        reader = PdfReader(path)
        for page_number, page in enumerate(reader.pages, start=1):
            for image in page.images:
                mime_type = mimetypes.guess_type(image.name)[0] or "image/png"
                images.setdefault(page_number, []).append(
                    SourceUnit(
                        binary_payload=image.data,
                        mime_type=mime_type,
                        unit_index=page_number,
                    )
                )
        return images

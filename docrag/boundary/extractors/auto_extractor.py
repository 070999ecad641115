"""
Extractor dispatch by file suffix.

Dependencies: docrag.boundary.extractors
System role: Default extractor used by the composition root
"""

import logging
from pathlib import Path

from docrag.boundary.extractors.image_extractor import ImageExtractor
from docrag.boundary.extractors.pdf_extractor import PdfExtractor
from docrag.boundary.extractors.text_extractor import TextFileExtractor
from docrag.boundary.interfaces import Extractor
from docrag.core.document_processing.models import SourceUnit
from docrag.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

PDF_SUFFIXES = (".pdf",)
TEXT_SUFFIXES = (".txt", ".md")
IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".tif", ".tiff")


class AutoExtractor:
    """Route each file to the extractor registered for its suffix."""

    def __init__(self, extractors: dict[str, Extractor] | None = None, extract_pdf_images: bool = False) -> None:
        """
        Initialize dispatcher.

        Args:
            extractors: Suffix to extractor mapping (built-in mapping if None)
            extract_pdf_images: Emit embedded PDF images for the built-in PDF extractor
        """
        if extractors is None:
            pdf = PdfExtractor(extract_images=extract_pdf_images)
            text = TextFileExtractor()
            image = ImageExtractor()
            extractors = {suffix: pdf for suffix in PDF_SUFFIXES}
            extractors.update({suffix: text for suffix in TEXT_SUFFIXES})
            extractors.update({suffix: image for suffix in IMAGE_SUFFIXES})
        self._extractors = {suffix.lower(): extractor for suffix, extractor in extractors.items()}

    @property
    def supported_suffixes(self) -> list[str]:
        return sorted(self._extractors)

    def extract(self, path: str) -> list[SourceUnit]:
        """
        Extract units with the extractor for the file's suffix.

        Raises:
            ExtractionError: When no extractor handles the suffix
        """
        suffix = Path(path).suffix.lower()
        extractor = self._extractors.get(suffix)
        if extractor is None:
            raise ExtractionError(
                f"Unsupported file format: {suffix or '<none>'}",
                source_path=path,
                file_type=suffix,
            )

        logger.debug(f"{__name__}:extract - {path} -> {type(extractor).__name__}")
        return extractor.extract(path)

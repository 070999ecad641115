"""
Document extractors: turn files into ordered source units.
"""

from docrag.boundary.extractors.auto_extractor import AutoExtractor
from docrag.boundary.extractors.image_extractor import ImageExtractor
from docrag.boundary.extractors.pdf_extractor import PdfExtractor
from docrag.boundary.extractors.text_extractor import TextFileExtractor

__all__ = ["AutoExtractor", "ImageExtractor", "PdfExtractor", "TextFileExtractor"]

"""Image and PDF input: OCR, vision extraction and the scoresheet reader."""

from openchessnotation.ingest.ocr import TesseractOCREngine
from openchessnotation.ingest.vision import (
    ExtractionError,
    VisionExtractionService,
    create_vision_service,
)
from openchessnotation.ingest.pdf import read_pdf_text, render_pdf_pages
from openchessnotation.ingest.reader import ScoresheetReader

__all__ = [
    "TesseractOCREngine",
    "ExtractionError",
    "VisionExtractionService",
    "create_vision_service",
    "read_pdf_text",
    "render_pdf_pages",
    "ScoresheetReader",
]

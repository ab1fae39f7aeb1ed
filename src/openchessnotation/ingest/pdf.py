"""
PDF input using PyMuPDF (fitz).

Scoresheets exported from tournament software carry a text layer; scanned
ones only carry page images, which are rendered for OCR.
"""

from pathlib import Path
from typing import Sequence

import cv2
import fitz  # PyMuPDF
import numpy as np
from numpy.typing import NDArray


def _open(path: str | Path) -> fitz.Document:
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"PDF file not found: {path}")

    try:
        return fitz.open(str(path_obj))
    except Exception as e:
        raise ValueError(f"Failed to open PDF: {e}") from e


def _page_indices(doc: fitz.Document, pages: Sequence[int] | None) -> list[int]:
    if pages is None:
        return list(range(len(doc)))
    for page_index in pages:
        if page_index < 0 or page_index >= len(doc):
            raise IndexError(f"Page index {page_index} out of range [0, {len(doc)})")
    return list(pages)


def read_pdf_text(path: str | Path, pages: Sequence[int] | None = None) -> str:
    """
    Read the text layer of a PDF.

    Args:
        path: Path to the PDF file
        pages: 0-indexed pages to read (all pages if None)

    Returns:
        Page texts joined by newlines (empty for scanned documents)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a valid PDF
        IndexError: If a page index is out of range
    """
    with _open(path) as doc:
        return "\n".join(
            doc[page_index].get_text("text") or "" for page_index in _page_indices(doc, pages)
        ).strip()


def render_pdf_pages(
    path: str | Path,
    pages: Sequence[int] | None = None,
    scale: float = 2.0,
) -> list[NDArray[np.uint8]]:
    """
    Render PDF pages to BGR images for OCR.

    Args:
        path: Path to the PDF file
        pages: 0-indexed pages to render (all pages if None)
        scale: Scale factor (1.0 = 72 DPI, 2.0 = 144 DPI, etc.)
    """
    images: list[NDArray[np.uint8]] = []
    with _open(path) as doc:
        matrix = fitz.Matrix(scale, scale)
        for page_index in _page_indices(doc, pages):
            pixmap = doc[page_index].get_pixmap(matrix=matrix, alpha=False)
            img = np.frombuffer(pixmap.samples, dtype=np.uint8)
            img = img.reshape(pixmap.height, pixmap.width, 3)
            images.append(cv2.cvtColor(img, cv2.COLOR_RGB2BGR))
    return images

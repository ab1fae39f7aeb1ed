"""
Tesseract OCR engine for scoresheet images.

Converts the image to grayscale and asks Tesseract for a single uniform
block of text, restricted to characters that can appear in move-text.
"""

import logging
from typing import Any

import pytesseract

from openchessnotation.ingest.images import load_image, to_grayscale_pil


logger = logging.getLogger(__name__)


# Characters that can appear in algebraic notation (and its usual OCR noise)
NOTATION_WHITELIST = "abcdefghKQRBNOox012345678.-+=#"


class TesseractOCREngine:
    """
    OCR engine backed by the Tesseract binary via pytesseract.

    Requires Tesseract to be installed; its location can be overridden with
    the TESSERACT_CMD environment variable (see config.get_config).
    """

    def __init__(
        self,
        psm: int = 6,
        whitelist: str | None = NOTATION_WHITELIST,
        tesseract_cmd: str | None = None,
    ) -> None:
        self._psm = psm
        self._whitelist = whitelist
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    @property
    def name(self) -> str:
        return f"Tesseract (psm {self._psm})"

    @property
    def tesseract_config(self) -> str:
        config = f"--psm {self._psm}"
        if self._whitelist:
            config += f" -c tessedit_char_whitelist={self._whitelist}"
        return config

    def recognize_text(self, image: Any) -> str:
        """
        Run OCR over an image.

        Args:
            image: File path, encoded bytes, PIL image or numpy array

        Returns:
            Raw recognized text (possibly empty)
        """
        pil_img = to_grayscale_pil(load_image(image))
        text = pytesseract.image_to_string(pil_img, config=self.tesseract_config)
        logger.debug(f"{self.name} recognized {len(text)} characters")
        return text

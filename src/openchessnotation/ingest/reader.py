"""
Scoresheet reading workflow.

Coordinates the OCR engine, the vision extraction service and the recovery
pipeline for image and PDF input:

    image --OCR--> text --pipeline--> complete? --yes--> result
                                         |
                                         no
                                         v
    image --vision--> moves + totalMoves --pipeline--> result

External calls run in worker threads bounded by timeouts; every failure is
turned into a RecoveryResult rather than raised.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Sequence

from openchessnotation.config import ServiceConfig, get_config
from openchessnotation.core.interfaces import ExtractionService, OCREngine
from openchessnotation.core.metadata import metadata_from_extraction
from openchessnotation.core.models import RecoveryResult
from openchessnotation.ingest.pdf import read_pdf_text, render_pdf_pages
from openchessnotation.pipeline import NotationRecoveryPipeline


logger = logging.getLogger(__name__)


NO_NOTATION_MESSAGE = (
    "Could not detect chess notation in image. Please ensure the image is clear"
    " and contains standard algebraic notation."
)


class ScoresheetReader:
    """
    Reads games from scoresheet images and PDFs.

    Responsibilities:
    - Run OCR off the event loop with a timeout
    - Fall back to the vision service when OCR does not yield a full game
    - Feed the vision service's move count to the pipeline for trimming
    - Attach metadata reported by the vision service
    """

    def __init__(
        self,
        pipeline: NotationRecoveryPipeline | None = None,
        ocr_engine: OCREngine | None = None,
        extraction_service: ExtractionService | None = None,
        config: ServiceConfig | None = None,
    ) -> None:
        self._pipeline = pipeline or NotationRecoveryPipeline()
        self._ocr = ocr_engine
        self._vision = extraction_service
        self._config = config or get_config()

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig | None = None,
        pipeline: NotationRecoveryPipeline | None = None,
    ) -> "ScoresheetReader":
        """Build a reader with Tesseract and, when an API key is set, the vision service."""
        from openchessnotation.ingest.ocr import TesseractOCREngine
        from openchessnotation.ingest.vision import create_vision_service

        config = config or get_config()
        vision = None
        if config.vision_available:
            vision = create_vision_service(
                api_key=config.openai_api_key,
                model=config.vision_model,
                timeout=config.vision_timeout,
            )
        return cls(
            pipeline=pipeline,
            ocr_engine=TesseractOCREngine(tesseract_cmd=config.tesseract_cmd),
            extraction_service=vision,
            config=config,
        )

    @property
    def pipeline(self) -> NotationRecoveryPipeline:
        return self._pipeline

    async def read_image(
        self,
        image: Any,
        expected_total: int | None = None,
    ) -> RecoveryResult:
        """
        Recover a game from a scoresheet image.

        Args:
            image: File path, encoded bytes, PIL image or numpy array
            expected_total: Number of move pairs on the sheet, when known;
                overrides the count reported by the vision service

        Returns:
            The OCR result when it is complete, otherwise the vision result;
            a partial OCR result is kept when the vision service fails.
        """
        ocr_result = await self._read_with_ocr(image, expected_total)
        if ocr_result is not None and ocr_result.success and not ocr_result.is_partial:
            return ocr_result

        if self._vision is None:
            if ocr_result is not None:
                return ocr_result
            return RecoveryResult(
                success=False,
                error="No OCR engine or vision service is configured.",
            )

        logger.warning(f"OCR did not yield a complete game; falling back to {self._vision.name}")
        vision_result = await self._read_with_vision(image, expected_total)

        if not vision_result.success and ocr_result is not None and ocr_result.success:
            return ocr_result
        return vision_result

    async def read_pdf(
        self,
        path: str | Path,
        pages: Sequence[int] | None = None,
        expected_total: int | None = None,
    ) -> RecoveryResult:
        """
        Recover a game from a PDF, using its text layer when it has one and
        OCR of the rendered pages otherwise.
        """
        try:
            text = await asyncio.to_thread(read_pdf_text, path, pages)
        except (FileNotFoundError, ValueError, IndexError) as e:
            return RecoveryResult(success=False, error=str(e))

        if text:
            result = self._pipeline.recover(text, expected_total=expected_total)
            if result.success:
                return result
            logger.info("PDF text layer held no recoverable moves; rendering pages")

        if self._ocr is None:
            return RecoveryResult(success=False, error="PDF has no usable text layer.")

        images = await asyncio.to_thread(render_pdf_pages, path, pages)
        texts: list[str] = []
        for image in images:
            page_text = await self._recognize(image)
            if page_text:
                texts.append(page_text)

        return self._pipeline.recover("\n".join(texts), expected_total=expected_total)

    async def _recognize(self, image: Any) -> str | None:
        if self._ocr is None:
            return None
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._ocr.recognize_text, image),
                timeout=self._config.ocr_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"{self._ocr.name} timed out after {self._config.ocr_timeout}s")
        except Exception as e:
            logger.warning(f"{self._ocr.name} failed: {e}")
        return None

    async def _read_with_ocr(
        self,
        image: Any,
        expected_total: int | None,
    ) -> RecoveryResult | None:
        text = await self._recognize(image)
        if not text or not text.strip():
            return None
        result = self._pipeline.recover(text, expected_total=expected_total)
        logger.info(
            f"OCR recovery: success={result.success} moves={result.moves_found}"
            f" partial={result.is_partial}"
        )
        return result

    async def _read_with_vision(
        self,
        image: Any,
        expected_total: int | None,
    ) -> RecoveryResult:
        assert self._vision is not None
        try:
            payload = await asyncio.wait_for(
                asyncio.to_thread(self._vision.extract, image),
                timeout=self._config.vision_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"{self._vision.name} timed out after {self._config.vision_timeout}s")
            return RecoveryResult(success=False, error="AI vision processing timed out.")
        except Exception as e:
            logger.warning(f"{self._vision.name} failed: {e}")
            return RecoveryResult(success=False, error=f"AI vision processing failed: {e}")

        if not payload.has_notation:
            return RecoveryResult(success=False, error=NO_NOTATION_MESSAGE)

        return self._pipeline.recover(
            payload.moves,
            expected_total=expected_total or payload.total_moves or None,
            metadata=metadata_from_extraction(payload.raw),
        )

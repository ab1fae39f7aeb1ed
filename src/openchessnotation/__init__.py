"""
OpenChessNotation - Recover legal games from noisy chess notation

This package provides:
- Normalization of OCR and handwriting artifacts in algebraic notation
- Legality-driven replay with OCR error correction
- PGN metadata and clock extraction
- Scoresheet reading from images and PDFs via Tesseract and vision models
"""

__version__ = "0.1.0"
__author__ = "OpenChessNotation Contributors"

from openchessnotation.core.models import (
    GameMetadata,
    RecoveryResult,
    SegmentationStrategy,
    SourceTag,
)
from openchessnotation.config import RecoveryConfig
from openchessnotation.pipeline import NotationRecoveryPipeline, recover_notation

__all__ = [
    "GameMetadata",
    "RecoveryResult",
    "SegmentationStrategy",
    "SourceTag",
    "RecoveryConfig",
    "NotationRecoveryPipeline",
    "recover_notation",
    "__version__",
]

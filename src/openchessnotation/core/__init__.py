"""Core data models, text processing and recovery stages."""

from openchessnotation.core.models import (
    SourceTag,
    SegmentationStrategy,
    MoveToken,
    FailureLocator,
    RecoveryAttempt,
    PlayerInfo,
    GameMetadata,
    RecoveryResult,
    ExtractionPayload,
)
from openchessnotation.core.interfaces import (
    RulesOracle,
    OCREngine,
    ExtractionService,
)
from openchessnotation.core.normalize import (
    clean_input,
    normalize_notation,
    clean_move,
)
from openchessnotation.core.metadata import (
    extract_metadata,
    extract_clock_times,
    metadata_from_extraction,
)
from openchessnotation.core.segmenter import (
    strip_pgn_metadata,
    segment,
)
from openchessnotation.core.correction import Correction, CorrectionEngine
from openchessnotation.core.replay import LegalityReplayer
from openchessnotation.core.reconstruct import (
    format_movetext,
    trim_to_move_count,
    build_result,
)

__all__ = [
    # Models
    "SourceTag",
    "SegmentationStrategy",
    "MoveToken",
    "FailureLocator",
    "RecoveryAttempt",
    "PlayerInfo",
    "GameMetadata",
    "RecoveryResult",
    "ExtractionPayload",
    # Interfaces
    "RulesOracle",
    "OCREngine",
    "ExtractionService",
    # Text processing
    "clean_input",
    "normalize_notation",
    "clean_move",
    "extract_metadata",
    "extract_clock_times",
    "metadata_from_extraction",
    "strip_pgn_metadata",
    "segment",
    # Recovery stages
    "Correction",
    "CorrectionEngine",
    "LegalityReplayer",
    "format_movetext",
    "trim_to_move_count",
    "build_result",
]

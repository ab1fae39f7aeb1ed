"""
Pytest configuration and fixtures for OpenChessNotation tests.
"""

import pytest

from openchessnotation.config import RecoveryConfig, ServiceConfig
from openchessnotation.core.correction import CorrectionEngine
from openchessnotation.core.replay import LegalityReplayer
from openchessnotation.pipeline import NotationRecoveryPipeline
from openchessnotation.rules.oracle import ChessOracle


# Ruy Lopez, Breyer variation: 15 legal moves
BREYER_MOVETEXT = (
    "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7 6. Re1 b5 "
    "7. Bb3 d6 8. c3 O-O 9. h3 Nb8 10. d4 Nbd7 11. Nbd2 Bb7 12. Bc2 Re8 "
    "13. Nf1 Bf8 14. Ng3 g6 15. a4 c5"
)


@pytest.fixture
def oracle() -> ChessOracle:
    """A rules oracle at the standard starting position."""
    return ChessOracle()


@pytest.fixture
def corrector() -> CorrectionEngine:
    """A correction engine with default thresholds."""
    return CorrectionEngine(RecoveryConfig())


@pytest.fixture
def replayer(corrector: CorrectionEngine) -> LegalityReplayer:
    """A replayer creating a fresh standard-start oracle per attempt."""
    return LegalityReplayer(ChessOracle, corrector)


@pytest.fixture
def pipeline() -> NotationRecoveryPipeline:
    """A pipeline with default configuration."""
    return NotationRecoveryPipeline()


@pytest.fixture
def service_config() -> ServiceConfig:
    """Service settings with short timeouts and no API key."""
    return ServiceConfig(
        openai_api_key=None,
        vision_model="gpt-4o",
        ocr_timeout=0.2,
        vision_timeout=0.5,
    )


@pytest.fixture
def breyer_movetext() -> str:
    """A 15-move legal game in standard move-text."""
    return BREYER_MOVETEXT

"""
Legality-driven replay of candidate move tokens.

The replayer walks a candidate list from the starting position. Each token
is tried verbatim first, then handed to the correction engine; the first
token that cannot be accepted halts the replay and the accepted prefix
becomes the attempt's result.

    ply(0) --accept--> ply(1) --accept--> ... --> COMPLETE
      |                  |
    reject             reject
      v                  v
    HALTED(0)          HALTED(1)
"""

import logging
from typing import Callable, Sequence

from openchessnotation.core.correction import CorrectionEngine
from openchessnotation.core.interfaces import RulesOracle
from openchessnotation.core.models import (
    FailureLocator,
    MoveToken,
    RecoveryAttempt,
    SegmentationStrategy,
    SourceTag,
)
from openchessnotation.core.normalize import clean_move


logger = logging.getLogger(__name__)


OracleFactory = Callable[[], RulesOracle]


class LegalityReplayer:
    """
    Replays candidate token lists against fresh oracle instances.

    Each call to `replay` creates its own oracle, so attempts never share
    mutable state and may run on separate threads.
    """

    def __init__(
        self,
        oracle_factory: OracleFactory,
        corrector: CorrectionEngine | None = None,
    ) -> None:
        self._oracle_factory = oracle_factory
        self._corrector = corrector or CorrectionEngine()

    def replay(
        self,
        strategy: SegmentationStrategy,
        tokens: Sequence[str],
    ) -> RecoveryAttempt:
        """
        Replay tokens in order until they run out or one cannot be accepted.

        Args:
            strategy: The segmentation strategy that produced the tokens
            tokens: Candidate move tokens in ply order

        Returns:
            A RecoveryAttempt holding the accepted prefix and, when replay
            halted, the locator of the offending token.
        """
        oracle = self._oracle_factory()
        accepted: list[MoveToken] = []
        failed_at: FailureLocator | None = None

        for index, raw in enumerate(tokens):
            ply = index + 1
            token = clean_move(raw)
            move = self._accept(token, oracle, ply, raw)

            if move is None:
                failed_at = FailureLocator(token=raw, move_number=(ply + 1) // 2)
                logger.debug(f"{strategy.value}: halted at ply {ply} on {raw!r}")
                break

            accepted.append(move)

        attempt = RecoveryAttempt(
            strategy=strategy,
            candidates=tuple(tokens),
            accepted=tuple(accepted),
            failed_at=failed_at,
        )
        logger.info(
            f"{strategy.value}: accepted {attempt.accepted_plies}/{len(tokens)} plies"
            f" ({attempt.repaired_count} repaired)"
        )
        return attempt

    def _accept(
        self,
        token: str,
        oracle: RulesOracle,
        ply: int,
        raw: str,
    ) -> MoveToken | None:
        san = oracle.apply(token)
        if san is not None:
            return MoveToken(text=san, ply=ply, source=SourceTag.DIRECT)

        correction = self._corrector.correct(token, oracle)
        if correction is None:
            return None

        san = oracle.apply(correction.san)
        if san is None:
            logger.warning(f"Correction {correction.san!r} for {raw!r} was not accepted")
            return None

        return MoveToken(text=san, ply=ply, source=correction.source, original=raw)

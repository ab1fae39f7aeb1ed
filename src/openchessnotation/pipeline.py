"""
Notation recovery pipeline.

Coordinates normalization, metadata extraction, segmentation, legality
replay and result reconstruction. The pipeline performs no I/O and never
raises for bad input: every failure is reported as a RecoveryResult with
success=False.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from openchessnotation.config import RecoveryConfig
from openchessnotation.core.correction import CorrectionEngine
from openchessnotation.core.interfaces import RulesOracle
from openchessnotation.core.metadata import extract_clock_times, extract_metadata
from openchessnotation.core.models import (
    GameMetadata,
    MoveToken,
    RecoveryAttempt,
    RecoveryResult,
    SegmentationStrategy,
    SourceTag,
)
from openchessnotation.core.normalize import clean_input, normalize_notation
from openchessnotation.core.reconstruct import build_result, select_attempt
from openchessnotation.core.replay import LegalityReplayer, OracleFactory
from openchessnotation.core.segmenter import (
    count_movetext_tokens,
    segment,
    strip_pgn_metadata,
)
from openchessnotation.rules.oracle import ChessOracle, MovetextLoadError


logger = logging.getLogger(__name__)


class NotationRecoveryPipeline:
    """
    Recovers the longest legal move sequence from noisy notation.

    Responsibilities:
    - Clean and normalize raw text
    - Extract header metadata and clock annotations
    - Try a strict whole-text load, then token-based segmentations
    - Replay each segmentation on its own oracle, repairing OCR errors
    - Select the best attempt and assemble the result
    """

    def __init__(
        self,
        config: RecoveryConfig | None = None,
        oracle_factory: OracleFactory | None = None,
    ) -> None:
        self._config = config or RecoveryConfig()
        self._oracle_factory = oracle_factory or self._default_oracle
        self._replayer = LegalityReplayer(
            self._oracle_factory,
            CorrectionEngine(self._config),
        )

    @property
    def config(self) -> RecoveryConfig:
        return self._config

    def _default_oracle(self) -> RulesOracle:
        return ChessOracle(self._config.start_fen)

    def recover(
        self,
        text: str | None,
        expected_total: int | None = None,
        metadata: GameMetadata | None = None,
    ) -> RecoveryResult:
        """
        Recover a legal move sequence from text.

        Args:
            text: Raw notation (OCR output, pasted PGN, extracted moves)
            expected_total: Number of move pairs the source is known to
                contain; used for trimming and warnings, never for validity
            metadata: Metadata known from elsewhere; takes precedence over
                PGN headers found in the text

        Returns:
            RecoveryResult describing success, partial success or failure
        """
        cleaned = clean_input(text)
        if not cleaned:
            return RecoveryResult(success=False, error="No notation found in input.")

        metadata = self._collect_metadata(cleaned, metadata)
        normalized = normalize_notation(cleaned)

        direct = self._load_direct(normalized)
        if direct is not None:
            logger.info(f"Direct load accepted {direct.accepted_plies} plies")
            return build_result(direct, expected_total, metadata)

        segments = segment(normalized)
        if not segments:
            return RecoveryResult(
                success=False,
                total_expected=expected_total if expected_total and expected_total > 0 else None,
                metadata=metadata,
                error="No chess moves found in input.",
            )

        attempts = self._run_attempts(segments)
        best = select_attempt(attempts)
        if best is not None:
            logger.info(
                f"Selected {best.strategy.value} with {best.accepted_plies} plies"
                f" out of {len(attempts)} attempts"
            )
        return build_result(best, expected_total, metadata)

    def _collect_metadata(
        self,
        text: str,
        supplied: GameMetadata | None,
    ) -> GameMetadata | None:
        metadata = supplied or extract_metadata(text)
        if metadata is None:
            return None

        if metadata.clock_times is None:
            clock_times = extract_clock_times(text)
            if clock_times:
                metadata = metadata.with_clock_times(clock_times)
        return metadata

    def _load_direct(self, normalized: str) -> RecoveryAttempt | None:
        """
        Load the whole text as move-text, first as is, then with comments,
        headers and variations stripped. Loads that skip tokens do not count.
        """
        candidates = [normalized]
        stripped = strip_pgn_metadata(normalized)
        if stripped and stripped != normalized:
            candidates.append(stripped)

        for candidate in candidates:
            oracle = self._oracle_factory()
            try:
                history = oracle.load_movetext(candidate)
            except (MovetextLoadError, ValueError) as e:
                logger.debug(f"Direct load failed: {e}")
                continue

            expected = count_movetext_tokens(candidate)
            if len(history) != expected:
                logger.debug(
                    f"Direct load consumed {len(history)} of {expected} tokens; ignoring"
                )
                continue

            accepted = tuple(
                MoveToken(text=san, ply=index + 1, source=SourceTag.DIRECT)
                for index, san in enumerate(history)
            )
            return RecoveryAttempt(
                strategy=SegmentationStrategy.DIRECT_LOAD,
                candidates=tuple(history),
                accepted=accepted,
            )
        return None

    def _run_attempts(
        self,
        segments: Sequence[tuple[SegmentationStrategy, list[str]]],
    ) -> list[RecoveryAttempt]:
        if self._config.parallel_attempts and len(segments) > 1:
            with ThreadPoolExecutor(max_workers=self._config.max_workers) as executor:
                futures = [
                    executor.submit(self._replayer.replay, strategy, tokens)
                    for strategy, tokens in segments
                ]
                return [future.result() for future in futures]

        return [self._replayer.replay(strategy, tokens) for strategy, tokens in segments]


def recover_notation(
    text: str | None,
    expected_total: int | None = None,
    metadata: GameMetadata | None = None,
    config: RecoveryConfig | None = None,
) -> RecoveryResult:
    """One-shot recovery with a default pipeline."""
    return NotationRecoveryPipeline(config).recover(
        text,
        expected_total=expected_total,
        metadata=metadata,
    )

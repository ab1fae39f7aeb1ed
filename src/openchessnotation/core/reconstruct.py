"""
Result reconstruction: accepted moves back to numbered move-text.

Move numbers are always derived from position in the accepted sequence,
never from the numbers found in the source text.
"""

import math
from typing import Iterable, Sequence, TypeVar

from openchessnotation.core.models import (
    FailureLocator,
    GameMetadata,
    RecoveryAttempt,
    RecoveryResult,
)


T = TypeVar("T")


def format_movetext(sans: Sequence[str]) -> str:
    """
    Render SAN moves as numbered move-text.

    Example:
        ["e4", "e5", "Nf3"] -> "1. e4 e5 2. Nf3"
    """
    segments: list[str] = []
    for index in range(0, len(sans), 2):
        fragment = f"{index // 2 + 1}. {sans[index]}"
        if index + 1 < len(sans):
            fragment += f" {sans[index + 1]}"
        segments.append(fragment)
    return " ".join(segments)


def count_moves(plies: int) -> int:
    """Full moves started by a number of half-moves."""
    return math.ceil(plies / 2)


def trim_to_move_count(sans: Sequence[T], target_moves: int) -> list[T]:
    """
    Keep at most `target_moves` move pairs.

    The result is always a prefix of the input; a non-positive target leaves
    the sequence untouched.
    """
    if target_moves <= 0:
        return list(sans)
    return list(sans[: target_moves * 2])


def select_attempt(attempts: Iterable[RecoveryAttempt]) -> RecoveryAttempt | None:
    """
    Pick the attempt with the most accepted plies.

    Ties go to the higher-priority segmentation strategy.
    """
    best: RecoveryAttempt | None = None
    for attempt in attempts:
        if best is None:
            best = attempt
            continue
        if attempt.accepted_plies > best.accepted_plies:
            best = attempt
        elif (
            attempt.accepted_plies == best.accepted_plies
            and attempt.strategy.priority < best.strategy.priority
        ):
            best = attempt
    return best


def failure_result(
    failed_at: FailureLocator | None,
    metadata: GameMetadata | None = None,
    total_expected: int | None = None,
) -> RecoveryResult:
    """A failed recovery carrying a human-readable, locator-bearing message."""
    locator = failed_at or FailureLocator.start()
    return RecoveryResult(
        success=False,
        total_expected=total_expected,
        metadata=metadata,
        failed_at=locator,
        error=f"Unable to recover a legal move sequence. Problem detected near {locator}.",
    )


def quality_warning(
    moves_found: int,
    total_expected: int,
    failed_at: FailureLocator | None,
) -> str:
    """Advisory shown when fewer moves were recovered than the source holds."""
    message = f"Only {moves_found} of {total_expected} moves could be recovered."
    if failed_at is not None and not failed_at.is_start:
        message += f" Replay stopped at {failed_at}."
    message += (
        " Some moves may be unclear in the source."
        " Consider providing a clearer copy for complete game analysis."
    )
    return message


def build_result(
    attempt: RecoveryAttempt | None,
    expected_total: int | None = None,
    metadata: GameMetadata | None = None,
) -> RecoveryResult:
    """
    Turn the winning attempt into a RecoveryResult.

    Args:
        attempt: The selected attempt (None if no attempt could be made)
        expected_total: Move pairs the source is known to contain, if any
        metadata: Game metadata to attach

    Returns:
        Success, partial success or failure as described by the attempt.
    """
    target = expected_total if expected_total and expected_total > 0 else None

    if attempt is None or attempt.accepted_plies == 0:
        failed_at = attempt.failed_at if attempt is not None else None
        return failure_result(failed_at, metadata=metadata, total_expected=target)

    tokens = list(attempt.accepted)
    moves_found = count_moves(len(tokens))

    if target is not None and moves_found > target:
        tokens = trim_to_move_count(tokens, target)
        moves_found = target

    if target is not None:
        is_partial = moves_found < target
    else:
        is_partial = attempt.halted

    failed_at = attempt.failed_at
    if target is not None and moves_found >= target:
        failed_at = None

    warning = None
    if target is not None and moves_found < target:
        warning = quality_warning(moves_found, target, failed_at)

    return RecoveryResult(
        success=True,
        movetext=format_movetext([token.text for token in tokens]),
        moves_found=moves_found,
        is_partial=is_partial,
        total_expected=target,
        quality_warning=warning,
        metadata=metadata,
        failed_at=failed_at,
        tokens=tuple(tokens),
        strategy=attempt.strategy,
    )

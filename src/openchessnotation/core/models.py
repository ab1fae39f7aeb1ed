"""
Data models for OpenChessNotation.

This module defines the core data structures of the notation recovery
pipeline, following immutable/frozen dataclass patterns for safety and clarity.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any
import math


class SourceTag(Enum):
    """How a move token came to be accepted by the rules oracle."""
    DIRECT = "direct"
    SKELETON = "skeleton-repaired"
    DISAMBIGUATED = "disambiguated"
    FUZZY = "fuzzy-repaired"
    SUBSTITUTION = "substitution-repaired"


class SegmentationStrategy(Enum):
    """Ways of turning normalized text into candidate move lists, best first."""
    DIRECT_LOAD = "direct-load"        # Whole move-text loaded by the oracle
    NUMBERED_PAIRS = "numbered-pairs"  # "12. Nf3 Nc6" patterns
    TOKEN_STREAM = "token-stream"      # Whitespace tokens, numbers dropped
    FLAT_STREAM = "flat-stream"        # Any move-shaped substring

    @property
    def priority(self) -> int:
        """Lower values win ties during attempt selection."""
        return list(SegmentationStrategy).index(self)


@dataclass(frozen=True)
class MoveToken:
    """
    A move accepted at a given ply of a replay.

    `text` is the canonical SAN produced by the rules oracle. `original`
    keeps the transcribed token when a repair changed it.
    """
    text: str
    ply: int                             # 1-based half-move index
    source: SourceTag = SourceTag.DIRECT
    original: str | None = None

    @property
    def is_white(self) -> bool:
        return self.ply % 2 == 1

    @property
    def move_number(self) -> int:
        return (self.ply + 1) // 2

    @property
    def was_repaired(self) -> bool:
        return self.source is not SourceTag.DIRECT


@dataclass(frozen=True)
class FailureLocator:
    """Where replay stopped: the offending token and its move-number label."""
    token: str | None
    move_number: int = 0

    @staticmethod
    def start() -> "FailureLocator":
        """Locator used when nothing was ever accepted."""
        return FailureLocator(token=None, move_number=0)

    @property
    def is_start(self) -> bool:
        return self.token is None

    def __str__(self) -> str:
        if self.is_start:
            return "start"
        return f"{self.token} (move {self.move_number})"


@dataclass(frozen=True)
class RecoveryAttempt:
    """
    One segmentation strategy's replay outcome.

    `candidates` is the ordered token list the strategy produced;
    `accepted` is the prefix the oracle accepted (directly or repaired).
    """
    strategy: SegmentationStrategy
    candidates: tuple[str, ...]
    accepted: tuple[MoveToken, ...] = field(default_factory=tuple)
    failed_at: FailureLocator | None = None

    @property
    def accepted_plies(self) -> int:
        return len(self.accepted)

    @property
    def accepted_moves(self) -> int:
        return math.ceil(len(self.accepted) / 2)

    @property
    def halted(self) -> bool:
        return self.failed_at is not None

    @property
    def is_complete(self) -> bool:
        """True when every candidate token was consumed."""
        return not self.halted and len(self.accepted) == len(self.candidates)

    @property
    def sans(self) -> list[str]:
        return [token.text for token in self.accepted]

    @property
    def repaired_count(self) -> int:
        return sum(1 for token in self.accepted if token.was_repaired)


@dataclass(frozen=True)
class PlayerInfo:
    """Name and optional rating of one player."""
    name: str
    rating: str | None = None


@dataclass(frozen=True)
class GameMetadata:
    """
    Optional header information attached to a recovered game.

    Extracted independently of move validity; `clock_times` holds the
    remaining time in seconds for each half-move when annotated.
    """
    white: PlayerInfo = field(default_factory=lambda: PlayerInfo("White"))
    black: PlayerInfo = field(default_factory=lambda: PlayerInfo("Black"))
    event: str | None = None
    site: str | None = None
    date: str | None = None
    round: str | None = None
    result: str | None = None
    time_control: str | None = None
    clock_times: tuple[int, ...] | None = None

    def with_clock_times(self, clock_times: tuple[int, ...] | None) -> "GameMetadata":
        return replace(self, clock_times=clock_times)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "white": {"name": self.white.name, "rating": self.white.rating},
            "black": {"name": self.black.name, "rating": self.black.rating},
        }
        optional = {
            "event": self.event,
            "site": self.site,
            "date": self.date,
            "round": self.round,
            "result": self.result,
            "timeControl": self.time_control,
            "clockTimes": list(self.clock_times) if self.clock_times else None,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


@dataclass(frozen=True)
class RecoveryResult:
    """
    The externally visible outcome of a recovery.

    A partial recovery is still a success; `success` is False only when no
    legal move at all could be recovered.
    """
    success: bool
    movetext: str | None = None
    moves_found: int = 0
    is_partial: bool = False
    total_expected: int | None = None
    quality_warning: str | None = None
    metadata: GameMetadata | None = None
    failed_at: FailureLocator | None = None
    error: str | None = None

    # Diagnostics
    tokens: tuple[MoveToken, ...] = field(default_factory=tuple)
    strategy: SegmentationStrategy | None = None

    @property
    def repairs(self) -> tuple[MoveToken, ...]:
        """Accepted tokens that needed a correction."""
        return tuple(token for token in self.tokens if token.was_repaired)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping used by the CLI and HTTP surfaces."""
        data: dict[str, Any] = {
            "success": self.success,
            "pgn": self.movetext,
            "movesFound": self.moves_found,
            "isPartial": self.is_partial,
        }
        if self.total_expected is not None:
            data["totalMovesInImage"] = self.total_expected
        if self.quality_warning:
            data["imageQualityWarning"] = self.quality_warning
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        if self.failed_at is not None:
            data["failedAt"] = str(self.failed_at)
        if self.error:
            data["error"] = self.error
        if self.strategy is not None:
            data["strategy"] = self.strategy.value
        if self.repairs:
            data["repairs"] = [
                {"ply": t.ply, "from": t.original, "to": t.text, "source": t.source.value}
                for t in self.repairs
            ]
        return data


@dataclass(frozen=True)
class ExtractionPayload:
    """
    Structured output of a vision-language extraction service.

    `total_moves` is the service's own count of move pairs visible in the
    source and is only ever used as an advisory upper bound.
    """
    moves: str
    total_moves: int = 0
    confidence: str = "unknown"
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def has_notation(self) -> bool:
        moves = self.moves.strip()
        return moves != "NO_NOTATION_FOUND" and len(moves) >= 5

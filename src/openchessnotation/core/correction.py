"""
OCR error correction for move tokens the rules oracle rejected.

Four strategies are tried in a fixed order and the first success wins:

1. Skeleton completion: a token missing one component (B6, Bf, f6) is
   completed when exactly one legal move fits.
2. Fuzzy matching: the legal move at the smallest edit distance, if that
   distance is within the threshold and not tied.
3. Disambiguation: Rd1 becomes Rad1/R1d1 by trying each file, then rank.
4. Substitution table: single-character confusions (a/g, 5/6, l/1, ...)
   validated on a disposable copy of the position.

A failed correction is an ordinary outcome and is reported as None.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable

from rapidfuzz.distance import Levenshtein

from openchessnotation.config import RecoveryConfig
from openchessnotation.core.interfaces import RulesOracle
from openchessnotation.core.models import SourceTag
from openchessnotation.core.normalize import strip_check_symbols


logger = logging.getLogger(__name__)


PIECE_LETTERS = "RNBQK"
FILES = "abcdefgh"
RANKS = "12345678"

_PIECE_RANK = re.compile(r"^[RNBQK][1-8]$")
_PIECE_FILE = re.compile(r"^[RNBQK][a-h]$")
_BARE_SQUARE = re.compile(r"^[a-h][1-8]$")
_UNDISAMBIGUATED = re.compile(r"^([RNBQK])(x?)([a-h][1-8])$")
_CHECK_SUFFIX = re.compile(r"[+#]+$")


@dataclass(frozen=True)
class Correction:
    """A legal replacement for a rejected token and how it was found."""
    san: str
    source: SourceTag


def _unique(candidates: list[str]) -> str | None:
    return candidates[0] if len(candidates) == 1 else None


class CorrectionEngine:
    """
    Repairs rejected move tokens against the current legal moves.

    The engine never mutates the oracle it is given; substitutions are
    validated on `oracle.copy()`.
    """

    def __init__(self, config: RecoveryConfig | None = None) -> None:
        self._config = config or RecoveryConfig()

    @property
    def config(self) -> RecoveryConfig:
        return self._config

    def correct(self, token: str, oracle: RulesOracle) -> Correction | None:
        """
        Find a legal move the token most plausibly stands for.

        Args:
            token: A cleaned move token the oracle rejected
            oracle: The live position (not modified)

        Returns:
            The first successful Correction, or None if the token is
            unrecoverable in this position.
        """
        strategies: tuple[Callable[[str, RulesOracle], Correction | None], ...] = (
            self.complete_skeleton,
            self.match_fuzzy,
            self.complete_disambiguation,
            self.apply_substitutions,
        )
        for strategy in strategies:
            correction = strategy(token, oracle)
            if correction is not None:
                logger.debug(
                    f"Corrected {token!r} -> {correction.san!r} ({correction.source.value})"
                )
                return correction
        return None

    def complete_skeleton(self, token: str, oracle: RulesOracle) -> Correction | None:
        """Complete a token missing exactly one component, if unambiguous."""
        shape = strip_check_symbols(token)
        legal_moves = oracle.legal_moves()
        stripped = [(move, strip_check_symbols(move)) for move in legal_moves]

        match: str | None = None
        if _PIECE_RANK.match(shape):
            # B6 -> Bf6
            piece, rank = shape
            match = _unique([
                move for move, bare in stripped
                if len(bare) == 3 and bare.startswith(piece) and bare.endswith(rank)
            ])
        elif _PIECE_FILE.match(shape):
            # Bf -> Bf6
            match = _unique([
                move for move, bare in stripped
                if len(bare) == 3 and bare.startswith(shape)
            ])
        elif _BARE_SQUARE.match(shape):
            # f6 -> Nf6 when no pawn can go there
            match = _unique([
                move for move, bare in stripped
                if len(bare) == 3 and bare[0] in PIECE_LETTERS and bare.endswith(shape)
            ])

        if match is None:
            return None
        return Correction(match, SourceTag.SKELETON)

    def match_fuzzy(self, token: str, oracle: RulesOracle) -> Correction | None:
        """
        Pick the legal move closest to the token by edit distance.

        Capture and check marks are ignored and zeros read as O. The best
        candidate must be within the length-dependent threshold and strictly
        closer than every other legal move, unless ties are allowed by
        configuration (then the first enumerated wins).
        """
        normalized = strip_check_symbols(token).replace("0", "O")
        if not normalized:
            return None

        threshold = self._config.fuzzy_threshold(len(normalized))
        best_move: str | None = None
        best_distance = 0
        tied = False

        for legal in oracle.legal_moves():
            target = strip_check_symbols(legal)
            if normalized == target:
                return Correction(legal, SourceTag.FUZZY)

            distance = Levenshtein.distance(normalized, target)
            if best_move is None or distance < best_distance:
                best_move, best_distance, tied = legal, distance, False
            elif distance == best_distance:
                tied = True

        if best_move is None or best_distance > threshold:
            return None
        if tied and not self._config.fuzzy_accept_ties:
            logger.debug(f"Fuzzy match for {token!r} tied at distance {best_distance}")
            return None
        return Correction(best_move, SourceTag.FUZZY)

    def complete_disambiguation(self, token: str, oracle: RulesOracle) -> Correction | None:
        """Insert a missing file or rank disambiguator after the piece letter."""
        match = _UNDISAMBIGUATED.match(_CHECK_SUFFIX.sub("", token))
        if not match:
            return None

        piece, capture, destination = match.groups()
        legal = {_CHECK_SUFFIX.sub("", move): move for move in oracle.legal_moves()}

        for qualifier in FILES + RANKS:
            candidate = f"{piece}{qualifier}{capture}{destination}"
            if candidate in legal:
                return Correction(legal[candidate], SourceTag.DISAMBIGUATED)
        return None

    def apply_substitutions(self, token: str, oracle: RulesOracle) -> Correction | None:
        """Try each configured character confusion on a disposable position."""
        for rule in self._config.substitutions:
            corrected = rule.apply(token)
            if corrected == token:
                continue

            trial = oracle.copy()
            try:
                san = trial.apply(corrected)
            except Exception as e:
                logger.debug(f"Substitution {corrected!r} failed validation: {e}")
                continue

            if san is not None:
                return Correction(san, SourceTag.SUBSTITUTION)
        return None

"""
Move segmentation: turning normalized text into candidate move lists.

Each strategy reads the text differently and produces an ordered list of
SAN-like tokens for the legality replayer. Strategies are ordered by
priority; which one wins is decided later by replay, not by token count.
"""

import re

from openchessnotation.core.models import SegmentationStrategy
from openchessnotation.core.normalize import clean_move


# Strict move grammar: piece, optional disambiguators, capture, square, promotion
MOVE_PATTERN = r"[NBRQK]?[a-h]?[1-8]?x?[a-h][1-8](?:=?[NBRQ])?"

_MOVE_SHAPE = re.compile(rf"^(?:{MOVE_PATTERN}|O-O-O|O-O)$")
_SKELETON_SHAPE = re.compile(r"^[NBRQK][a-h1-8]$")
_FLAT_MOVE = re.compile(rf"O-O-O|O-O|{MOVE_PATTERN}[+#]?")
_DECORATION = re.compile(r"[+#!?]")

# "12. e4 e5", "12.e4", "12... Nf6"
_NUMBERED_MOVE = re.compile(
    r"(?<![\w.])(\d{1,3})\s*(\.+|…)\s*(\S+)(?:\s+(?!\d{1,3}\s*(?:\.|…))(\S+))?"
)

_MOVE_NUMBER = re.compile(r"^\d{1,3}(?:\.+|…)")
_RESULT_TOKEN = re.compile(r"^(?:1-0|0-1|1/2-1/2|½-½|10|01|1/21/2|½½|\*)$")
_NAG_TOKEN = re.compile(r"^\$\d+$")
_ELLIPSIS_TOKEN = re.compile(r"^(?:\.+|…)$")


def strip_pgn_metadata(text: str) -> str:
    """
    Remove everything from PGN text that is not main-line move-text.

    Header tags, brace and semicolon comments are removed, then parenthesized
    variations are removed innermost first until nothing changes, so nested
    variations disappear completely.
    """
    if not text:
        return ""

    sanitized = re.sub(r"\[[^\]]*\]", " ", text)
    sanitized = re.sub(r"\{[^}]*\}", " ", sanitized)
    sanitized = re.sub(r";[^\n]*", " ", sanitized)

    previous = None
    while sanitized != previous:
        previous = sanitized
        sanitized = re.sub(r"\([^()]*\)", " ", sanitized)

    return re.sub(r"\s+", " ", sanitized).strip()


def is_move_shaped(token: str) -> bool:
    """Whether a token looks like a SAN move (syntax only, no legality)."""
    if not token or len(token) < 2:
        return False
    return bool(_MOVE_SHAPE.match(_DECORATION.sub("", clean_move(token))))


def is_repairable_shape(token: str) -> bool:
    """Move-shaped, or a skeleton like B6 / Bf the correction engine can complete."""
    if is_move_shaped(token):
        return True
    return bool(_SKELETON_SHAPE.match(_DECORATION.sub("", clean_move(token))))


def numbered_pairs(text: str) -> list[str]:
    """
    Extract moves following move numbers.

    Builds a sparse mapping from move number to (white, black) slots, filling
    a slot only with a token of plausible move shape. "12... Nf6" fills
    Black's slot. A later occurrence of the same number overwrites earlier
    slots. Moves are emitted in ascending move-number order.
    """
    slots: dict[int, list[str | None]] = {}

    for match in _NUMBERED_MOVE.finditer(text):
        number = int(match.group(1))
        dots, first, second = match.group(2), match.group(3), match.group(4)
        entry = slots.setdefault(number, [None, None])

        if dots == "…" or len(dots) >= 3:
            if is_repairable_shape(first):
                entry[1] = clean_move(first)
            continue

        if is_repairable_shape(first):
            entry[0] = clean_move(first)
            if second and is_repairable_shape(second):
                entry[1] = clean_move(second)

    tokens: list[str] = []
    for number in sorted(slots):
        tokens.extend(move for move in slots[number] if move)
    return tokens


def token_stream(text: str) -> list[str]:
    """
    Split stripped move-text on whitespace, dropping numbers and results.

    No shape filter is applied so malformed tokens reach the corrector.
    """
    tokens: list[str] = []
    for raw in strip_pgn_metadata(text).split():
        token = _MOVE_NUMBER.sub("", raw)
        if not token or token.isdigit():
            continue
        if _RESULT_TOKEN.match(token) or _NAG_TOKEN.match(token) or _ELLIPSIS_TOKEN.match(token):
            continue
        cleaned = clean_move(token)
        if cleaned:
            tokens.append(cleaned)
    return tokens


def flat_stream(text: str) -> list[str]:
    """Every substring matching the strict move grammar, numbering ignored."""
    return [clean_move(match.group()) for match in _FLAT_MOVE.finditer(text)]


def count_movetext_tokens(text: str) -> int:
    """Number of move tokens in stripped move-text (see token_stream)."""
    return len(token_stream(text))


def segment(text: str) -> list[tuple[SegmentationStrategy, list[str]]]:
    """
    Run every token-based strategy on normalized text, in priority order.

    Strategies that find nothing are left out. The direct whole-text load is
    handled by the pipeline through the rules oracle.
    """
    stripped = strip_pgn_metadata(text)
    extractors = (
        (SegmentationStrategy.NUMBERED_PAIRS, numbered_pairs),
        (SegmentationStrategy.TOKEN_STREAM, token_stream),
        (SegmentationStrategy.FLAT_STREAM, flat_stream),
    )

    segments: list[tuple[SegmentationStrategy, list[str]]] = []
    for strategy, extract in extractors:
        tokens = extract(stripped)
        if tokens:
            segments.append((strategy, tokens))
    return segments

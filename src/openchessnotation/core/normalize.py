"""
Text normalization for transcribed chess notation.

Canonicalizes castling, piece letters, capture marks and hyphens so that
later stages see consistent SAN-like tokens. `normalize_notation` is a pure
function and idempotent: later stages re-normalize single tokens, so running
it on already normalized text must be a no-op.
"""

import re


# Castling rewrites, longest form first
_CASTLING_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"0\s*-\s*0\s*-\s*0"), "O-O-O"),
    (re.compile(r"0\s*-\s*0"), "O-O"),
    # Latin o/O and Cyrillic о/О
    (re.compile(r"[oOоО]\s*-\s*[oOоО]\s*-\s*[oOоО]"), "O-O-O"),
    (re.compile(r"[oOоО]\s*-\s*[oOоО]"), "O-O"),
    (re.compile(r"\b000\b"), "O-O-O"),
    (re.compile(r"\b00\b"), "O-O"),
)

# Old-style piece letters, only when a square/capture follows
_PIECE_LETTER_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bK[nN](?=[a-h1-8x-])"), "N"),
    (re.compile(r"\bK[tT](?=[a-h1-8x-])"), "N"),
    (re.compile(r"\bK[iI](?=[a-h1-8x-])"), "K"),
)

_CASTLE_LONG_SENTINEL = "\x00CASTLE_LONG\x00"
_CASTLE_SHORT_SENTINEL = "\x00CASTLE_SHORT\x00"

# Upper bound on rewrite passes; real input settles after one or two
_MAX_PASSES = 8

_ANNOTATION_SUFFIX = re.compile(r"[!?]+$")
_CHECK_CAPTURE_SYMBOLS = re.compile(r"[+#x]")
_CASTLING_TOKEN = re.compile(r"^O-O(?:-O)?$", re.IGNORECASE)


def clean_input(text: str | None) -> str:
    """
    Remove presentation noise commonly wrapped around pasted or generated PGN.

    Strips Markdown code fences, bold and heading markers, non-breaking
    spaces and carriage returns. Returns "" for empty input.
    """
    if not text:
        return ""

    cleaned = re.sub(r"```pgn\s*", "", text, flags=re.IGNORECASE)
    cleaned = cleaned.replace("```", "")
    cleaned = cleaned.replace("**", "")
    cleaned = re.sub(r"##\s*", "", cleaned)
    cleaned = cleaned.replace("\u00a0", " ")
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    return cleaned.strip()


def _normalize_once(text: str) -> str:
    normalized = text
    for pattern, replacement in _CASTLING_RULES:
        normalized = pattern.sub(replacement, normalized)

    for pattern, replacement in _PIECE_LETTER_RULES:
        normalized = pattern.sub(replacement, normalized)

    normalized = normalized.replace(":", "x")

    # Drop hyphens (N-f3 -> Nf3) while keeping castling intact
    normalized = normalized.replace("O-O-O", _CASTLE_LONG_SENTINEL)
    normalized = normalized.replace("O-O", _CASTLE_SHORT_SENTINEL)
    normalized = normalized.replace("-", "")
    normalized = normalized.replace(_CASTLE_LONG_SENTINEL, "O-O-O")
    normalized = normalized.replace(_CASTLE_SHORT_SENTINEL, "O-O")
    return normalized


def normalize_notation(text: str) -> str:
    """
    Canonicalize chess notation in free text.

    - Castling variants (0-0, 00, o-o, Cyrillic, spaced) become O-O / O-O-O
    - Kn/Kt become N and Ki becomes K when followed by a square or capture
    - Capture colons become x
    - Remaining hyphens are removed (N-f3 -> Nf3)

    Rewrites are repeated until the text stops changing, which makes the
    function idempotent even when hyphen removal exposes a new match.
    """
    current = text
    for _ in range(_MAX_PASSES):
        updated = _normalize_once(current)
        if updated == current:
            break
        current = updated
    return current


def clean_move(token: str) -> str:
    """Normalize a single move token and drop trailing !/? annotations."""
    cleaned = normalize_notation(token.strip())
    cleaned = _ANNOTATION_SUFFIX.sub("", cleaned)

    if _CASTLING_TOKEN.match(cleaned):
        return cleaned.upper()

    return cleaned


def strip_check_symbols(san: str) -> str:
    """Remove check, mate and capture marks so SAN strings compare by shape."""
    return _CHECK_CAPTURE_SYMBOLS.sub("", san)

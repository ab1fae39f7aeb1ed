"""
PGN header and clock annotation extraction.

Metadata is gathered opportunistically and independently of whether the
moves themselves turn out to be legal.
"""

from typing import Any, Mapping
import re

from openchessnotation.core.models import GameMetadata, PlayerInfo


# Values used by PGN writers for "unknown"
PLACEHOLDER_VALUES = frozenset({"?", "??"})

_CLOCK_PATTERN = re.compile(r"\{\s*\[%clk\s+(\d+):(\d+):(\d+)\]\s*\}")


def _tag_value(text: str, tag: str) -> str | None:
    match = re.search(rf'\[{tag}\s+"([^"]+)"\]', text, re.IGNORECASE)
    return match.group(1) if match else None


def _known(value: str | None) -> str | None:
    if value is None or value.strip() in PLACEHOLDER_VALUES:
        return None
    return value


def extract_metadata(text: str) -> GameMetadata | None:
    """
    Extract PGN header tags from text.

    Args:
        text: Raw or normalized PGN text

    Returns:
        GameMetadata if a White, Black or Event tag was present, else None.
        Player names and ratings of "?" or "??" are treated as missing.
    """
    if not text:
        return None

    white_name = _tag_value(text, "White")
    black_name = _tag_value(text, "Black")
    event = _tag_value(text, "Event")

    if white_name is None and black_name is None and event is None:
        return None

    return GameMetadata(
        white=PlayerInfo(
            name=_known(white_name) or "White",
            rating=_known(_tag_value(text, "WhiteElo")),
        ),
        black=PlayerInfo(
            name=_known(black_name) or "Black",
            rating=_known(_tag_value(text, "BlackElo")),
        ),
        event=event,
        site=_tag_value(text, "Site"),
        date=_tag_value(text, "Date"),
        round=_tag_value(text, "Round"),
        result=_tag_value(text, "Result"),
        time_control=_tag_value(text, "TimeControl"),
    )


def extract_clock_times(text: str) -> tuple[int, ...] | None:
    """
    Extract remaining clock time per half-move from {[%clk H:MM:SS]} comments.

    Returns a tuple of seconds in ply order, or None if no clock was found.
    """
    if not text:
        return None

    clock_times = tuple(
        int(hours) * 3600 + int(minutes) * 60 + int(seconds)
        for hours, minutes, seconds in _CLOCK_PATTERN.findall(text)
    )
    return clock_times or None


def metadata_from_extraction(payload: Mapping[str, Any]) -> GameMetadata | None:
    """
    Build metadata from a vision extraction response.

    The service reports "White"/"Black" when it could not read the names, so
    metadata is only returned when something beyond those defaults is known.
    """
    white_name = _known(str(payload.get("whiteName") or "")) or "White"
    black_name = _known(str(payload.get("blackName") or "")) or "Black"

    meaningful = (
        white_name != "White"
        or black_name != "Black"
        or payload.get("event")
        or payload.get("whiteRating")
        or payload.get("blackRating")
    )
    if not meaningful:
        return None

    def text_field(key: str) -> str | None:
        value = payload.get(key)
        if value is None or value == "":
            return None
        return _known(str(value))

    return GameMetadata(
        white=PlayerInfo(name=str(white_name), rating=text_field("whiteRating")),
        black=PlayerInfo(name=str(black_name), rating=text_field("blackRating")),
        event=text_field("event"),
        site=text_field("site"),
        date=text_field("date"),
        round=text_field("round"),
    )

"""Chess rules oracle adapters."""

from openchessnotation.rules.oracle import ChessOracle, MovetextLoadError

__all__ = [
    "ChessOracle",
    "MovetextLoadError",
]

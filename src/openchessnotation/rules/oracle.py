"""
Rules oracle backed by python-chess.

Wraps a `chess.Board` behind the small string-based contract the recovery
pipeline needs: enumerate legal SAN moves, apply a SAN move without
corrupting state on failure, report history, and load whole move-text.
"""

import io
import logging
import re

import chess
import chess.pgn


logger = logging.getLogger(__name__)

_FEN_TAG = re.compile(r"^\s*\[FEN\s", re.MULTILINE)


class MovetextLoadError(Exception):
    """Raised when a move-text blob cannot be loaded as a legal game."""

    def __init__(self, message: str, token: str | None = None):
        super().__init__(message)
        self.token = token
        self.message = message


class ChessOracle:
    """
    A single game replay owned by one recovery attempt.

    Moves are exchanged as SAN strings; the oracle always reports the
    canonical SAN of what it accepted (including + and # suffixes).
    """

    def __init__(self, fen: str | None = None) -> None:
        """
        Create a game at the standard starting position or from a FEN.

        Raises:
            ValueError: If the FEN is not a valid position
        """
        self._board = chess.Board(fen) if fen else chess.Board()
        self._start_fen = self._board.fen()
        self._history: list[str] = []

    @property
    def fen(self) -> str:
        return self._board.fen()

    def legal_moves(self) -> list[str]:
        """All legal moves in the current position, as canonical SAN."""
        return [self._board.san(move) for move in self._board.legal_moves]

    def apply(self, san: str) -> str | None:
        """
        Apply a SAN move.

        Returns:
            The canonical SAN of the applied move, or None if the move is
            invalid, illegal or ambiguous. State is unchanged on failure.
        """
        if not san:
            return None

        try:
            move = self._board.parse_san(san)
        except ValueError as e:
            logger.debug(f"Oracle rejected {san!r}: {e}")
            return None

        if not move:
            # Null moves ("--", "Z0") are not moves of the game
            return None

        canonical = self._board.san(move)
        self._board.push(move)
        self._history.append(canonical)
        return canonical

    def history(self) -> list[str]:
        """SAN of every move applied so far, in order."""
        return list(self._history)

    def copy(self) -> "ChessOracle":
        """A disposable oracle in the same position."""
        clone = ChessOracle.__new__(ChessOracle)
        clone._board = self._board.copy()
        clone._start_fen = self._start_fen
        clone._history = list(self._history)
        return clone

    def load_movetext(self, text: str) -> list[str]:
        """
        Load a full PGN/move-text blob, replacing the current game.

        Args:
            text: Move-text, optionally with headers, comments and variations

        Returns:
            The SAN history of the loaded main line

        Raises:
            MovetextLoadError: If the text holds no moves or any move fails
        """
        if self._start_fen != chess.STARTING_FEN and not _FEN_TAG.search(text):
            # Header lines may directly precede move-text or other headers
            text = f'[FEN "{self._start_fen}"]\n[SetUp "1"]\n{text}'

        try:
            game = chess.pgn.read_game(io.StringIO(text))
        except (ValueError, KeyError) as e:
            raise MovetextLoadError(f"Unreadable move-text: {e}") from e

        if game is None:
            raise MovetextLoadError("No game found in move-text")

        if game.errors:
            raise MovetextLoadError(f"Move-text contains errors: {game.errors[0]}")

        board = game.board()
        history: list[str] = []
        for move in game.mainline_moves():
            if not move:
                raise MovetextLoadError("Move-text contains a null move", token=board.san(move))
            history.append(board.san(move))
            board.push(move)

        if not history:
            raise MovetextLoadError("Move-text contains no moves")

        self._board = board
        self._history = history
        return list(history)

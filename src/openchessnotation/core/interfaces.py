"""
Protocol definitions for the pipeline's external collaborators.

This module defines the structural interfaces (Protocols) that allow the
rules oracle, OCR engine and vision extraction service to be swapped
without changing the recovery pipeline.
"""

from typing import Any, Protocol, runtime_checkable

from openchessnotation.core.models import ExtractionPayload


@runtime_checkable
class RulesOracle(Protocol):
    """
    Protocol for the authoritative chess rules engine.

    One instance represents one game in progress and is owned by a single
    recovery attempt; nothing is shared between attempts.
    """

    def legal_moves(self) -> list[str]:
        """All legal moves in the current position, as canonical SAN."""
        ...

    def apply(self, san: str) -> str | None:
        """
        Apply a SAN move and return its canonical form.

        Returns None for illegal input and leaves the position unchanged.
        """
        ...

    def history(self) -> list[str]:
        """Canonical SAN of all moves applied so far."""
        ...

    def copy(self) -> "RulesOracle":
        """A disposable oracle in the same position."""
        ...

    def load_movetext(self, text: str) -> list[str]:
        """
        Load a full move-text blob and return the resulting history.

        Raises on any text that does not load completely.
        """
        ...


@runtime_checkable
class OCREngine(Protocol):
    """
    Protocol for optical character recognition engines.

    Recognition is synchronous and CPU bound; callers run it in a worker
    thread when they need it to be cancellable.
    """

    @property
    def name(self) -> str:
        """Human-readable name of this engine."""
        ...

    def recognize_text(self, image: Any) -> str:
        """
        Return best-effort raw text for an image.

        No structure is guaranteed; empty text is a valid result.
        """
        ...


@runtime_checkable
class ExtractionService(Protocol):
    """
    Protocol for vision-language notation extraction services.

    Implementations send an image together with a structured-extraction
    prompt and return the parsed response.
    """

    @property
    def name(self) -> str:
        """Human-readable name of this service."""
        ...

    def extract(self, image: Any) -> ExtractionPayload:
        """
        Extract moves and game information from a scoresheet image.

        Raises ExtractionError when the service fails or answers nonsense.
        """
        ...

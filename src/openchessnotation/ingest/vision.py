"""
Vision extraction service using OpenAI vision models.

Sends a scoresheet photo together with a structured-extraction prompt and
parses the JSON answer into an ExtractionPayload. Handwritten scoresheets
are where Tesseract struggles most, so this is the reader's fallback.
"""

import json
import logging
import re
from typing import Any

from openai import OpenAI

from openchessnotation.core.models import ExtractionPayload
from openchessnotation.ingest.images import encode_png_base64, load_image


logger = logging.getLogger(__name__)


NO_NOTATION_FOUND = "NO_NOTATION_FOUND"

# System prompt for scoresheet transcription
SCORESHEET_PROMPT = """You are an expert chess analyst and handwriting recognition specialist. Your task is to extract chess moves AND player information from a scoresheet image.

Context:
- The image is a chess scoresheet, usually handwritten.
- It often has MULTIPLE COLUMNS of moves (e.g. moves 1-30 on the left, 31-60 on the right).
- Read down the first column completely before moving to the next.
- Extract ALL visible moves, even if handwriting is unclear.

Notation rules:
1. Castling uses the letter O: O-O and O-O-O (never zero)
2. Knight moves use "N" (not K or Kn)
3. Pawn moves have no piece letter (just "e4", not "Pe4")
4. Captures use "x": Nxd5, exd5
5. Use chess context: if a move cannot be legal, prefer a similar legal move

Respond with ONLY a JSON object in this exact format:
{
  "whiteName": "Magnus Carlsen",
  "blackName": "Fabiano Caruana",
  "whiteRating": "2882",
  "blackRating": "2835",
  "event": "World Championship 2018",
  "site": "London",
  "date": "2018.11.09",
  "round": "1",
  "moves": "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7",
  "totalMoves": 5,
  "confidence": "high"
}

Rules for output:
- whiteName/blackName: from the top of the scoresheet, otherwise "White" and "Black"
- whiteRating, blackRating, event, site, date (YYYY.MM.DD), round: omit if not visible
- moves: PGN move-text with move numbers, dots and moves separated by spaces
- totalMoves: number of move pairs visible on the scoresheet (count all rows with moves)
- confidence: "high", "medium" or "low" depending on legibility
- If no chess notation is found, return: {"whiteName": "White", "blackName": "Black", "moves": "NO_NOTATION_FOUND", "totalMoves": 0, "confidence": "low"}"""


class ExtractionError(Exception):
    """Raised when the vision service fails or returns an unusable answer."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def parse_extraction_response(content: str | None) -> ExtractionPayload:
    """
    Parse a model answer into an ExtractionPayload.

    The JSON object may be wrapped in prose or markdown fences. An answer
    without a JSON object is taken to be plain move-text.
    """
    content = (content or "").strip()
    match = re.search(r"\{[\s\S]*\}", content)
    if not match:
        return ExtractionPayload(moves=content)

    try:
        data = json.loads(match.group())
    except json.JSONDecodeError:
        logger.debug("Vision answer is not valid JSON; using it as move-text")
        return ExtractionPayload(moves=content)

    if not isinstance(data, dict):
        return ExtractionPayload(moves=content)

    try:
        total_moves = int(data.get("totalMoves") or 0)
    except (TypeError, ValueError):
        total_moves = 0

    return ExtractionPayload(
        moves=str(data.get("moves") or ""),
        total_moves=max(total_moves, 0),
        confidence=str(data.get("confidence") or "unknown"),
        raw=data,
    )


class VisionExtractionService:
    """
    Scoresheet extraction with an OpenAI vision model.

    Requires OPENAI_API_KEY environment variable to be set (or an explicit
    api_key / client).
    """

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str | None = None,
        timeout: float | None = None,
        client: Any = None,
    ) -> None:
        """
        Initialize the extraction service.

        Args:
            model: OpenAI model to use (gpt-4o recommended)
            api_key: OpenAI API key
            timeout: Request timeout in seconds
            client: Preconfigured OpenAI-compatible client
        """
        self._model = model
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return f"Vision ({self._model})"

    def _get_client(self) -> Any:
        """Get or create the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ExtractionError(
                    "OpenAI API key not found. Set OPENAI_API_KEY environment variable "
                    "or pass api_key to the constructor."
                )
            self._client = OpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def extract(self, image: Any) -> ExtractionPayload:
        """
        Extract moves and game information from a scoresheet image.

        Args:
            image: File path, encoded bytes, PIL image or numpy array

        Returns:
            The parsed payload (check `has_notation` before using moves)

        Raises:
            ExtractionError: If the image cannot be encoded or the API call fails
        """
        client = self._get_client()

        try:
            image_b64 = encode_png_base64(load_image(image))
        except (ValueError, RuntimeError) as e:
            raise ExtractionError(f"Could not prepare image: {e}") from e

        try:
            response = client.chat.completions.create(
                model=self._model,
                messages=[
                    {
                        "role": "system",
                        "content": SCORESHEET_PROMPT,
                    },
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "text",
                                "text": "Extract the player information and moves from this scoresheet.",
                            },
                            {
                                "type": "image_url",
                                "image_url": {
                                    "url": f"data:image/png;base64,{image_b64}",
                                    "detail": "high",
                                },
                            },
                        ],
                    },
                ],
                max_tokens=2000,
                temperature=0.1,
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise ExtractionError(f"API error: {e}") from e

        payload = parse_extraction_response(content)
        logger.info(
            f"{self.name}: {payload.total_moves} moves reported, confidence {payload.confidence}"
        )
        return payload


def create_vision_service(
    api_key: str | None = None,
    model: str = "gpt-4o",
    timeout: float | None = None,
) -> VisionExtractionService:
    """
    Factory function to create a vision extraction service.

    Returns:
        Configured VisionExtractionService instance
    """
    return VisionExtractionService(model=model, api_key=api_key, timeout=timeout)

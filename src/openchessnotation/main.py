"""
OpenChessNotation - command line entry point.

Usage:
    openchessnotation text game.txt --expected-moves 40
    openchessnotation text - < ocr_output.txt
    openchessnotation image scoresheet.jpg --json
    openchessnotation pdf scoresheets.pdf --pages 1,2
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from openchessnotation import __version__
from openchessnotation.core.models import RecoveryResult
from openchessnotation.pipeline import NotationRecoveryPipeline


logger = logging.getLogger(__name__)


def _parse_pages(value: str) -> list[int]:
    """Parse a 1-indexed page list like "1,3" into 0-indexed pages."""
    try:
        pages = [int(part) - 1 for part in value.split(",") if part.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid page list: {value}")
    if not pages or any(page < 0 for page in pages):
        raise argparse.ArgumentTypeError(f"Invalid page list: {value}")
    return pages


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="openchessnotation",
        description="Recover a legal chess game from noisy notation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    # Shared options, accepted after the subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    common.add_argument("--json", action="store_true", help="Print the full result as JSON")
    common.add_argument(
        "--expected-moves",
        type=int,
        default=None,
        help="Number of move pairs the source is known to contain",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    text_parser = subparsers.add_parser("text", parents=[common], help="Recover from a text file or stdin")
    text_parser.add_argument("file", help="Text file, or - for stdin")

    image_parser = subparsers.add_parser("image", parents=[common], help="Recover from a scoresheet image")
    image_parser.add_argument("file", type=Path)

    pdf_parser = subparsers.add_parser("pdf", parents=[common], help="Recover from a PDF")
    pdf_parser.add_argument("file", type=Path)
    pdf_parser.add_argument(
        "--pages",
        type=_parse_pages,
        default=None,
        help="Comma-separated 1-indexed pages (default: all)",
    )

    return parser


def _print_result(result: RecoveryResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2))
        return

    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return

    print(result.movetext)
    if result.quality_warning:
        print(f"Warning: {result.quality_warning}", file=sys.stderr)
    elif result.is_partial and result.failed_at is not None:
        print(f"Warning: replay stopped at {result.failed_at}", file=sys.stderr)


def run(args: argparse.Namespace) -> RecoveryResult:
    pipeline = NotationRecoveryPipeline()

    if args.command == "text":
        if args.file == "-":
            text = sys.stdin.read()
        else:
            text = Path(args.file).read_text(encoding="utf-8")
        return pipeline.recover(text, expected_total=args.expected_moves)

    from openchessnotation.ingest.reader import ScoresheetReader

    reader = ScoresheetReader.from_config(pipeline=pipeline)
    if args.command == "image":
        return asyncio.run(reader.read_image(args.file, expected_total=args.expected_moves))

    return asyncio.run(
        reader.read_pdf(args.file, pages=args.pages, expected_total=args.expected_moves)
    )


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        result = run(args)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    _print_result(result, args.json)
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())

"""
Module: cli

Purpose:
    Command line entry point: resolve a decklist file or deck URL, then
    print it to PDF.

    deck-printer SOURCE [--no-tokens] [-f NAME] [-o DIR] [-c DIR] [-j N]

Exit codes:
    0 on success, 1 on any deck printer error, 130 when interrupted.
    argparse exits with 2 on usage errors.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from deck_printer import __version__
from deck_printer.config import DEFAULT_CACHE_DIR, DEFAULT_CONCURRENCY, AssembleOptions
from deck_printer.controller import assemble
from deck_printer.errors import DeckPrinterError
from deck_printer.fetching import FetchConfig, create_session
from deck_printer.resolving import parse_source, resolve

logger = logging.getLogger("deck_printer")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deck-printer",
        description="Download card images for a deck and tile them onto printable PDF pages.",
    )
    parser.add_argument("source", help="Decklist file or deck URL (moxfield.com)")
    parser.add_argument("-n", "--no-tokens", action="store_true", help="Leave the token group out")
    parser.add_argument("-f", "--filename", help="Output filename (default: '<deck name>.pdf')")
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Directory for the PDF")
    parser.add_argument(
        "-c", "--cache-dir", type=Path, default=DEFAULT_CACHE_DIR,
        help=f"Card image cache (default: {DEFAULT_CACHE_DIR})",
    )
    parser.add_argument(
        "-j", "--concurrency", type=_positive_int, default=DEFAULT_CONCURRENCY,
        help=f"Parallel downloads (default: {DEFAULT_CONCURRENCY})",
    )
    parser.add_argument("--outlines", action="store_true", help="Draw cut outlines around cards")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    fetch_config = FetchConfig()
    try:
        options = AssembleOptions(
            include_tokens=not args.no_tokens,
            cache_dir=args.cache_dir,
            output_name=args.filename,
            output_dir=args.output_dir,
            concurrency=args.concurrency,
            fetch=fetch_config,
            draw_outlines=args.outlines,
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        source = parse_source(args.source)
        with create_session(fetch_config, pool_size=args.concurrency) as session:
            deck = resolve(source, session, config=fetch_config)
            result = assemble(deck, options, session=session)
    except DeckPrinterError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.error("Interrupted")
        return 130

    logger.info(
        f"Wrote {result.page_count} page(s) with {result.card_count} card(s) to {result.output_path} "
        f"({result.downloaded} downloaded, {result.cached} cached)"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

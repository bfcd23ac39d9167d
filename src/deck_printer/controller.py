"""
Module: controller

Purpose:
    Orchestrate the complete deck printing pipeline.
    Working cards → Download → Layout → Write

Key Functions:
    - assemble(): Main entry point for printing a resolved deck
    - resolve_output_path(): Output filename rules

Key Classes:
    - AssembleResult: Complete run result
    - AssembleError: Exception for pipeline failures

Dependencies:
    - fetching: Image download
    - layout: Grid placement
    - output: PDF rendering

Used By:
    - cli: Command line entry point
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

import requests

from deck_printer.core.models import Deck, FetchResult, FetchStatus
from deck_printer.errors import DeckPrinterError
from deck_printer.fetching import AssetFetcher, DownloadError, create_session, download_all
from deck_printer.layout import LayoutConfig, layout
from deck_printer.output import DocumentWriter, PdfDocumentWriter

from .config import AssembleOptions

logger = logging.getLogger(__name__)

WriterFactory = Callable[[Path, LayoutConfig, str], DocumentWriter]

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


class AssembleError(DeckPrinterError):
    """Error during the assemble pipeline."""
    pass


@dataclass(frozen=True)
class AssembleResult:
    """
    Complete run result (immutable).

    Attributes:
        output_path: Path of the written document
        page_count: Number of pages generated
        card_count: Number of cards printed (copies included)
        results: Fetch outcome per distinct asset_id
    """

    output_path: Path
    page_count: int
    card_count: int
    results: Dict[str, FetchResult]

    @property
    def downloaded(self) -> int:
        """Assets downloaded during this run."""
        return sum(1 for r in self.results.values() if r.status is FetchStatus.DOWNLOADED)

    @property
    def cached(self) -> int:
        """Assets that were already in the cache."""
        return sum(1 for r in self.results.values() if r.status is FetchStatus.CACHED)


def resolve_output_path(deck: Deck, options: AssembleOptions) -> Path:
    """
    Work out where the document goes.

    An explicit output_name is used as given; otherwise the deck name with
    filesystem-unsafe characters replaced. A ".pdf" suffix is added when
    missing.

    Example:
        >>> resolve_output_path(Deck.of("Elves/Goblins", []), AssembleOptions())
        PosixPath('Elves_Goblins.pdf')
    """
    if options.output_name:
        name = options.output_name.strip()
    else:
        name = _UNSAFE_FILENAME_CHARS.sub("_", deck.name).strip() or "deck"

    if not name.lower().endswith(".pdf"):
        name = f"{name}.pdf"
    return Path(options.output_dir) / name


def assemble(
    deck: Deck,
    options: Optional[AssembleOptions] = None,
    *,
    session: Optional[requests.Session] = None,
    fetcher: Optional[AssetFetcher] = None,
    writer_factory: Optional[WriterFactory] = None,
) -> AssembleResult:
    """
    Print a resolved deck from start to finish.

    Pipeline:
    1. Build the working sequence: cards, then tokens if enabled
    2. Download every distinct image (bounded concurrency)
    3. Lay the cards out onto pages
    4. Write the document

    Nothing is written when any download fails. Images fetched before the
    failure stay cached, so a rerun only fetches what is missing.

    Args:
        deck: Resolved deck
        options: Run options (defaults to AssembleOptions())
        session: Shared HTTP session; created and closed here if omitted
        fetcher: Asset fetcher; built from session and options if omitted
        writer_factory: Builds the DocumentWriter (defaults to PDF)

    Returns:
        AssembleResult with output path and fetch outcomes

    Raises:
        AssembleError: Nothing to print, or a download failed
        RenderError: The document could not be written

    Example:
        >>> result = assemble(deck, AssembleOptions(include_tokens=False))
        >>> print(f"Wrote {result.page_count} pages to {result.output_path}")
    """
    options = options or AssembleOptions()
    start_time = time.perf_counter()

    # 1. Working sequence
    working = deck.working_cards(options.include_tokens)
    logger.info(f"Generating deck: {deck.name}")
    logger.info(
        f"Total cards: {len(working)} ({len(deck.cards)} mainboard, "
        f"{len(deck.tokens) if options.include_tokens else 0} tokens)"
    )
    if not working:
        raise AssembleError(f"Deck {deck.name!r} has no cards to print")

    # 2. Download
    owns_session = fetcher is None and session is None
    if fetcher is None:
        if session is None:
            session = create_session(options.fetch, pool_size=options.concurrency)
        fetcher = AssetFetcher(session, options.fetch)

    try:
        results = download_all(
            working,
            options.cache_dir,
            options.concurrency,
            fetcher=fetcher,
        )
    except DownloadError as e:
        raise AssembleError(f"Aborting {deck.name!r}, no document written. {e}") from e
    finally:
        if owns_session:
            session.close()

    # 3. Layout
    result = layout(working, options.layout)

    # 4. Write
    output_path = resolve_output_path(deck, options)
    factory = writer_factory or _pdf_writer_factory(options)
    writer = factory(output_path, options.layout, deck.name)
    written = writer.write(
        (placement, results[placement.asset_id].path)
        for placement in result.placements
    )

    elapsed = time.perf_counter() - start_time
    logger.info(f"Deck generation completed in {elapsed:.2f}s: {written}")

    return AssembleResult(
        output_path=written,
        page_count=result.page_count,
        card_count=len(working),
        results=results,
    )


def _pdf_writer_factory(options: AssembleOptions) -> WriterFactory:
    def _create(output_path: Path, config: LayoutConfig, title: str) -> DocumentWriter:
        return PdfDocumentWriter(
            output_path,
            config,
            title=title,
            draw_outlines=options.draw_outlines,
        )
    return _create

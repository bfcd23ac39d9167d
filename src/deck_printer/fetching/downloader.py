"""
Module: fetching.downloader

Purpose:
    Fetch the images of a whole card list through a bounded worker pool.

Key Functions:
    - download_all(): Dedupe, fan out, drain, report

Algorithm:
    1. Dedupe cards by asset_id, keeping first-occurrence order. Copies of
       the same card share one fetch and one cache file, so no two workers
       ever write the same key.
    2. Submit one fetch per distinct asset to a ThreadPoolExecutor sized
       to the concurrency limit.
    3. Collect every result, whatever the completion order.
    4. If any fetch failed, raise DownloadError for the first failure in
       deck order. Successful downloads stay cached for the next run.

Dependencies:
    - concurrent.futures (std): Bounded thread pool

Used By:
    - controller: Materialise all images before layout
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, Sequence

from deck_printer.core.models import Card, FetchResult, FetchStatus

from .errors import DownloadError
from .fetcher import AssetFetcher

logger = logging.getLogger(__name__)


def unique_cards(cards: Iterable[Card]) -> Dict[str, Card]:
    """
    Dedupe cards by asset_id.

    Args:
        cards: Cards in deck order, possibly repeated

    Returns:
        Ordered mapping of asset_id to the first Card carrying it
    """
    unique: Dict[str, Card] = {}
    for card in cards:
        unique.setdefault(card.asset_id, card)
    return unique


def download_all(
    cards: Sequence[Card],
    cache_dir: Path,
    concurrency_limit: int,
    *,
    fetcher: AssetFetcher,
) -> Dict[str, FetchResult]:
    """
    Fetch every distinct card image into the cache.

    Args:
        cards: Working card sequence, duplicates allowed
        cache_dir: Cache directory (created if missing)
        concurrency_limit: Maximum fetches in flight
        fetcher: Shared AssetFetcher

    Returns:
        Mapping of asset_id to FetchResult, in first-occurrence order.
        Every copy of a card resolves through its asset_id.

    Raises:
        ValueError: If concurrency_limit < 1
        DownloadError: If any fetch failed (after all fetches finished)

    Example:
        >>> results = download_all(deck.cards, Path("cards"), 8, fetcher=fetcher)
        >>> results[card.asset_id].path
        PosixPath('cards/....jpg')
    """
    if concurrency_limit < 1:
        raise ValueError(f"concurrency_limit must be at least 1: {concurrency_limit}")

    unique = unique_cards(cards)
    if not unique:
        return {}

    cache_dir = Path(cache_dir)
    cache_dir.mkdir(parents=True, exist_ok=True)

    workers = min(concurrency_limit, len(unique))
    logger.info(
        f"Fetching {len(unique)} distinct image(s) for {len(cards)} card(s) "
        f"with {workers} worker(s)"
    )

    results: Dict[str, FetchResult] = {}
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as executor:
        futures: Dict[Future, Card] = {
            executor.submit(fetcher.fetch, card, cache_dir): card
            for card in unique.values()
        }
        for done, future in enumerate(as_completed(futures), start=1):
            card = futures[future]
            try:
                result = future.result()
            except Exception as e:
                logger.exception(f"Unexpected error while fetching {card.name}")
                result = FetchResult.failed(
                    card.asset_id, f"Unexpected error: {e}", attempts=0, error=e,
                )
            results[card.asset_id] = result
            logger.debug(f"[{done}/{len(futures)}] {card.name}: {result.status.value}")

    ordered = {asset_id: results[asset_id] for asset_id in unique}
    failures = [r for r in ordered.values() if not r.ok]

    cached = sum(1 for r in ordered.values() if r.status is FetchStatus.CACHED)
    downloaded = sum(1 for r in ordered.values() if r.status is FetchStatus.DOWNLOADED)
    logger.info(f"Images ready: {downloaded} downloaded, {cached} cached, {len(failures)} failed")

    if failures:
        raise DownloadError(failures[0], ordered)
    return ordered

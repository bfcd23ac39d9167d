"""
Module: fetching.fetcher

Purpose:
    Fetch one card image into the on-disk cache.

    Cache layout: {cache_dir}/{asset_id}.jpg. The presence of that file is
    the only "already fetched" signal, so the success path writes to a
    temporary file in the same directory and renames it into place. A
    cache file therefore always holds a complete image.
    Temp files (.{asset_id}.*.part) orphaned by a killed run are removed
    the next time that asset is fetched.

Key Classes:
    - AssetFetcher: Cache check, download with retries, atomic write

Dependencies:
    - requests: HTTP (through fetching.client)
    - tempfile (std): Fresh file per download

Used By:
    - fetching.downloader: One fetch per distinct asset
"""

from __future__ import annotations

import glob
import logging
import tempfile
import time
from pathlib import Path
from typing import Callable

import requests

from deck_printer.core.models import Card, FetchResult

from .client import request_with_retry
from .config import IMAGE_ACCEPT, FetchConfig
from .errors import AssetWriteError, FetchError

logger = logging.getLogger(__name__)


class AssetFetcher:
    """
    Downloads card images into a cache directory.

    Holds no per-asset state, so a single instance is shared by every
    worker thread of a batch.

    Example:
        >>> fetcher = AssetFetcher(session, FetchConfig())
        >>> result = fetcher.fetch(card, Path("cards"))
        >>> result.status
        <FetchStatus.DOWNLOADED: 'downloaded'>
    """

    def __init__(
        self,
        session: requests.Session,
        config: FetchConfig | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize fetcher.

        Args:
            session: Shared HTTP session
            config: Fetch configuration (defaults to FetchConfig())
            sleep: Sleep function used for backoff
        """
        self._session = session
        self._config = config or FetchConfig()
        self._sleep = sleep

    @property
    def config(self) -> FetchConfig:
        return self._config

    def fetch(self, card: Card, cache_dir: Path) -> FetchResult:
        """
        Make sure the image of a card is present in the cache.

        Args:
            card: Card whose image to fetch
            cache_dir: Existing cache directory

        Returns:
            FetchResult: CACHED, DOWNLOADED or FAILED. Failures are
            returned, not raised.
        """
        target = Path(cache_dir) / card.cache_filename

        if target.exists():
            logger.debug(f"Skipping {card.name}: {target.name} already cached")
            return FetchResult.cached(card.asset_id, target)

        _sweep_partials(target)
        url = self._config.asset_url(card.asset_id)
        logger.info(f"Downloading {card.name}")

        try:
            _, attempts = request_with_retry(
                self._session,
                url,
                config=self._config,
                consume=lambda response: self._write_stream(response, target),
                headers={"Accept": IMAGE_ACCEPT},
                stream=True,
                sleep=self._sleep,
            )
        except FetchError as e:
            logger.error(f"Failed to download {card.name} ({card.asset_id}): {e}")
            return FetchResult.failed(
                card.asset_id,
                str(e),
                attempts=e.attempts,
                last_status=e.status,
                error=e,
            )

        logger.debug(f"Saved {card.name} to {target}")
        return FetchResult.downloaded(card.asset_id, target, attempts)

    def _write_stream(self, response: requests.Response, target: Path) -> Path:
        """Stream a response body to target via a temporary sibling file."""
        temp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="wb",
                prefix=f".{target.stem}.",
                suffix=".part",
                dir=target.parent,
                delete=False,
            ) as f:
                temp_path = Path(f.name)
                for chunk in response.iter_content(chunk_size=self._config.chunk_size):
                    if chunk:
                        f.write(chunk)
            temp_path.replace(target)
            return target
        except requests.RequestException:
            _discard(temp_path)
            raise
        except OSError as e:
            _discard(temp_path)
            raise AssetWriteError(f"Could not write {target}: {e}") from e


def _discard(path: Path | None) -> None:
    if path is not None:
        path.unlink(missing_ok=True)


def _sweep_partials(target: Path) -> None:
    """Remove temp files left behind by an earlier, killed download of target."""
    for stale in target.parent.glob(f".{glob.escape(target.stem)}.*.part"):
        try:
            stale.unlink(missing_ok=True)
            logger.debug(f"Removed stale partial download {stale.name}")
        except OSError as e:
            logger.warning(f"Could not remove stale partial download {stale}: {e}")

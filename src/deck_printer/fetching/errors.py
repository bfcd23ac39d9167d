"""
Module: fetching.errors

Purpose:
    Error taxonomy for HTTP fetches.

    Retryable (handled inside the retry loop until the attempt ceiling):
        - RateLimitedError: HTTP 429
        - TransientTransportError: connection/read failures, 408 and 5xx

    Terminal:
        - PermanentHTTPError: any other non-2xx status, never retried
        - RetriesExhaustedError: attempt ceiling reached
        - AssetWriteError: the image could not be written to the cache
        - InvalidResponseError: a 2xx body that is not what was asked for

    A cache miss is not an error; it simply triggers a download.

Used By:
    - fetching.client, fetching.fetcher, fetching.downloader
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from deck_printer.errors import DeckPrinterError

if TYPE_CHECKING:
    from deck_printer.core.models import FetchResult


class FetchError(DeckPrinterError):
    """Base class for fetch failures."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status: Optional[int] = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.attempts = attempts


class RateLimitedError(FetchError):
    """Server answered 429 Too Many Requests."""
    pass


class TransientTransportError(FetchError):
    """Network failure or server-side error worth retrying."""
    pass


class PermanentHTTPError(FetchError):
    """Non-success status that retrying will not fix."""
    pass


class RetriesExhaustedError(FetchError):
    """Every allowed attempt failed with a retryable error."""

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status: Optional[int] = None,
        attempts: int = 0,
        last_error: Optional[FetchError] = None,
    ) -> None:
        super().__init__(message, url=url, status=status, attempts=attempts)
        self.last_error = last_error


class AssetWriteError(FetchError):
    """Downloaded image could not be written to the cache directory."""
    pass


class InvalidResponseError(FetchError):
    """Successful status, unusable body (e.g. not JSON)."""
    pass


class DownloadError(DeckPrinterError):
    """
    At least one asset of a batch failed.

    Raised only after every task of the batch has finished.

    Attributes:
        failure: First failed result, in deck order
        results: Results for every distinct asset of the batch
    """

    def __init__(self, failure: "FetchResult", results: dict) -> None:
        failed_count = sum(1 for r in results.values() if not r.ok)
        super().__init__(
            f"Failed to fetch {failure.asset_id} after {failure.attempts} attempt(s): "
            f"{failure.reason} ({failed_count} of {len(results)} asset(s) failed)"
        )
        self.failure = failure
        self.results = results

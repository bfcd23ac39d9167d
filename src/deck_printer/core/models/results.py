"""
Module: results

Purpose:
    Per-card outcome of an image fetch.

Key Classes:
    - FetchStatus: CACHED / DOWNLOADED / FAILED
    - FetchResult: Outcome with attempt count and failure details

Used By:
    - fetching.fetcher: Produces one FetchResult per asset
    - fetching.downloader: Aggregates results per asset_id
    - controller: Reports cache hits and downloads
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class FetchStatus(str, Enum):
    """How an asset ended up (or failed to end up) in the cache."""
    CACHED = "cached"
    DOWNLOADED = "downloaded"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of fetching one asset (immutable).

    Attributes:
        asset_id: Asset that was fetched
        status: Outcome kind
        path: Cache file path (set for CACHED and DOWNLOADED)
        attempts: Number of HTTP attempts made (0 for cache hits)
        reason: Human readable failure description (FAILED only)
        last_status: Last HTTP status seen, if any
        error: Exception behind the failure, if any
    """

    asset_id: str
    status: FetchStatus
    path: Optional[Path] = None
    attempts: int = 0
    reason: Optional[str] = None
    last_status: Optional[int] = None
    error: Optional[BaseException] = None

    @classmethod
    def cached(cls, asset_id: str, path: Path) -> "FetchResult":
        return cls(asset_id=asset_id, status=FetchStatus.CACHED, path=path)

    @classmethod
    def downloaded(cls, asset_id: str, path: Path, attempts: int) -> "FetchResult":
        return cls(
            asset_id=asset_id,
            status=FetchStatus.DOWNLOADED,
            path=path,
            attempts=attempts,
        )

    @classmethod
    def failed(
        cls,
        asset_id: str,
        reason: str,
        *,
        attempts: int,
        last_status: Optional[int] = None,
        error: Optional[BaseException] = None,
    ) -> "FetchResult":
        return cls(
            asset_id=asset_id,
            status=FetchStatus.FAILED,
            attempts=attempts,
            reason=reason,
            last_status=last_status,
            error=error,
        )

    @property
    def ok(self) -> bool:
        """True when the asset is present in the cache."""
        return self.status is not FetchStatus.FAILED

"""
Module: fetching

Purpose:
    Card image acquisition: shared HTTP session, retrying GETs, a cached
    single-asset fetcher and the bounded batch downloader.

Key Functions:
    - create_session(): Shared requests.Session for a run
    - download_all(): Fetch every distinct image of a card list

Key Classes:
    - FetchConfig: HTTP and retry settings
    - AssetFetcher: One image into the cache
    - DownloadError: Batch failure

Dependencies:
    - requests: HTTP client

Used By:
    - controller: Pipeline orchestration
    - resolving: Card lookups reuse the retrying client
"""

from .config import FetchConfig
from .client import create_session, read_json, request_with_retry
from .errors import (
    AssetWriteError,
    DownloadError,
    InvalidResponseError,
    FetchError,
    PermanentHTTPError,
    RateLimitedError,
    RetriesExhaustedError,
    TransientTransportError,
)
from .fetcher import AssetFetcher
from .downloader import download_all

__all__ = [
    # Config
    "FetchConfig",
    # Client
    "create_session",
    "request_with_retry",
    "read_json",
    # Fetching
    "AssetFetcher",
    "download_all",
    # Errors
    "FetchError",
    "RateLimitedError",
    "TransientTransportError",
    "PermanentHTTPError",
    "RetriesExhaustedError",
    "AssetWriteError",
    "InvalidResponseError",
    "DownloadError",
]

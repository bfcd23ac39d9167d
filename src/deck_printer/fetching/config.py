"""
Module: fetching.config

Purpose:
    Configuration for talking to the card image service.

Key Classes:
    - FetchConfig: Immutable HTTP and retry settings

Dependencies:
    - dataclasses (std)

Used By:
    - fetching.client: Session construction, retry loop
    - fetching.fetcher: Asset URL and streaming
    - resolving.local: Card lookups share the retry settings
"""

from __future__ import annotations

from dataclasses import dataclass

from deck_printer import __version__


DEFAULT_BASE_URL = "https://api.scryfall.com/cards"
DEFAULT_USER_AGENT = f"deck_printer/{__version__}"
IMAGE_ACCEPT = "image/jpeg"
JSON_ACCEPT = "application/json"
MAX_ATTEMPTS = 5


@dataclass(frozen=True)
class FetchConfig:
    """
    HTTP settings for image downloads and card lookups (immutable).

    Attributes:
        base_url: Root of the card endpoint, without trailing slash
        user_agent: Fixed identifying User-Agent sent with every request
        max_attempts: Attempt ceiling per request, first try included
        timeout: Per-request connect/read timeout in seconds
        chunk_size: Bytes per chunk when streaming an image to disk

    Example:
        >>> FetchConfig().asset_url("abc")
        'https://api.scryfall.com/cards/abc/?format=image'
    """

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    max_attempts: int = MAX_ATTEMPTS
    timeout: float = 30.0
    chunk_size: int = 64 * 1024

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1: {self.max_attempts}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive: {self.timeout}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive: {self.chunk_size}")
        if not self.user_agent:
            raise ValueError("user_agent must not be empty")

    def asset_url(self, asset_id: str) -> str:
        """URL of the image for one asset."""
        return f"{self.base_url.rstrip('/')}/{asset_id}/?format=image"

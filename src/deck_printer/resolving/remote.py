"""
Module: resolving.remote

Purpose:
    Build a Deck from a deck-building website URL. Moxfield is the only
    supported site.

Key Functions:
    - load_remote_deck(): URL to Deck
    - parse_moxfield_deck(): Moxfield JSON to Deck

Dependencies:
    - requests: HTTP (through fetching.client)

Used By:
    - resolving.resolve()
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from deck_printer.core.models import Card, Deck
from deck_printer.fetching.client import read_json, request_with_retry
from deck_printer.fetching.config import JSON_ACCEPT, FetchConfig
from deck_printer.fetching.errors import FetchError

from .errors import DeckLookupError, UnsupportedWebsiteError
from .source import LinkSource

logger = logging.getLogger(__name__)

MOXFIELD_HOSTS = frozenset({"moxfield.com", "www.moxfield.com"})
MOXFIELD_API_URL = "https://api2.moxfield.com/v2/decks/all"


def moxfield_deck_id(source: LinkSource) -> str:
    """
    Extract the deck id from a Moxfield deck URL.

    Raises:
        UnsupportedWebsiteError: If the URL is not a Moxfield deck page
    """
    if source.host not in MOXFIELD_HOSTS:
        raise UnsupportedWebsiteError(f"Unsupported website: {source.host or source.url}")

    segments = source.path_segments
    if len(segments) < 2 or segments[0] != "decks":
        raise UnsupportedWebsiteError(f"Not a Moxfield deck URL: {source.url}")
    return segments[1]


def _card(info: Dict[str, Any]) -> Card:
    return Card(name=info["name"], asset_id=info["scryfall_id"])


def parse_moxfield_deck(payload: Dict[str, Any]) -> Deck:
    """
    Convert a Moxfield deck response into a Deck.

    The featured `main` card (commander) comes first, then each mainboard
    entry repeated by its quantity, in response order.

    Args:
        payload: Decoded JSON deck response

    Returns:
        Deck with cards and tokens

    Raises:
        DeckLookupError: If the response lacks expected fields
    """
    try:
        cards: List[Card] = []
        main = payload.get("main")
        if main:
            cards.append(_card(main))

        for entry in payload.get("mainboard", {}).values():
            card = _card(entry["card"])
            cards.extend([card] * int(entry["quantity"]))

        tokens = [_card(info) for info in payload.get("tokens") or []]
        name = payload["name"]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise DeckLookupError(f"Unexpected Moxfield response: {e!r}") from e

    return Deck.of(name, cards, tokens)


def load_remote_deck(
    source: LinkSource,
    session: requests.Session,
    *,
    config: Optional[FetchConfig] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Deck:
    """
    Download and parse a deck from its website.

    Args:
        source: Deck URL
        session: Shared HTTP session
        config: Retry settings (defaults to FetchConfig())
        sleep: Sleep function used for backoff

    Returns:
        Resolved Deck

    Raises:
        UnsupportedWebsiteError: Unknown host or URL shape
        DeckLookupError: Download failed or response was malformed
    """
    config = config or FetchConfig()
    deck_id = moxfield_deck_id(source)
    api_url = f"{MOXFIELD_API_URL}/{deck_id}"
    logger.info(f"Fetching deck from remote: {source.url}")

    try:
        payload, _ = request_with_retry(
            session,
            api_url,
            config=config,
            consume=read_json,
            headers={"Accept": JSON_ACCEPT},
            sleep=sleep,
        )
    except FetchError as e:
        raise DeckLookupError(f"Could not fetch deck {deck_id}: {e}") from e

    if not isinstance(payload, dict):
        raise DeckLookupError(f"Unexpected Moxfield response for deck {deck_id}")
    return parse_moxfield_deck(payload)

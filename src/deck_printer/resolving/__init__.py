"""
Module: resolving

Purpose:
    Turn a user supplied source (decklist path or deck URL) into a Deck.

Key Functions:
    - parse_source(): Sniff path vs URL
    - resolve(): Source to Deck

Used By:
    - cli: Before assembling
"""

from __future__ import annotations

import time
from typing import Callable, Optional

import requests

from deck_printer.core.models import Deck
from deck_printer.fetching.config import FetchConfig

from .errors import (
    DeckLookupError,
    DecklistParseError,
    ResolveError,
    SourceError,
    UnsupportedWebsiteError,
)
from .local import load_local_deck, parse_decklist
from .remote import load_remote_deck, parse_moxfield_deck
from .source import FileSource, LinkSource, Source, parse_source


def resolve(
    source: Source,
    session: requests.Session,
    *,
    config: Optional[FetchConfig] = None,
    workers: int = 4,
    sleep: Callable[[float], None] = time.sleep,
) -> Deck:
    """
    Resolve a source into a Deck.

    Args:
        source: FileSource or LinkSource
        session: Shared HTTP session
        config: Fetch configuration for lookups
        workers: Concurrent card lookups for local decklists
        sleep: Sleep function used for backoff

    Returns:
        Resolved Deck
    """
    if isinstance(source, FileSource):
        return load_local_deck(source.path, session, config=config, workers=workers, sleep=sleep)
    return load_remote_deck(source, session, config=config, sleep=sleep)


__all__ = [
    "resolve",
    "parse_source",
    "parse_decklist",
    "parse_moxfield_deck",
    "load_local_deck",
    "load_remote_deck",
    "FileSource",
    "LinkSource",
    "Source",
    "ResolveError",
    "SourceError",
    "DecklistParseError",
    "UnsupportedWebsiteError",
    "DeckLookupError",
]

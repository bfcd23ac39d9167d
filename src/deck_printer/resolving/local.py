"""
Module: resolving.local

Purpose:
    Build a Deck from a plain-text decklist.

    Each line names a printing:  1 Whiptongue Hydra (NEC) 134
    Every entry is looked up on the card database to get its image id and
    the tokens it creates. Lookups run on a small thread pool; the deck is
    assembled in file order regardless of which lookup finishes first.

Key Functions:
    - parse_decklist(): Text to DecklistEntry list
    - lookup_card(): One card database lookup
    - load_local_deck(): File to Deck

Dependencies:
    - requests: HTTP (through fetching.client)
    - concurrent.futures (std): Bounded lookup pool

Used By:
    - resolving.resolve()
"""

from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from deck_printer.core.models import Card, Deck
from deck_printer.fetching.client import read_json, request_with_retry
from deck_printer.fetching.config import JSON_ACCEPT, FetchConfig
from deck_printer.fetching.errors import FetchError, PermanentHTTPError

from .errors import DeckLookupError, DecklistParseError, SourceError

logger = logging.getLogger(__name__)

# "1 Whiptongue Hydra (NEC) 134", quantity may carry an "x" suffix ("2x")
_LINE_PATTERN = re.compile(
    r"^(?P<quantity>\d+)x?\s+(?P<name>.+?)\s+\((?P<set>[A-Za-z0-9]+)\)\s+(?P<number>\S+)$"
)
_COMMENT_PREFIXES = ("#", "//")

DEFAULT_LOOKUP_WORKERS = 4


@dataclass(frozen=True)
class DecklistEntry:
    """
    One parsed decklist line.

    Attributes:
        quantity: Number of copies
        name: Exact card name
        set_code: Set code, as written between parentheses
        collector_number: Collector number within the set
        line_number: 1-based line in the source file
    """

    quantity: int
    name: str
    set_code: str
    collector_number: str
    line_number: int


def parse_decklist(text: str) -> List[DecklistEntry]:
    """
    Parse decklist text.

    Blank lines and lines starting with '#' or '//' are skipped.

    Args:
        text: Full decklist contents

    Returns:
        Entries in file order

    Raises:
        DecklistParseError: On the first malformed line
    """
    entries: List[DecklistEntry] = []
    for line_number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue

        match = _LINE_PATTERN.match(line)
        if match is None:
            raise DecklistParseError(line_number, line)

        quantity = int(match.group("quantity"))
        if quantity < 1:
            raise DecklistParseError(line_number, line, "quantity must be at least 1")

        entries.append(DecklistEntry(
            quantity=quantity,
            name=match.group("name"),
            set_code=match.group("set").lower(),
            collector_number=match.group("number"),
            line_number=line_number,
        ))
    return entries


def lookup_card(
    session: requests.Session,
    entry: DecklistEntry,
    config: FetchConfig,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """
    Fetch the card database record for one decklist entry.

    Args:
        session: Shared HTTP session
        entry: Parsed decklist line
        config: Retry settings and base URL
        sleep: Sleep function used for backoff

    Returns:
        Decoded JSON card record

    Raises:
        DeckLookupError: If the card cannot be found or fetched
    """
    url = f"{config.base_url.rstrip('/')}/named"
    params = {
        "exact": entry.name,
        "set": entry.set_code,
        "collector_number": entry.collector_number,
    }
    logger.debug(f"Looking up {entry.name} ({entry.set_code}) {entry.collector_number}")

    try:
        payload, _ = request_with_retry(
            session,
            url,
            config=config,
            consume=read_json,
            headers={"Accept": JSON_ACCEPT},
            params=params,
            sleep=sleep,
        )
    except PermanentHTTPError as e:
        raise DeckLookupError(
            f"Line {entry.line_number}: no card {entry.name!r} in set "
            f"{entry.set_code.upper()} #{entry.collector_number} (HTTP {e.status})"
        ) from e
    except FetchError as e:
        raise DeckLookupError(f"Line {entry.line_number}: lookup of {entry.name!r} failed: {e}") from e

    if not isinstance(payload, dict) or "id" not in payload or "name" not in payload:
        raise DeckLookupError(f"Line {entry.line_number}: unexpected card record for {entry.name!r}")
    return payload


def entry_cards(entry: DecklistEntry, record: Dict[str, Any]) -> Tuple[List[Card], List[Card]]:
    """
    Expand a looked-up entry into cards and tokens.

    Every copy brings its own set of related tokens.

    Args:
        entry: Decklist entry (quantity)
        record: Card database record

    Returns:
        Tuple of (cards, tokens)
    """
    card = Card(name=record["name"], asset_id=record["id"])
    related_tokens = [
        Card(name=part["name"], asset_id=part["id"])
        for part in record.get("all_parts") or []
        if part.get("component") == "token"
    ]

    cards: List[Card] = []
    tokens: List[Card] = []
    for _ in range(entry.quantity):
        cards.append(card)
        tokens.extend(related_tokens)
    return cards, tokens


def load_local_deck(
    path: Path,
    session: requests.Session,
    *,
    config: Optional[FetchConfig] = None,
    workers: int = DEFAULT_LOOKUP_WORKERS,
    sleep: Callable[[float], None] = time.sleep,
) -> Deck:
    """
    Read a decklist file and resolve every entry.

    Args:
        path: Decklist file
        session: Shared HTTP session
        config: Fetch configuration (defaults to FetchConfig())
        workers: Maximum concurrent lookups
        sleep: Sleep function used for backoff

    Returns:
        Deck named after the file stem

    Raises:
        SourceError: If the file cannot be read
        DecklistParseError: On a malformed line
        DeckLookupError: If any lookup fails
    """
    config = config or FetchConfig()
    path = Path(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"Could not read decklist {path}: {e}") from e

    entries = parse_decklist(text)
    logger.info(f"Deck from local file {path}: {len(entries)} entries")

    records: List[Dict[str, Any]] = []
    if entries:
        with ThreadPoolExecutor(max_workers=max(1, min(workers, len(entries))), thread_name_prefix="lookup") as executor:
            records = list(executor.map(
                lambda entry: lookup_card(session, entry, config, sleep=sleep),
                entries,
            ))

    cards: List[Card] = []
    tokens: List[Card] = []
    for entry, record in zip(entries, records):
        entry_main, entry_tokens = entry_cards(entry, record)
        cards.extend(entry_main)
        tokens.extend(entry_tokens)

    return Deck.of(path.stem, cards, tokens)

"""
Module: resolving.source

Purpose:
    Decide whether a command line source is a local decklist or a deck URL.

Key Functions:
    - parse_source(): Sniff a source string

Key Classes:
    - FileSource, LinkSource
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union
from urllib.parse import urlparse

from .errors import SourceError


@dataclass(frozen=True)
class FileSource:
    """Decklist file on disk."""
    path: Path


@dataclass(frozen=True)
class LinkSource:
    """Deck hosted on a deck-building website."""
    url: str

    @property
    def host(self) -> str:
        return (urlparse(self.url).hostname or "").lower()

    @property
    def path_segments(self) -> list[str]:
        return [segment for segment in urlparse(self.url).path.split("/") if segment]


Source = Union[FileSource, LinkSource]


def parse_source(text: str) -> Source:
    """
    Turn a source string into a FileSource or LinkSource.

    An existing file wins over URL parsing.

    Args:
        text: Path or URL as typed by the user

    Returns:
        FileSource or LinkSource

    Raises:
        SourceError: If text is neither an existing file nor an http(s) URL

    Example:
        >>> parse_source("https://moxfield.com/decks/abc")
        LinkSource(url='https://moxfield.com/decks/abc')
    """
    path = Path(text).expanduser()
    if path.is_file():
        return FileSource(path)

    parsed = urlparse(text)
    if parsed.scheme in ("http", "https") and parsed.netloc:
        return LinkSource(text)

    raise SourceError(f"Invalid path or URL: {text}")

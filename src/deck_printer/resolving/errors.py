"""
Module: resolving.errors

Purpose:
    Errors raised while turning a source into a Deck.
"""

from __future__ import annotations

from deck_printer.errors import DeckPrinterError


class ResolveError(DeckPrinterError):
    """Base class for deck resolution failures."""
    pass


class SourceError(ResolveError):
    """Source is neither an existing file nor a usable URL."""
    pass


class DecklistParseError(ResolveError):
    """A decklist line does not match `QTY NAME (SET) NUMBER`."""

    def __init__(self, line_number: int, line: str, reason: str = "expected 'QTY NAME (SET) NUMBER'") -> None:
        super().__init__(f"Line {line_number}: {reason}: {line!r}")
        self.line_number = line_number
        self.line = line


class UnsupportedWebsiteError(ResolveError):
    """Deck URL points at a site we cannot read decks from."""
    pass


class DeckLookupError(ResolveError):
    """Card or deck lookup against a remote service failed."""
    pass

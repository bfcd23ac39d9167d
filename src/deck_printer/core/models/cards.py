"""
Module: cards

Purpose:
    Card and Deck dataclasses. A Card is identified by its asset_id, the
    stable key used for both the remote image URL and the on-disk cache
    filename.

Key Classes:
    - Card: One printable card (name + asset_id)
    - Deck: Named ordered card list plus a separate token group

Dependencies:
    - dataclasses (std)

Used By:
    - resolving: Produces Decks
    - fetching: Downloads one image per distinct asset_id
    - layout: Places one image per Card
    - controller: Builds the working card sequence
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple


@dataclass(frozen=True, slots=True)
class Card:
    """
    A single card to print (immutable).

    Attributes:
        name: Display name, used only for logging
        asset_id: Stable identifier of the card image

    Example:
        >>> Card("Whiptongue Hydra", "5f8d1e8b-...")
    """

    name: str
    asset_id: str

    def __post_init__(self) -> None:
        """Validate card on construction."""
        if not self.asset_id or not self.asset_id.strip():
            raise ValueError(f"Card {self.name!r} has an empty asset_id")
        if "/" in self.asset_id or "\\" in self.asset_id:
            raise ValueError(f"asset_id must not contain path separators: {self.asset_id!r}")

    @property
    def cache_filename(self) -> str:
        """Filename of this card's image inside the cache directory."""
        return f"{self.asset_id}.jpg"


@dataclass(frozen=True)
class Deck:
    """
    Named deck with a main card group and a token group (immutable).

    Card order inside each group is preserved through download, layout
    and rendering.

    Attributes:
        name: Deck name, default output filename stem
        cards: Main group, in print order
        tokens: Token group, included or excluded as a whole

    Example:
        >>> deck = Deck.of("Test", [a, a, b])
        >>> deck.total_cards
        3
    """

    name: str
    cards: Tuple[Card, ...] = ()
    tokens: Tuple[Card, ...] = ()

    @classmethod
    def of(
        cls,
        name: str,
        cards: Iterable[Card],
        tokens: Iterable[Card] = (),
    ) -> "Deck":
        """Build a Deck from any iterables of cards."""
        return cls(name=name, cards=tuple(cards), tokens=tuple(tokens))

    @property
    def total_cards(self) -> int:
        """Number of cards across both groups."""
        return len(self.cards) + len(self.tokens)

    def working_cards(self, include_tokens: bool = True) -> Tuple[Card, ...]:
        """
        Cards to print, main group first.

        Args:
            include_tokens: Append the token group when True

        Returns:
            cards ++ tokens (or just cards), order preserved
        """
        if include_tokens:
            return self.cards + self.tokens
        return self.cards

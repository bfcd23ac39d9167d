"""
Core Models Package

Immutable data models passed between pipeline stages.

All models in this package are frozen dataclasses. A Deck is built once by a
resolver and never mutated; fetch workers receive Cards from several threads
at once, so nothing here may carry mutable state.
"""

from .cards import Card, Deck
from .results import FetchResult, FetchStatus

__all__ = [
    "Card",
    "Deck",
    "FetchResult",
    "FetchStatus",
]

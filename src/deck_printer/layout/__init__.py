"""
Module: layout

Purpose:
    Grid layout of card images onto fixed-size pages.

Key Functions:
    - layout(): Compute placements for a card sequence

Key Classes:
    - LayoutConfig: Page and card geometry
    - Placement: One positioned card
    - LayoutResult: All placements plus page count

Used By:
    - controller: Main pipeline
    - output: Document writers
"""

from .config import DEFAULT_LAYOUT, LayoutConfig
from .models import LayoutResult, Placement
from .paginator import layout

__all__ = [
    # Config
    "LayoutConfig",
    "DEFAULT_LAYOUT",
    # Models
    "Placement",
    "LayoutResult",
    # Functions
    "layout",
]

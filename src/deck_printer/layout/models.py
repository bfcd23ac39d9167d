"""
Module: layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing placements and the layout result.

Key Classes:
    - Placement: One card image positioned on one page
    - LayoutResult: Final layout output

Dependencies:
    - dataclasses (std)

Used By:
    - layout.paginator: Creates Placements
    - output.renderer: Draws them
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .config import LayoutConfig


@dataclass(frozen=True)
class Placement:
    """
    A card image positioned on a page.

    Attributes:
        asset_id: Image to draw
        page_index: Page number (0-indexed)
        x: Left edge in mm from the page's left side
        y: Bottom edge in mm from the page's bottom side

    Example:
        >>> Placement("abc", page_index=0, x=10.5, y=194.2)
    """

    asset_id: str
    page_index: int
    x: float
    y: float


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output.

    Attributes:
        placements: Every placement, in the order of the input cards
        config: Geometry the layout was computed with

    Example:
        >>> result = layout(cards, LayoutConfig())
        >>> result.page_count
        2
    """

    placements: Tuple[Placement, ...]
    config: LayoutConfig

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        if not self.placements:
            return 0
        return self.placements[-1].page_index + 1


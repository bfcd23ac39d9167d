"""
Module: layout.paginator

Purpose:
    Place card images into a fixed grid across as many pages as needed.

Key Functions:
    - layout(): Main layout function

Algorithm:
    Walk the cards in order with a local (page, row, column) cursor:
    1. Place the card at x = x_start + column * card_width,
       y = bottom edge of the current row.
    2. After `columns` cards, wrap to the next row at the same x_start.
    3. When the next row would fall below the page bottom, start a new
       page at row 0.

    The function is pure: same cards and config, same placements.

Dependencies:
    - layout.config: LayoutConfig
    - layout.models: Placement, LayoutResult

Used By:
    - controller: Main pipeline
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from deck_printer.core.models import Card

from .config import DEFAULT_LAYOUT, LayoutConfig
from .models import LayoutResult, Placement

logger = logging.getLogger(__name__)


def layout(
    cards: Sequence[Card],
    config: LayoutConfig = DEFAULT_LAYOUT,
) -> LayoutResult:
    """
    Arrange cards into a grid, page after page.

    Args:
        cards: Cards in print order (duplicates are placed once per copy)
        config: Page and card geometry

    Returns:
        LayoutResult whose placements follow the input order

    Example:
        >>> result = layout([a, a, b])
        >>> [p.asset_id for p in result.placements]
        [a.asset_id, a.asset_id, b.asset_id]
    """
    placements: List[Placement] = []

    x_start = config.x_start
    page_index = 0
    row = 0
    column = 0

    for card in cards:
        if column == config.columns:
            column = 0
            row += 1

        if not config.row_fits(row):
            page_index += 1
            row = 0

        placements.append(Placement(
            asset_id=card.asset_id,
            page_index=page_index,
            x=x_start + column * config.card_width,
            y=config.row_y(row),
        ))
        column += 1

    result = LayoutResult(placements=tuple(placements), config=config)
    logger.info(f"Laid out {len(placements)} cards onto {result.page_count} page(s)")
    return result

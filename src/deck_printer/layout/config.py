"""
Module: layout.config

Purpose:
    Configuration for the card grid. All distances are millimetres.

Key Classes:
    - LayoutConfig: Immutable page and card geometry

Dependencies:
    - dataclasses (std)

Used By:
    - layout.paginator: Grid placement
    - output.renderer: Page size and card size
"""

from __future__ import annotations

import math
from dataclasses import dataclass


# A4 portrait
DEFAULT_PAGE_WIDTH_MM = 210.0
DEFAULT_PAGE_HEIGHT_MM = 297.0

# Standard poker-size card, as printed by the card image service
DEFAULT_CARD_WIDTH_MM = 63.0
DEFAULT_CARD_HEIGHT_MM = 87.8

DEFAULT_COLUMNS = 3
DEFAULT_MARGIN_TOP_MM = 15.0

# Float tolerance when checking whether a row still fits on the page
_EPSILON_MM = 1e-6


@dataclass(frozen=True)
class LayoutConfig:
    """
    Page and card geometry (immutable).

    Coordinates follow the PDF convention: origin at the bottom-left
    corner of the page, y growing upwards.

    Attributes:
        page_width: Page width in mm
        page_height: Page height in mm
        card_width: Card (cell) width in mm
        card_height: Card (cell) height in mm
        columns: Cards per row
        margin_top: Gap between the page top and the first row in mm

    Example:
        >>> config = LayoutConfig()
        >>> config.x_start
        10.5
        >>> config.rows_per_page
        3
    """

    page_width: float = DEFAULT_PAGE_WIDTH_MM
    page_height: float = DEFAULT_PAGE_HEIGHT_MM
    card_width: float = DEFAULT_CARD_WIDTH_MM
    card_height: float = DEFAULT_CARD_HEIGHT_MM
    columns: int = DEFAULT_COLUMNS
    margin_top: float = DEFAULT_MARGIN_TOP_MM

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        for name in ("page_width", "page_height", "card_width", "card_height"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive: {value}")
        if self.margin_top < 0:
            raise ValueError(f"margin_top must be non-negative: {self.margin_top}")
        if self.columns < 1:
            raise ValueError(f"columns must be at least 1: {self.columns}")
        if self.row_width > self.page_width + _EPSILON_MM:
            raise ValueError(
                f"{self.columns} columns of {self.card_width}mm "
                f"do not fit a {self.page_width}mm wide page"
            )
        if self.margin_top + self.card_height > self.page_height + _EPSILON_MM:
            raise ValueError("Top margin and card height exceed page height")

    @property
    def row_width(self) -> float:
        """Width of one full row of cards."""
        return self.columns * self.card_width

    @property
    def x_start(self) -> float:
        """Left edge of every row; rows are centred horizontally."""
        return (self.page_width - self.row_width) / 2

    @property
    def rows_per_page(self) -> int:
        """Number of rows that fit between the top margin and the page bottom."""
        return math.floor((self.page_height - self.margin_top) / self.card_height + _EPSILON_MM)

    @property
    def cards_per_page(self) -> int:
        return self.rows_per_page * self.columns

    def row_y(self, row: int) -> float:
        """Bottom edge of a row (0 = top row)."""
        return self.page_height - self.margin_top - (row + 1) * self.card_height

    def row_fits(self, row: int) -> bool:
        """Whether a row stays above the bottom edge of the page."""
        return self.row_y(row) >= -_EPSILON_MM


DEFAULT_LAYOUT = LayoutConfig()

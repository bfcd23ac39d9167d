"""
Module: config

Purpose:
    Options for assembling a deck into a printable document. Immutable
    configuration with validation on construction.

Key Classes:
    - AssembleOptions: Main configuration for a run

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - controller: assemble()
    - cli: Maps command line flags onto options
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from deck_printer.fetching.config import FetchConfig
from deck_printer.layout.config import DEFAULT_LAYOUT, LayoutConfig


DEFAULT_CACHE_DIR = Path("cards")
DEFAULT_CONCURRENCY = 8


@dataclass(frozen=True)
class AssembleOptions:
    """
    Configuration for assembling a deck (immutable).

    Attributes:
        include_tokens: Print the token group after the main cards
        cache_dir: Directory of cached card images
        output_name: Output filename; defaults to "{deck name}.pdf"
        output_dir: Directory the output filename is relative to
        concurrency: Maximum image downloads in flight
        layout: Page and card geometry
        fetch: HTTP and retry settings
        draw_outlines: Draw a thin cut outline around every card

    Example:
        >>> options = AssembleOptions(include_tokens=False, output_name="proxies.pdf")
    """

    include_tokens: bool = True
    cache_dir: Path = DEFAULT_CACHE_DIR
    output_name: Optional[str] = None
    output_dir: Path = Path(".")
    concurrency: int = DEFAULT_CONCURRENCY
    layout: LayoutConfig = DEFAULT_LAYOUT
    fetch: FetchConfig = field(default_factory=FetchConfig)
    draw_outlines: bool = False

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1: {self.concurrency}")
        if self.output_name is not None and not self.output_name.strip():
            raise ValueError("output_name must not be blank")

"""
Module: output.writer

Purpose:
    Abstract interface for turning placements into a persisted document.
    Pages are added incrementally as placements on a new page arrive.

Key Classes:
    - DocumentWriter: Abstract base class for document writers
    - RenderError: Exception for unusable images or output failures

Used By:
    - output.renderer: PdfDocumentWriter
    - controller: Final pipeline stage
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Tuple

from deck_printer.errors import DeckPrinterError
from deck_printer.layout import LayoutConfig, Placement


class RenderError(DeckPrinterError):
    """Document could not be rendered or saved."""
    pass


class DocumentWriter(ABC):
    """
    Abstract document writer.

    Subclasses implement the three primitives; write() drives them from
    an ordered stream of (Placement, image path) pairs.
    """

    def __init__(self, output_path: Path, config: LayoutConfig) -> None:
        self.output_path = Path(output_path)
        self.config = config

    @abstractmethod
    def begin_page(self) -> None:
        """Start a new, empty page."""

    @abstractmethod
    def place(self, placement: Placement, image_path: Path) -> None:
        """
        Draw one image on the current page.

        Raises:
            RenderError: If the image cannot be used
        """

    @abstractmethod
    def save(self) -> Path:
        """
        Persist the document.

        Returns:
            Path of the written document
        """

    def write(self, items: Iterable[Tuple[Placement, Path]]) -> Path:
        """
        Render every placement, adding pages as their index advances.

        Args:
            items: (Placement, image path) pairs ordered by page index

        Returns:
            Path of the written document

        Raises:
            RenderError: If a placement goes back to an earlier page
        """
        current_page = -1
        for placement, image_path in items:
            if placement.page_index < current_page:
                raise RenderError(
                    f"Placement for {placement.asset_id} on page {placement.page_index} "
                    f"arrived after page {current_page}"
                )
            while current_page < placement.page_index:
                self.begin_page()
                current_page += 1
            self.place(placement, image_path)
        return self.save()

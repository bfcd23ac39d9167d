"""
Module: output.renderer

Purpose:
    Render placements to PDF using ReportLab.
    Each page index becomes one PDF page with card images drawn at their
    placement coordinates, sized to the configured card dimensions.

Key Classes:
    - PdfDocumentWriter: DocumentWriter producing a PDF file

Dependencies:
    - reportlab: PDF generation
    - PIL: Image sanity check before drawing

Used By:
    - controller: Pipeline orchestration
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from deck_printer.layout import LayoutConfig, Placement

from .writer import DocumentWriter, RenderError

logger = logging.getLogger(__name__)

OUTLINE_WIDTH_MM = 0.2
OUTLINE_GRAY = 0.6


class PdfDocumentWriter(DocumentWriter):
    """
    Writes card placements to a PDF file.

    ReportLab embeds each distinct image file once, so repeated copies of
    a card do not grow the document.

    Example:
        >>> writer = PdfDocumentWriter(Path("Deck.pdf"), LayoutConfig(), title="Deck")
        >>> writer.write(zip(result.placements, paths))
        PosixPath('Deck.pdf')
    """

    def __init__(
        self,
        output_path: Path,
        config: LayoutConfig,
        *,
        title: str = "Deck",
        draw_outlines: bool = False,
    ) -> None:
        """
        Initialize writer.

        Args:
            output_path: PDF file to create
            config: Page and card geometry
            title: Document title metadata
            draw_outlines: Draw a thin cut outline around every card
        """
        super().__init__(output_path, config)
        self._draw_outlines = draw_outlines
        self._page_count = 0

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        page_size = (config.page_width * mm, config.page_height * mm)
        self._canvas = canvas.Canvas(str(self.output_path), pagesize=page_size)
        self._canvas.setTitle(title)
        self._canvas.setCreator(_creator())

    @property
    def page_count(self) -> int:
        return self._page_count

    def begin_page(self) -> None:
        if self._page_count > 0:
            self._canvas.showPage()
        self._page_count += 1

    def place(self, placement: Placement, image_path: Path) -> None:
        if self._page_count == 0:
            raise RenderError("place() called before begin_page()")

        _check_image(image_path)

        x_pt = placement.x * mm
        y_pt = placement.y * mm
        width_pt = self.config.card_width * mm
        height_pt = self.config.card_height * mm

        self._canvas.drawImage(
            str(image_path),
            x_pt,
            y_pt,
            width=width_pt,
            height=height_pt,
        )

        if self._draw_outlines:
            self._canvas.saveState()
            self._canvas.setLineWidth(OUTLINE_WIDTH_MM * mm)
            self._canvas.setStrokeGray(OUTLINE_GRAY)
            self._canvas.rect(x_pt, y_pt, width_pt, height_pt, stroke=1, fill=0)
            self._canvas.restoreState()

    def save(self) -> Path:
        if self._page_count == 0:
            logger.warning("Empty layout, creating empty PDF")
        else:
            self._canvas.showPage()
        try:
            self._canvas.save()
        except OSError as e:
            raise RenderError(f"Could not write {self.output_path}: {e}") from e

        logger.info(f"Rendered {self._page_count} page(s) to {self.output_path}")
        return self.output_path


def _check_image(image_path: Path) -> None:
    """Make sure a cached file is a readable image before embedding it."""
    try:
        with Image.open(image_path) as img:
            img.verify()
    except (OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise RenderError(f"Unreadable image {image_path}: {e}") from e


def _creator() -> str:
    from deck_printer import __version__
    return f"deck_printer v{__version__}"

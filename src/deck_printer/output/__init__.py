"""
Module: output

Purpose:
    Document writers. Converts placements plus cached image paths into a
    printable file.

Key Classes:
    - DocumentWriter: Abstract writer
    - PdfDocumentWriter: ReportLab PDF writer
    - RenderError: Rendering failure

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling

Used By:
    - controller: Pipeline orchestration
"""

from .writer import DocumentWriter, RenderError
from .renderer import PdfDocumentWriter

__all__ = [
    "DocumentWriter",
    "PdfDocumentWriter",
    "RenderError",
]

"""
Module: errors

Purpose:
    Root exception for the deck printer. Every error raised on purpose by
    the package derives from DeckPrinterError so the CLI can report it
    without a traceback.

Used By:
    - fetching, resolving, output, controller
"""


class DeckPrinterError(Exception):
    """Base class for all deck printer errors."""
    pass

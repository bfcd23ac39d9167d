"""Allow `python -m deck_printer`."""

from deck_printer.cli import main

raise SystemExit(main())

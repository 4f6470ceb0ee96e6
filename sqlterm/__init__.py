"""sqlterm - A terminal UI for interactive SQL."""

__version__ = "0.1.0"

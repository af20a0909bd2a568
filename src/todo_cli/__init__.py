"""Command-line client for a single Google Tasks list."""

__version__ = "0.1.0"

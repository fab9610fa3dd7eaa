"""Command-line interface for confapp."""

"""Command-line interface for testsmith."""

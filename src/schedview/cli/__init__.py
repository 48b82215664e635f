"""Command-line interface for schedview."""

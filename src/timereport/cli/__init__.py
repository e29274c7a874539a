"""Command-line interface for timereport."""

"""Command-line interface for kbimport."""

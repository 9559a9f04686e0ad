"""Command-line interface for CHISTOGRAM."""

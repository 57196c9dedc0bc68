"""Command-line interface for remote dictionaries."""

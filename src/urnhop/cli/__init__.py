"""Command line interface for urnhop."""

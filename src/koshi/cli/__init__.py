"""Command line interface for koshi."""

"""Command-line interface for consult-ai."""

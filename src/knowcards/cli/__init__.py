"""Command-line interface for Knowcards."""

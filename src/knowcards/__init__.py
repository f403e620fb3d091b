"""Knowcards: a JSON-file-backed card service for interview preparation."""

__version__ = "0.1.0"

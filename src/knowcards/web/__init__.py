"""Web application for Knowcards."""

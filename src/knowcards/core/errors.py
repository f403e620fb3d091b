"""Exceptions raised by the card store."""


class CardStoreError(Exception):
    """Base class for card store failures."""


class CardValidationError(CardStoreError):
    """Raised when card input is missing fields, malformed, or collides with an existing ID."""


class CardNotFoundError(CardStoreError):
    """Raised when no card has the requested ID."""

    def __init__(self, card_id: str):
        super().__init__(f"card not found: {card_id}")
        self.card_id = card_id


class StorageError(CardStoreError):
    """Raised when the data file cannot be read, parsed, or written."""

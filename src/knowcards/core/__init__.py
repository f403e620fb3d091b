"""Core library for Knowcards."""

from knowcards.core.errors import (
    CardNotFoundError,
    CardStoreError,
    CardValidationError,
    StorageError,
)
from knowcards.core.models import Card, CardInput
from knowcards.core.storage import CardStore
from knowcards.core.validation import slugify, validate_card

__all__ = [
    # Models
    "Card",
    "CardInput",
    # Storage
    "CardStore",
    # Validation
    "slugify",
    "validate_card",
    # Errors
    "CardNotFoundError",
    "CardStoreError",
    "CardValidationError",
    "StorageError",
]

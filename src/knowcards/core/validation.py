"""Card normalization and slug-based ID assignment."""

import re
import time
from collections.abc import Iterable

from knowcards.core.errors import CardValidationError
from knowcards.core.models import REQUIRED_FIELDS, Card, CardInput

# Anything other than ASCII lowercase letters, digits and CJK unified ideographs
_SLUG_SEPARATORS = re.compile(r"[^a-z0-9\u4e00-\u9fa5]+")

SLUG_MAX_LENGTH = 80
FALLBACK_ID_PREFIX = "card-"


def slugify(text: str) -> str:
    """Turn a term into a URL-safe ID.

    Runs of separator characters collapse to a single hyphen, hyphens are
    stripped from both ends, and the result is capped at 80 code points.
    """
    slug = _SLUG_SEPARATORS.sub("-", text.lower()).strip("-")
    return slug[:SLUG_MAX_LENGTH]


def fallback_id() -> str:
    """Generate a time-based ID for terms that slugify to nothing."""
    return f"{FALLBACK_ID_PREFIX}{time.time_ns() // 1_000_000}"


def validate_card(card_input: CardInput, cards: Iterable[Card], existing_id: str = "") -> Card:
    """Normalize input into a Card, enforcing required fields and ID uniqueness.

    Args:
        card_input: Raw caller fields.
        cards: The current collection, used for the duplicate-ID check.
        existing_id: ID of the record being updated; it may keep its own ID.
            Empty for creation.

    Raises:
        CardValidationError: A required field is blank or the ID is taken.
    """
    values = {name: getattr(card_input, name).strip() for name in REQUIRED_FIELDS}
    if not all(values.values()):
        raise CardValidationError(f"{'/'.join(REQUIRED_FIELDS)} are all required")

    aliases = [alias.strip() for alias in card_input.aliases]
    aliases = [alias for alias in aliases if alias]

    card_id = card_input.id.strip() or slugify(values["term"]) or fallback_id()

    if any(card.id == card_id and card.id != existing_id for card in cards):
        raise CardValidationError(f"card id already exists: {card_id}")

    return Card(id=card_id, aliases=aliases, **values)

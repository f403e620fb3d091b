"""Storage layer for cards: one JSON array in one file, guarded by one lock."""

import json
import logging
import threading
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from knowcards.core.errors import CardNotFoundError, StorageError
from knowcards.core.models import Card, CardInput
from knowcards.core.validation import validate_card

logger = logging.getLogger(__name__)

_collection = TypeAdapter(list[Card])

# Shared by every CardStore in the process: one read-modify-write at a time.
_lock = threading.Lock()


class CardStore:
    """Manages the card collection stored as a single JSON file.

    Every public method holds the process-wide lock for its entire
    read-modify-write cycle, so the duplicate-ID check always sees the
    collection that is about to be written back.
    """

    def __init__(self, data_file: Path):
        self.data_file = data_file

    def ensure_initialized(self) -> None:
        """Create the data directory and an empty collection if they don't exist."""
        with _lock:
            self._ensure_file()

    def read_all(self) -> list[Card]:
        """Return the full collection."""
        with _lock:
            return self._load()

    def count(self) -> int:
        """Return the number of stored cards."""
        with _lock:
            return len(self._load())

    def get(self, card_id: str) -> Card:
        """Load a card by ID."""
        with _lock:
            cards = self._load()
            return cards[_index_of(cards, card_id)]

    def create(self, card_input: CardInput) -> Card:
        """Validate and append a new card."""
        with _lock:
            cards = self._load()
            card = validate_card(card_input, cards)
            cards.append(card)
            self._save(cards)
        logger.info("Created card %s", card.id)
        return card

    def update(self, card_id: str, card_input: CardInput) -> Card:
        """Replace a card in place, keeping its ID."""
        with _lock:
            cards = self._load()
            index = _index_of(cards, card_id)
            card_input = card_input.model_copy(update={"id": card_id})
            card = validate_card(card_input, cards, existing_id=card_id)
            cards[index] = card
            self._save(cards)
        logger.info("Updated card %s", card.id)
        return card

    def delete(self, card_id: str) -> Card:
        """Remove a card and return it."""
        with _lock:
            cards = self._load()
            removed = cards.pop(_index_of(cards, card_id))
            self._save(cards)
        logger.info("Deleted card %s", removed.id)
        return removed

    # Callers below must hold _lock.

    def _ensure_file(self) -> None:
        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            if not self.data_file.exists():
                self.data_file.write_text("[]", encoding="utf-8")
                logger.info("Created card store: %s", self.data_file)
        except OSError as e:
            logger.error("Cannot initialize card store %s: %s", self.data_file, e)
            raise StorageError(f"cannot initialize {self.data_file}: {e}") from e

    def _load(self) -> list[Card]:
        self._ensure_file()
        try:
            raw = self.data_file.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("Cannot read card store %s: %s", self.data_file, e)
            raise StorageError(f"cannot read {self.data_file}: {e}") from e

        try:
            return _collection.validate_json(raw)
        except PydanticValidationError as e:
            logger.error("Card store %s is malformed: %s", self.data_file, e)
            raise StorageError(f"malformed card data in {self.data_file}: {e}") from e

    def _save(self, cards: list[Card]) -> None:
        payload = json.dumps(
            [card.model_dump(mode="json") for card in cards],
            indent=2,
            ensure_ascii=False,
        )
        try:
            self.data_file.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.error("Cannot write card store %s: %s", self.data_file, e)
            raise StorageError(f"cannot write {self.data_file}: {e}") from e


def _index_of(cards: list[Card], card_id: str) -> int:
    for index, card in enumerate(cards):
        if card.id == card_id:
            return index
    raise CardNotFoundError(card_id)

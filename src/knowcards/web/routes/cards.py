"""JSON API for the card collection."""

from fastapi import APIRouter, Depends, status

from knowcards.core.models import Card, CardInput
from knowcards.core.storage import CardStore
from knowcards.web.dependencies import get_card_input, get_store

router = APIRouter()


@router.get("", response_model=list[Card])
@router.get("/", response_model=list[Card], include_in_schema=False)
def list_cards(store: CardStore = Depends(get_store)):
    """Return every card in stored order."""
    return store.read_all()


@router.post("", response_model=Card, status_code=status.HTTP_201_CREATED)
@router.post(
    "/", response_model=Card, status_code=status.HTTP_201_CREATED, include_in_schema=False
)
def create_card(
    card_input: CardInput = Depends(get_card_input),
    store: CardStore = Depends(get_store),
):
    """Create a card; the ID is derived from the term unless given."""
    return store.create(card_input)


@router.get("/{card_id:path}", response_model=Card)
def get_card(card_id: str, store: CardStore = Depends(get_store)):
    """Return a single card. IDs may contain slashes."""
    return store.get(card_id.strip())


@router.put("/{card_id:path}", response_model=Card)
def update_card(
    card_id: str,
    card_input: CardInput = Depends(get_card_input),
    store: CardStore = Depends(get_store),
):
    """Replace a card's fields. The ID in the path always wins."""
    return store.update(card_id.strip(), card_input)


@router.delete("/{card_id:path}")
def delete_card(card_id: str, store: CardStore = Depends(get_store)) -> dict:
    """Delete a card and echo it back."""
    removed = store.delete(card_id.strip())
    return {"ok": True, "removed": removed.model_dump()}

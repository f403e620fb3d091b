"""Dependency injection for FastAPI routes."""

from functools import lru_cache
from pathlib import Path

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from knowcards.core import config
from knowcards.core.errors import CardValidationError
from knowcards.core.models import CardInput
from knowcards.core.storage import CardStore

MAX_BODY_BYTES = 1024 * 1024


@lru_cache
def get_store() -> CardStore:
    """Get the card store instance (singleton)."""
    return CardStore(config.data_file())


@lru_cache
def get_site_dir() -> Path:
    """Get the static site root (singleton)."""
    return config.site_dir()


async def read_body(request: Request, limit: int = MAX_BODY_BYTES) -> bytes:
    """Read at most ``limit`` bytes of the request body; the rest is ignored."""
    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) >= limit:
            break
    return bytes(body[:limit])


async def get_card_input(request: Request) -> CardInput:
    """Parse the request body as card fields.

    An empty body is an empty card, which fails validation on write.
    """
    body = await read_body(request)
    if not body.strip():
        return CardInput()
    try:
        return CardInput.model_validate_json(body)
    except PydanticValidationError as e:
        raise CardValidationError("request body is not valid JSON") from e

"""Pydantic models for Knowcards cards."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

REQUIRED_FIELDS = ("term", "category", "core", "boundary", "signal", "action")


def _as_text(value: Any) -> Any:
    """Coerce JSON scalars to text; leave containers for pydantic to reject."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return value


class Card(BaseModel):
    """A stored knowledge card.

    Loading is lenient: null or missing fields read as empty, so a hand-edited
    data file still loads.
    """

    id: str = ""
    term: str = ""
    category: str = ""
    core: str = ""  # what the term is
    boundary: str = ""  # where it stops applying
    signal: str = ""  # how to recognise it in a question
    action: str = ""  # what to say or do about it
    aliases: list[str] = Field(default_factory=list)

    @field_validator(
        "id", "term", "category", "core", "boundary", "signal", "action", mode="before"
    )
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("aliases", mode="before")
    @classmethod
    def _null_aliases(cls, value: Any) -> Any:
        return [] if value is None else value


class CardInput(BaseModel):
    """Caller-supplied card fields, all optional until validated.

    Missing fields behave as empty strings so that validation can report
    them as required rather than failing at parse time.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    term: str = ""
    category: str = ""
    core: str = ""
    boundary: str = ""
    signal: str = ""
    action: str = ""
    aliases: list[str] = Field(default_factory=list)

    @field_validator(
        "id", "term", "category", "core", "boundary", "signal", "action", mode="before"
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("aliases", mode="before")
    @classmethod
    def _coerce_aliases(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [_as_text(item) for item in value]

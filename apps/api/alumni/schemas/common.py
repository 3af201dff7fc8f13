"""Shared schema building blocks."""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import BeforeValidator, StringConstraints


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def optional_text(max_length: int | None = None):
    """Optional free-text field: "" and whitespace are stored as NULL."""
    return Annotated[
        Annotated[str, StringConstraints(max_length=max_length)] | None,
        BeforeValidator(_blank_to_none),
    ]


OptionalText = optional_text()
ShortText = optional_text(255)
PhoneText = optional_text(50)

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]


def as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

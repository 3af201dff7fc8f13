"""Event and RSVP schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from alumni.models.enums import RsvpStatus
from alumni.schemas.common import OptionalText, RequiredText, ShortText, as_utc

EventWindow = Literal["upcoming", "past", "all"]


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    title: str
    description: str | None = None
    batch_year: int | None = None  # None = all batches
    start_at: datetime
    end_at: datetime | None = None
    location: str | None = None
    quota: int | None = None
    created_by: uuid.UUID
    created_at: datetime


class EventWithRsvp(EventResponse):
    my_rsvp: RsvpStatus | None = None


class EventCreateRequest(BaseModel):
    title: RequiredText
    description: OptionalText = None
    batch_year: int | None = None
    start_at: datetime
    end_at: datetime | None = None
    location: ShortText = None
    quota: int | None = Field(None, gt=0)

    @field_validator("start_at", "end_at")
    @classmethod
    def _normalise_tz(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)

    @model_validator(mode="after")
    def _check_window(self) -> "EventCreateRequest":
        if self.end_at is not None and self.end_at < self.start_at:
            raise ValueError("end_at must not be before start_at")
        return self


class RsvpRequest(BaseModel):
    status: RsvpStatus


class RsvpResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    event_id: uuid.UUID
    user_id: uuid.UUID
    status: RsvpStatus
    updated_at: datetime

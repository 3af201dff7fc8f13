"""Batch schemas: batch list and the batch page payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from alumni.modules.announcements.schemas import AnnouncementResponse
from alumni.modules.events.schemas import EventResponse
from alumni.modules.profiles.schemas import ProfileSummary


class BatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    batch_year: int
    name: str
    description: str | None = None


class BatchCreateRequest(BaseModel):
    batch_year: int = Field(..., ge=1900, le=2200)
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class BatchPageResponse(BaseModel):
    """Everything the batch page shows. batch is null for an unknown year."""

    batch: BatchResponse | None
    members: list[ProfileSummary] = Field(default_factory=list)
    events: list[EventResponse] = Field(default_factory=list)
    announcements: list[AnnouncementResponse] = Field(default_factory=list)

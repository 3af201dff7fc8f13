"""Announcement schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from alumni.schemas.common import RequiredText


class AnnouncementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    title: str
    content: str
    batch_year: int | None = None
    created_by: uuid.UUID
    created_by_name: str | None = None
    created_at: datetime


class AnnouncementCreateRequest(BaseModel):
    title: RequiredText
    content: str = Field(..., min_length=1, max_length=20_000)
    batch_year: int | None = None

"""Profile schemas: own profile, member summaries, detail view."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from alumni.auth.policy import ContactView
from alumni.models.enums import ConnectionStatus, ProfileStatus
from alumni.schemas.common import PhoneText, RequiredText, ShortText


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    full_name: str
    batch_year: int
    location_state: str | None
    industry: str | None
    job_title: str | None
    phone: str | None
    email_public: bool
    phone_public: bool
    status: ProfileStatus
    created_at: datetime
    updated_at: datetime


class ProfileSummary(BaseModel):
    """Public card shown in listings; never carries contact details."""

    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    full_name: str
    batch_year: int
    job_title: str | None = None
    industry: str | None = None
    location_state: str | None = None


class ProfileUpdateRequest(BaseModel):
    """Self-editable fields. batch_year and status are changed by admins only."""

    full_name: RequiredText | None = None
    location_state: ShortText = None
    industry: ShortText = None
    job_title: ShortText = None
    phone: PhoneText = None
    email_public: bool | None = None
    phone_public: bool | None = None


class ConnectionState(BaseModel):
    id: uuid.UUID
    status: ConnectionStatus
    direction: str  # outgoing | incoming


class ProfileDetailResponse(BaseModel):
    profile: ProfileSummary
    status: ProfileStatus
    is_own_profile: bool
    connection: ConnectionState | None
    contact: ContactView

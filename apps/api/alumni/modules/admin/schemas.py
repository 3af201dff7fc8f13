"""Admin module schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from alumni.models.enums import BatchRoleType
from alumni.modules.profiles.schemas import ProfileResponse


class AdminProfileRow(ProfileResponse):
    email: str  # "N/A" when the identity row is missing


class BatchRoleAssignRequest(BaseModel):
    user_id: uuid.UUID
    batch_year: int


class BatchRoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    user_id: uuid.UUID
    batch_year: int
    role: BatchRoleType
    created_at: datetime

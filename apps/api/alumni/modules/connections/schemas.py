"""Connection schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from alumni.models.enums import ConnectionStatus


class ConnectionCreateRequest(BaseModel):
    receiver_id: uuid.UUID


class ConnectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    requester_id: uuid.UUID
    receiver_id: uuid.UUID
    status: ConnectionStatus
    created_at: datetime
    updated_at: datetime


class Counterparty(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: uuid.UUID
    full_name: str
    batch_year: int
    job_title: str | None = None


class ConnectionItem(BaseModel):
    id: uuid.UUID
    status: ConnectionStatus
    created_at: datetime
    counterparty: Counterparty


class ConnectionsOverview(BaseModel):
    connected: list[ConnectionItem]
    incoming: list[ConnectionItem]
    sent: list[ConnectionItem]

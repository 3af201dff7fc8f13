"""Batch admin panel schemas."""

from pydantic import BaseModel

from alumni.modules.announcements.schemas import AnnouncementResponse
from alumni.modules.batches.schemas import BatchResponse
from alumni.modules.events.schemas import EventResponse


class BatchAdminOverview(BaseModel):
    batches: list[BatchResponse]
    events: list[EventResponse]
    announcements: list[AnnouncementResponse]

"""Home dashboard schemas."""

from pydantic import BaseModel

from alumni.models.enums import ProfileStatus
from alumni.modules.announcements.schemas import AnnouncementResponse
from alumni.modules.events.schemas import EventWithRsvp


class HomeMember(BaseModel):
    full_name: str
    batch_year: int
    status: ProfileStatus
    pending_approval: bool


class HomeResponse(BaseModel):
    member: HomeMember
    announcements: list[AnnouncementResponse]
    upcoming_events: list[EventWithRsvp]

"""SQLAlchemy models package. Importing it populates Base.metadata."""

from alumni.models.base import BaseModel, CreatedAtMixin, TimestampedModel
from alumni.models.enums import BatchRoleType, ConnectionStatus, ProfileStatus, RsvpStatus

# Core
from alumni.models.core import Batch, BatchRole, CentralAdmin, Profile, User

# Connections
from alumni.models.connections import Connection, pair_key

# Events & announcements
from alumni.models.events import Announcement, Event, Rsvp

__all__ = [
    "Announcement",
    "BaseModel",
    "Batch",
    "BatchRole",
    "BatchRoleType",
    "CentralAdmin",
    "Connection",
    "ConnectionStatus",
    "CreatedAtMixin",
    "Event",
    "Profile",
    "ProfileStatus",
    "Rsvp",
    "RsvpStatus",
    "TimestampedModel",
    "User",
    "pair_key",
]

"""Events, RSVPs and announcements. A null batch_year means all batches."""

import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alumni.models.base import BaseModel
from alumni.models.enums import RsvpStatus


class Event(BaseModel):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint("end_at IS NULL OR end_at >= start_at", name="ck_events_end_after_start"),
        CheckConstraint("quota IS NULL OR quota > 0", name="ck_events_quota_positive"),
        Index("ix_events_batch_year_start_at", "batch_year", "start_at"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    batch_year: Mapped[int | None] = mapped_column(
        ForeignKey("batches.batch_year", ondelete="CASCADE"),
    )
    start_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    location: Mapped[str | None] = mapped_column(String(255))
    quota: Mapped[int | None] = mapped_column(Integer)  # display only
    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )


class Rsvp(BaseModel):
    __tablename__ = "rsvps"
    __table_args__ = (
        Index("uq_rsvps_event_user", "event_id", "user_id", unique=True),
    )

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    status: Mapped[RsvpStatus] = mapped_column(nullable=False)


class Announcement(BaseModel):
    __tablename__ = "announcements"
    __table_args__ = (
        Index("ix_announcements_batch_year_created_at", "batch_year", "created_at"),
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    batch_year: Mapped[int | None] = mapped_column(
        ForeignKey("batches.batch_year", ondelete="CASCADE"),
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )

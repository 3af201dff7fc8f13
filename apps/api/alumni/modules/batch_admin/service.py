"""Batch admin service: manage events and announcements of administered batches.

Batch admins act only on their own batches. Global items (batch_year is
None) belong to central admins.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.models.core import Batch
from alumni.models.events import Announcement, Event
from alumni.modules.announcements.schemas import AnnouncementCreateRequest
from alumni.modules.announcements.service import query_announcements
from alumni.modules.batch_admin.schemas import BatchAdminOverview
from alumni.modules.batches.schemas import BatchResponse
from alumni.modules.events.schemas import EventCreateRequest, EventResponse
from alumni.schemas.auth import CurrentUser

logger = structlog.get_logger()


async def get_overview(db: AsyncSession, current_user: CurrentUser) -> BatchAdminOverview:
    years = current_user.admin_batch_years
    if not years:
        return BatchAdminOverview(batches=[], events=[], announcements=[])

    batches = await db.execute(
        select(Batch).where(Batch.batch_year.in_(years)).order_by(Batch.batch_year.desc())
    )
    events = await db.execute(
        select(Event).where(Event.batch_year.in_(years)).order_by(Event.start_at.desc())
    )
    return BatchAdminOverview(
        batches=[BatchResponse.model_validate(b) for b in batches.scalars().all()],
        events=[EventResponse.model_validate(e) for e in events.scalars().all()],
        announcements=await query_announcements(db, Announcement.batch_year.in_(years)),
    )


async def _check_scope(db: AsyncSession, current_user: CurrentUser, batch_year: int | None) -> None:
    if not current_user.can_manage_batch(batch_year):
        if batch_year is None:
            raise PermissionError("Only central admins can publish to all batches")
        raise PermissionError(f"You do not manage batch {batch_year}")
    if batch_year is not None and await db.get(Batch, batch_year) is None:
        raise ValueError(f"Unknown batch year {batch_year}")


# ── Events ────────────────────────────────────────────────────────────────────


async def create_event(
    db: AsyncSession, current_user: CurrentUser, body: EventCreateRequest
) -> Event:
    await _check_scope(db, current_user, body.batch_year)
    event = Event(**body.model_dump(), created_by=current_user.user_id)
    db.add(event)
    await db.flush()
    await db.refresh(event)
    logger.info(
        "batch_admin.event_created",
        event_id=str(event.id),
        batch_year=event.batch_year,
        created_by=str(current_user.user_id),
    )
    return event


async def delete_event(db: AsyncSession, current_user: CurrentUser, event_id: uuid.UUID) -> None:
    event = await db.get(Event, event_id)
    if event is None:
        raise LookupError("Event not found")
    if not current_user.can_manage_batch(event.batch_year):
        raise PermissionError("You cannot delete this event")
    await db.delete(event)
    await db.flush()
    logger.info("batch_admin.event_deleted", event_id=str(event_id))


# ── Announcements ─────────────────────────────────────────────────────────────


async def create_announcement(
    db: AsyncSession, current_user: CurrentUser, body: AnnouncementCreateRequest
) -> Announcement:
    await _check_scope(db, current_user, body.batch_year)
    announcement = Announcement(**body.model_dump(), created_by=current_user.user_id)
    db.add(announcement)
    await db.flush()
    await db.refresh(announcement)
    logger.info(
        "batch_admin.announcement_created",
        announcement_id=str(announcement.id),
        batch_year=announcement.batch_year,
        created_by=str(current_user.user_id),
    )
    return announcement


async def delete_announcement(
    db: AsyncSession, current_user: CurrentUser, announcement_id: uuid.UUID
) -> None:
    announcement = await db.get(Announcement, announcement_id)
    if announcement is None:
        raise LookupError("Announcement not found")
    if not current_user.can_manage_batch(announcement.batch_year):
        raise PermissionError("You cannot delete this announcement")
    await db.delete(announcement)
    await db.flush()
    logger.info("batch_admin.announcement_deleted", announcement_id=str(announcement_id))

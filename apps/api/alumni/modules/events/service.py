"""Event service: visibility-scoped listing and RSVP upsert.

An event is visible to a member when it is global (batch_year IS NULL) or
belongs to the member's batch. quota is informational; nothing here
counts attendees against it.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.models.enums import RsvpStatus
from alumni.models.events import Event, Rsvp
from alumni.modules.events.schemas import EventWindow, EventWithRsvp
from alumni.schemas.auth import CurrentUser

logger = structlog.get_logger()


def visible_to(batch_year: int | None):
    """WHERE clause for events a member of batch_year may see."""
    if batch_year is None:
        return Event.batch_year.is_(None)
    return or_(Event.batch_year.is_(None), Event.batch_year == batch_year)


async def list_events(
    db: AsyncSession,
    current_user: CurrentUser,
    when: EventWindow = "upcoming",
    limit: int | None = None,
) -> list[EventWithRsvp]:
    now = datetime.now(timezone.utc)
    stmt = (
        select(Event, Rsvp.status)
        .outerjoin(
            Rsvp,
            (Rsvp.event_id == Event.id) & (Rsvp.user_id == current_user.user_id),
        )
        .where(visible_to(current_user.batch_year))
    )
    if when == "upcoming":
        stmt = stmt.where(Event.start_at >= now)
    elif when == "past":
        stmt = stmt.where(Event.start_at < now)
    stmt = stmt.order_by(Event.start_at.asc(), Event.id)
    if limit is not None:
        stmt = stmt.limit(limit)

    result = await db.execute(stmt)
    items = []
    for event, rsvp_status in result.all():
        item = EventWithRsvp.model_validate(event)
        item.my_rsvp = rsvp_status
        items.append(item)
    return items


async def get_visible_event(
    db: AsyncSession, current_user: CurrentUser, event_id: uuid.UUID
) -> Event:
    """Events outside the caller's scope are reported as missing."""
    stmt = select(Event).where(Event.id == event_id, visible_to(current_user.batch_year))
    event = (await db.execute(stmt)).scalar_one_or_none()
    if event is None:
        raise LookupError("Event not found")
    return event


async def _find_rsvp(db: AsyncSession, event_id: uuid.UUID, user_id: uuid.UUID) -> Rsvp | None:
    stmt = select(Rsvp).where(Rsvp.event_id == event_id, Rsvp.user_id == user_id)
    return (await db.execute(stmt)).scalar_one_or_none()


async def set_rsvp(
    db: AsyncSession,
    current_user: CurrentUser,
    event_id: uuid.UUID,
    status: RsvpStatus,
) -> Rsvp:
    """Create or overwrite the caller's RSVP. Repeating a call is a no-op; last write wins."""
    await get_visible_event(db, current_user, event_id)
    user_id = current_user.user_id

    rsvp = await _find_rsvp(db, event_id, user_id)
    if rsvp is None:
        rsvp = Rsvp(event_id=event_id, user_id=user_id, status=status)
        db.add(rsvp)
        try:
            await db.flush()
        except IntegrityError:
            # Concurrent first RSVP from the same member: update the winner's row
            await db.rollback()
            rsvp = await _find_rsvp(db, event_id, user_id)
            if rsvp is None:
                raise
            rsvp.status = status
            await db.flush()
    else:
        rsvp.status = status
        await db.flush()

    await db.refresh(rsvp)
    logger.info(
        "events.rsvp_set",
        event_id=str(event_id),
        user_id=str(user_id),
        status=status.value,
    )
    return rsvp

"""Batch service: batch list and the per-batch page."""

from __future__ import annotations

from datetime import datetime, timezone

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.core.config import settings
from alumni.core.errors import ConflictError
from alumni.models.core import Batch, Profile
from alumni.models.enums import ProfileStatus
from alumni.models.events import Announcement, Event
from alumni.modules.announcements.service import query_announcements
from alumni.modules.batches.schemas import (
    BatchCreateRequest,
    BatchPageResponse,
    BatchResponse,
)
from alumni.modules.events.schemas import EventResponse
from alumni.modules.profiles.schemas import ProfileSummary

logger = structlog.get_logger()


async def list_batches(db: AsyncSession) -> list[Batch]:
    result = await db.execute(select(Batch).order_by(Batch.batch_year.desc()))
    return list(result.scalars().all())


async def create_batch(db: AsyncSession, body: BatchCreateRequest) -> Batch:
    if await db.get(Batch, body.batch_year) is not None:
        raise ConflictError(f"Batch {body.batch_year} already exists")
    batch = Batch(
        batch_year=body.batch_year,
        name=body.name,
        description=body.description,
    )
    db.add(batch)
    await db.flush()
    await db.refresh(batch)
    logger.info("batches.created", batch_year=batch.batch_year)
    return batch


async def get_batch_page(db: AsyncSession, batch_year: int) -> BatchPageResponse:
    """Members, upcoming batch events and batch announcements.

    An unknown year yields an empty page rather than an error.
    """
    batch = await db.get(Batch, batch_year)
    if batch is None:
        return BatchPageResponse(batch=None)

    limit = settings.BATCH_FEED_LIMIT

    members = await db.execute(
        select(Profile)
        .where(Profile.batch_year == batch_year, Profile.status == ProfileStatus.APPROVED)
        .order_by(Profile.full_name.asc())
    )
    events = await db.execute(
        select(Event)
        .where(
            Event.batch_year == batch_year,
            Event.start_at >= datetime.now(timezone.utc),
        )
        .order_by(Event.start_at.asc())
        .limit(limit)
    )
    announcements = await query_announcements(
        db, Announcement.batch_year == batch_year, limit=limit
    )

    return BatchPageResponse(
        batch=BatchResponse.model_validate(batch),
        members=[ProfileSummary.model_validate(p) for p in members.scalars().all()],
        events=[EventResponse.model_validate(e) for e in events.scalars().all()],
        announcements=announcements,
    )

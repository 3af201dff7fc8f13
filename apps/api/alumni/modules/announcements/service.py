"""Announcement feed: global items plus the caller's batch, newest first."""

from __future__ import annotations

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.models.core import Profile
from alumni.models.events import Announcement
from alumni.modules.announcements.schemas import AnnouncementResponse


def visible_to(batch_year: int | None):
    if batch_year is None:
        return Announcement.batch_year.is_(None)
    return or_(Announcement.batch_year.is_(None), Announcement.batch_year == batch_year)


async def query_announcements(
    db: AsyncSession, *where, limit: int | None = None
) -> list[AnnouncementResponse]:
    """Announcements matching `where`, newest first, with the creator's name."""
    stmt = (
        select(Announcement, Profile.full_name)
        .outerjoin(Profile, Profile.id == Announcement.created_by)
        .where(*where)
        .order_by(Announcement.created_at.desc(), Announcement.id)
    )
    if limit is not None:
        stmt = stmt.limit(limit)

    result = await db.execute(stmt)
    items = []
    for announcement, creator_name in result.all():
        item = AnnouncementResponse.model_validate(announcement)
        item.created_by_name = creator_name
        items.append(item)
    return items


async def list_announcements(
    db: AsyncSession, batch_year: int | None, limit: int | None = None
) -> list[AnnouncementResponse]:
    return await query_announcements(db, visible_to(batch_year), limit=limit)

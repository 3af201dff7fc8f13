"""Directory search over approved profiles."""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.core.config import settings
from alumni.models.core import Profile
from alumni.models.enums import ProfileStatus
from alumni.modules.directory.schemas import DirectoryPage
from alumni.modules.profiles.schemas import ProfileSummary


@dataclass
class DirectoryFilters:
    search: str | None = None
    batch_year: int | None = None
    industry: str | None = None
    location: str | None = None

    def clauses(self) -> list:
        """Each filter that is set narrows the result (logical AND)."""
        where = [Profile.status == ProfileStatus.APPROVED]
        if self.search:
            where.append(Profile.full_name.icontains(self.search, autoescape=True))
        if self.batch_year is not None:
            where.append(Profile.batch_year == self.batch_year)
        if self.industry:
            where.append(Profile.industry.icontains(self.industry, autoescape=True))
        if self.location:
            where.append(Profile.location_state.icontains(self.location, autoescape=True))
        return where


async def search_directory(
    db: AsyncSession, filters: DirectoryFilters, page: int = 0
) -> DirectoryPage:
    page_size = settings.DIRECTORY_PAGE_SIZE
    where = filters.clauses()

    total = (await db.execute(select(func.count()).select_from(Profile).where(*where))).scalar_one()
    result = await db.execute(
        select(Profile)
        .where(*where)
        .order_by(Profile.full_name.asc(), Profile.id)
        .offset(page * page_size)
        .limit(page_size)
    )
    items = [ProfileSummary.model_validate(p) for p in result.scalars().all()]

    return DirectoryPage(
        items=items,
        page=page,
        page_size=page_size,
        total=total,
        has_next=(page + 1) * page_size < total,
    )

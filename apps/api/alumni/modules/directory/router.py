"""Directory API router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_profile
from alumni.core.database import get_db
from alumni.modules.directory.schemas import DirectoryPage
from alumni.modules.directory.service import DirectoryFilters, search_directory
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/directory", tags=["directory"])


@router.get("", response_model=DirectoryPage)
async def search(
    search: str | None = Query(None, max_length=255),
    batch_year: int | None = Query(None),
    industry: str | None = Query(None, max_length=255),
    location: str | None = Query(None, max_length=255),
    page: int = Query(0, ge=0),
    _current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Approved members only, sorted by name. Filters combine with AND."""
    filters = DirectoryFilters(
        search=search.strip() if search else None,
        batch_year=batch_year,
        industry=industry.strip() if industry else None,
        location=location.strip() if location else None,
    )
    return await search_directory(db, filters, page)

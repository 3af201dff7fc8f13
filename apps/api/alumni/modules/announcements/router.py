"""Announcements API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_profile
from alumni.core.database import get_db
from alumni.modules.announcements import service
from alumni.modules.announcements.schemas import AnnouncementResponse
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/announcements", tags=["announcements"])


@router.get("", response_model=list[AnnouncementResponse])
async def list_announcements(
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_announcements(db, current_user.batch_year)

"""Home dashboard: greeting, latest announcements, next events."""

from sqlalchemy.ext.asyncio import AsyncSession

from alumni.core.config import settings
from alumni.models.core import Profile
from alumni.models.enums import ProfileStatus
from alumni.modules.announcements.service import list_announcements
from alumni.modules.events.service import list_events
from alumni.modules.home.schemas import HomeMember, HomeResponse
from alumni.schemas.auth import CurrentUser


async def get_home(db: AsyncSession, current_user: CurrentUser) -> HomeResponse:
    profile = await db.get(Profile, current_user.user_id)
    if profile is None:
        raise LookupError("Profile not found")

    return HomeResponse(
        member=HomeMember(
            full_name=profile.full_name,
            batch_year=profile.batch_year,
            status=profile.status,
            pending_approval=profile.status == ProfileStatus.PENDING,
        ),
        announcements=await list_announcements(
            db, profile.batch_year, limit=settings.HOME_ANNOUNCEMENT_LIMIT
        ),
        upcoming_events=await list_events(
            db, current_user, "upcoming", limit=settings.HOME_EVENT_LIMIT
        ),
    )

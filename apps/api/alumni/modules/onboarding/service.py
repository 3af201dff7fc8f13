"""Onboarding service: first-time profile creation."""

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.core.errors import ConflictError
from alumni.models.core import Batch, Profile
from alumni.models.enums import ProfileStatus
from alumni.modules.onboarding.schemas import OnboardingProfileRequest
from alumni.schemas.auth import CurrentUser

logger = structlog.get_logger()


async def create_profile(
    db: AsyncSession,
    current_user: CurrentUser,
    body: OnboardingProfileRequest,
) -> Profile:
    """Create the caller's profile in pending state, awaiting admin approval."""
    user_id = current_user.user_id
    if await db.get(Profile, user_id) is not None:
        raise ConflictError("Profile already exists")
    if await db.get(Batch, body.batch_year) is None:
        raise ValueError(f"Unknown batch year {body.batch_year}")

    profile = Profile(
        id=user_id,
        full_name=body.full_name,
        batch_year=body.batch_year,
        location_state=body.location_state,
        industry=body.industry,
        job_title=body.job_title,
        phone=body.phone,
        status=ProfileStatus.PENDING,
    )
    db.add(profile)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Profile already exists") from exc

    await db.refresh(profile)
    logger.info("onboarding.profile_created", profile_id=str(user_id), batch_year=body.batch_year)
    return profile

"""Profile service: self-service edits and the member detail view."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.policy import get_connection_between, resolve_contact
from alumni.models.core import Profile, User
from alumni.models.enums import ConnectionStatus
from alumni.modules.profiles.schemas import (
    ConnectionState,
    ProfileDetailResponse,
    ProfileSummary,
    ProfileUpdateRequest,
)
from alumni.schemas.auth import CurrentUser

logger = structlog.get_logger()

# Fields that may not be cleared by sending null
_NON_NULLABLE = {"full_name", "email_public", "phone_public"}


async def get_profile(db: AsyncSession, profile_id: uuid.UUID) -> Profile | None:
    return await db.get(Profile, profile_id)


async def update_own_profile(
    db: AsyncSession, current_user: CurrentUser, body: ProfileUpdateRequest
) -> Profile:
    profile = await db.get(Profile, current_user.user_id)
    if profile is None:
        raise LookupError("Profile not found")

    changed = []
    for field, value in body.model_dump(exclude_unset=True).items():
        if value is None and field in _NON_NULLABLE:
            continue
        setattr(profile, field, value)
        changed.append(field)

    await db.flush()
    await db.refresh(profile)
    logger.info("profiles.updated", profile_id=str(profile.id), fields=changed)
    return profile


async def get_profile_detail(
    db: AsyncSession, current_user: CurrentUser, profile_id: uuid.UUID
) -> ProfileDetailResponse:
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise LookupError("Profile not found")

    viewer_id = current_user.user_id
    is_own = viewer_id == profile.id

    connection = None if is_own else await get_connection_between(db, viewer_id, profile.id)
    state = None
    if connection is not None:
        state = ConnectionState(
            id=connection.id,
            status=connection.status,
            direction="outgoing" if connection.requester_id == viewer_id else "incoming",
        )

    is_connected = connection is not None and connection.status == ConnectionStatus.ACCEPTED
    email: str | None = None
    if is_own or is_connected:
        owner = await db.get(User, profile.id)
        email = owner.email if owner else None

    return ProfileDetailResponse(
        profile=ProfileSummary.model_validate(profile),
        status=profile.status,
        is_own_profile=is_own,
        connection=state,
        contact=resolve_contact(profile, email, viewer_id, is_connected),
    )

"""Central admin service: member approval lifecycle, batch roles, batches.

Status transitions:
    approve     pending           -> approved
    suspend     pending|approved  -> suspended   (also used to reject an application)
    reactivate  suspended         -> approved
Anything else is a conflict.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.core.errors import ConflictError
from alumni.models.core import Batch, BatchRole, Profile, User
from alumni.models.enums import BatchRoleType, ProfileStatus
from alumni.modules.admin.schemas import AdminProfileRow, BatchRoleAssignRequest
from alumni.modules.profiles.schemas import ProfileResponse
from alumni.schemas.auth import CurrentUser

logger = structlog.get_logger()

UNKNOWN_EMAIL = "N/A"

_TRANSITIONS: dict[str, tuple[set[ProfileStatus], ProfileStatus]] = {
    "approve": ({ProfileStatus.PENDING}, ProfileStatus.APPROVED),
    "suspend": ({ProfileStatus.PENDING, ProfileStatus.APPROVED}, ProfileStatus.SUSPENDED),
    "reactivate": ({ProfileStatus.SUSPENDED}, ProfileStatus.APPROVED),
}

_EVENTS = {
    "approve": "admin.profile_approved",
    "suspend": "admin.profile_suspended",
    "reactivate": "admin.profile_reactivated",
}


# ── Profiles ──────────────────────────────────────────────────────────────────


async def list_profiles(
    db: AsyncSession, status: ProfileStatus | None = None
) -> list[AdminProfileRow]:
    """Profiles with their identity email. Pending queue is newest first, everything else by name."""
    stmt = select(Profile, User.email).outerjoin(User, User.id == Profile.id)
    if status is not None:
        stmt = stmt.where(Profile.status == status)
    if status == ProfileStatus.PENDING:
        stmt = stmt.order_by(Profile.created_at.desc(), Profile.full_name)
    else:
        stmt = stmt.order_by(Profile.full_name.asc())

    result = await db.execute(stmt)
    rows = []
    for profile, email in result.all():
        data = ProfileResponse.model_validate(profile).model_dump()
        rows.append(AdminProfileRow(**data, email=email or UNKNOWN_EMAIL))
    return rows


async def change_status(
    db: AsyncSession, admin: CurrentUser, profile_id: uuid.UUID, action: str
) -> Profile:
    allowed_from, target = _TRANSITIONS[action]
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise LookupError("Profile not found")
    if profile.status not in allowed_from:
        raise ConflictError(f"Cannot {action} a profile that is {profile.status.value}")

    previous = profile.status
    profile.status = target
    await db.flush()
    await db.refresh(profile)
    logger.info(
        _EVENTS[action],
        profile_id=str(profile_id),
        admin_id=str(admin.user_id),
        from_status=previous.value,
        to_status=target.value,
    )
    return profile


# ── Batch roles ───────────────────────────────────────────────────────────────


async def assign_batch_admin(
    db: AsyncSession, admin: CurrentUser, body: BatchRoleAssignRequest
) -> BatchRole:
    profile = await db.get(Profile, body.user_id)
    if profile is None:
        raise LookupError("Profile not found")
    if not profile.is_approved:
        raise ValueError("Only approved members can be batch admins")
    if await db.get(Batch, body.batch_year) is None:
        raise ValueError(f"Unknown batch year {body.batch_year}")

    existing = await db.execute(
        select(BatchRole.id).where(
            BatchRole.user_id == body.user_id, BatchRole.batch_year == body.batch_year
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("Member is already an admin of this batch")

    role = BatchRole(
        user_id=body.user_id,
        batch_year=body.batch_year,
        role=BatchRoleType.BATCH_ADMIN,
    )
    db.add(role)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("Member is already an admin of this batch") from exc

    await db.refresh(role)
    logger.info(
        "admin.batch_admin_assigned",
        user_id=str(body.user_id),
        batch_year=body.batch_year,
        admin_id=str(admin.user_id),
    )
    return role

"""Authorization predicates: admin roles and contact visibility.

Role checks read the current rows and answer False/empty when nothing
matches; they never raise. Field-level contact visibility is a pure
function over a profile and the viewer's relationship to it.

Contact rules:
    owner            -> email always, phone when set
    accepted connection -> email if email_public, phone if phone_public
    anyone else      -> nothing
There is no admin override.
"""

import uuid

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.models.connections import Connection, pair_key
from alumni.models.core import BatchRole, CentralAdmin, Profile
from alumni.models.enums import ConnectionStatus

CONNECT_REQUIRED = "connect_required"
PRIVATE = "private"


class ContactView(BaseModel):
    can_view_contact: bool
    email: str | None = None
    phone: str | None = None
    hidden_reason: str | None = None  # connect_required | private


async def is_central_admin(db: AsyncSession, user_id: uuid.UUID | None) -> bool:
    if user_id is None:
        return False
    result = await db.execute(
        select(CentralAdmin.id).where(CentralAdmin.user_id == user_id).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def get_batch_roles(db: AsyncSession, user_id: uuid.UUID | None) -> list[BatchRole]:
    if user_id is None:
        return []
    result = await db.execute(
        select(BatchRole).where(BatchRole.user_id == user_id).order_by(BatchRole.batch_year.desc())
    )
    return list(result.scalars().all())


async def is_batch_admin(db: AsyncSession, user_id: uuid.UUID | None, batch_year: int) -> bool:
    roles = await get_batch_roles(db, user_id)
    return any(role.batch_year == batch_year for role in roles)


async def get_connection_between(
    db: AsyncSession, a: uuid.UUID, b: uuid.UUID
) -> Connection | None:
    """The live (non-rejected) connection for the unordered pair, if any.

    Falls back to the latest rejected row so callers can still show it.
    """
    if a == b:
        return None
    low, high = pair_key(a, b)
    result = await db.execute(
        select(Connection)
        .where(Connection.user_low_id == low, Connection.user_high_id == high)
        .order_by(Connection.created_at.desc())
    )
    rows = list(result.scalars().all())
    for conn in rows:
        if conn.status != ConnectionStatus.REJECTED:
            return conn
    return rows[0] if rows else None


async def are_connected(db: AsyncSession, a: uuid.UUID, b: uuid.UUID) -> bool:
    if a == b:
        return False
    low, high = pair_key(a, b)
    result = await db.execute(
        select(Connection.id).where(
            Connection.user_low_id == low,
            Connection.user_high_id == high,
            Connection.status == ConnectionStatus.ACCEPTED,
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def can_view_contact(
    db: AsyncSession, viewer_id: uuid.UUID, profile_id: uuid.UUID
) -> bool:
    """True for the profile owner or an accepted connection in either direction."""
    if viewer_id == profile_id:
        return True
    return await are_connected(db, viewer_id, profile_id)


def resolve_contact(
    profile: Profile,
    email: str | None,
    viewer_id: uuid.UUID,
    is_connected: bool,
) -> ContactView:
    """Apply the per-field visibility flags for one viewer."""
    if viewer_id == profile.id:
        return ContactView(can_view_contact=True, email=email, phone=profile.phone)

    if not is_connected:
        return ContactView(can_view_contact=False, hidden_reason=CONNECT_REQUIRED)

    view = ContactView(
        can_view_contact=True,
        email=email if profile.email_public else None,
        phone=profile.phone if profile.phone_public else None,
    )
    if view.email is None and view.phone is None:
        view.hidden_reason = PRIVATE
    return view

"""Tests for authorization predicates and contact visibility."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.policy import (
    CONNECT_REQUIRED,
    PRIVATE,
    are_connected,
    can_view_contact,
    get_batch_roles,
    get_connection_between,
    is_batch_admin,
    is_central_admin,
    resolve_contact,
)
from alumni.models.connections import Connection, pair_key
from alumni.models.core import Profile
from alumni.models.enums import ConnectionStatus, ProfileStatus
from alumni.schemas.auth import CurrentUser

pytestmark = pytest.mark.anyio


def _profile(**overrides) -> Profile:
    values = dict(
        id=uuid.uuid4(),
        full_name="Asha Rao",
        batch_year=2015,
        phone="+1 555 0100",
        email_public=False,
        phone_public=False,
        status=ProfileStatus.APPROVED,
    )
    values.update(overrides)
    return Profile(**values)


async def _connect(db: AsyncSession, requester, receiver, status=ConnectionStatus.ACCEPTED):
    low, high = pair_key(requester.id, receiver.id)
    conn = Connection(
        requester_id=requester.id,
        receiver_id=receiver.id,
        user_low_id=low,
        user_high_id=high,
        status=status,
    )
    db.add(conn)
    await db.flush()
    await db.refresh(conn)
    return conn


# ── resolve_contact (pure) ────────────────────────────────────────────────


class TestResolveContact:
    def test_owner_sees_everything_regardless_of_flags(self):
        profile = _profile()
        view = resolve_contact(profile, "asha@example.com", profile.id, is_connected=False)
        assert view.can_view_contact is True
        assert view.email == "asha@example.com"
        assert view.phone == "+1 555 0100"
        assert view.hidden_reason is None

    def test_stranger_sees_nothing_even_when_public(self):
        profile = _profile(email_public=True, phone_public=True)
        view = resolve_contact(profile, "asha@example.com", uuid.uuid4(), is_connected=False)
        assert view.can_view_contact is False
        assert view.email is None
        assert view.phone is None
        assert view.hidden_reason == CONNECT_REQUIRED

    def test_connection_sees_only_flagged_fields(self):
        profile = _profile(email_public=False, phone_public=True)
        view = resolve_contact(profile, "asha@example.com", uuid.uuid4(), is_connected=True)
        assert view.can_view_contact is True
        assert view.email is None
        assert view.phone == "+1 555 0100"
        assert view.hidden_reason is None

    def test_connection_sees_email_when_public(self):
        profile = _profile(email_public=True)
        view = resolve_contact(profile, "asha@example.com", uuid.uuid4(), is_connected=True)
        assert view.email == "asha@example.com"
        assert view.phone is None

    def test_connection_with_both_flags_off_is_private(self):
        profile = _profile()
        view = resolve_contact(profile, "asha@example.com", uuid.uuid4(), is_connected=True)
        assert view.can_view_contact is True
        assert view.email is None
        assert view.phone is None
        assert view.hidden_reason == PRIVATE

    def test_public_phone_that_is_unset_still_counts_as_private(self):
        profile = _profile(phone=None, phone_public=True)
        view = resolve_contact(profile, "asha@example.com", uuid.uuid4(), is_connected=True)
        assert view.email is None
        assert view.phone is None
        assert view.hidden_reason == PRIVATE


# ── Role predicates ───────────────────────────────────────────────────────


class TestRolePredicates:
    async def test_central_admin(self, db: AsyncSession, make_member):
        admin = await make_member("Admin", central_admin=True)
        member = await make_member("Member")
        assert await is_central_admin(db, admin.id) is True
        assert await is_central_admin(db, member.id) is False
        assert await is_central_admin(db, None) is False

    async def test_batch_roles_are_listed_newest_year_first(self, db: AsyncSession, make_member):
        user = await make_member("Coordinator", admin_of=(2010, 2020))
        roles = await get_batch_roles(db, user.id)
        assert [r.batch_year for r in roles] == [2020, 2010]
        assert await get_batch_roles(db, None) == []

    async def test_is_batch_admin_is_per_batch(self, db: AsyncSession, make_member):
        user = await make_member("Coordinator", admin_of=(2015,))
        assert await is_batch_admin(db, user.id, 2015) is True
        assert await is_batch_admin(db, user.id, 2010) is False
        assert await is_batch_admin(db, uuid.uuid4(), 2015) is False


class TestCanManageBatch:
    def _user(self, **kwargs) -> CurrentUser:
        return CurrentUser(
            user_id=uuid.uuid4(),
            email="x@example.com",
            external_auth_id="user_x",
            **kwargs,
        )

    def test_central_admin_manages_everything_including_global(self):
        user = self._user(is_central_admin=True)
        assert user.can_manage_batch(2015) is True
        assert user.can_manage_batch(None) is True

    def test_batch_admin_manages_own_batches_only(self):
        user = self._user(admin_batch_years=[2015])
        assert user.can_manage_batch(2015) is True
        assert user.can_manage_batch(2010) is False
        assert user.can_manage_batch(None) is False


# ── Connection-based visibility ───────────────────────────────────────────


class TestContactVisibility:
    async def test_owner_can_always_view(self, db: AsyncSession, make_member):
        a = await make_member("A")
        assert await can_view_contact(db, a.id, a.id) is True

    async def test_accepted_connection_is_symmetric(self, db: AsyncSession, make_member):
        a = await make_member("A")
        b = await make_member("B")
        await _connect(db, a, b)
        assert await can_view_contact(db, a.id, b.id) is True
        assert await can_view_contact(db, b.id, a.id) is True

    async def test_pending_or_rejected_grants_nothing(self, db: AsyncSession, make_member):
        a = await make_member("A")
        b = await make_member("B")
        c = await make_member("C")
        await _connect(db, a, b, ConnectionStatus.PENDING)
        await _connect(db, a, c, ConnectionStatus.REJECTED)
        assert await can_view_contact(db, a.id, b.id) is False
        assert await can_view_contact(db, c.id, a.id) is False
        assert await are_connected(db, a.id, c.id) is False

    async def test_connection_lookup_prefers_live_row(self, db: AsyncSession, make_member):
        a = await make_member("A")
        b = await make_member("B")
        await _connect(db, a, b, ConnectionStatus.REJECTED)
        live = await _connect(db, b, a, ConnectionStatus.PENDING)

        found = await get_connection_between(db, a.id, b.id)
        assert found is not None
        assert found.id == live.id
        assert await get_connection_between(db, a.id, a.id) is None

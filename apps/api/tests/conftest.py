"""Shared test fixtures for the alumni API test suite."""

import os

# Must be set before the alumni package reads its settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_URL_SYNC"] = "sqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SENTRY_DSN"] = ""
os.environ["APP_ENV"] = "test"

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import get_current_identity
from alumni.core.database import Base, engine, get_db
from alumni.main import app
from alumni.models.core import Batch, BatchRole, CentralAdmin, Profile, User
from alumni.models.enums import ProfileStatus
from alumni.models.events import Announcement, Event
from alumni.schemas.auth import Identity

SAMPLE_CLERK_ID = "user_test_clerk_123"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession]:
    """Fresh in-memory schema per test, dropped with the connection afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session = AsyncSession(bind=engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()
        await engine.dispose()


@pytest.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """AsyncClient whose requests share the test session."""

    async def _get_test_db() -> AsyncGenerator[AsyncSession]:
        yield db

    app.dependency_overrides[get_db] = _get_test_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login() -> Callable[[User], None]:
    """Make subsequent requests authenticate as the given identity.

    Only token verification is bypassed; profile and roles are still read
    from the database by get_current_user.
    """

    def _login(user: User) -> None:
        identity = Identity(
            user_id=user.id,
            email=user.email,
            external_auth_id=user.external_auth_id,
        )
        app.dependency_overrides[get_current_identity] = lambda: identity

    return _login


# ── Sample data fixtures ──────────────────────────────────────────────────


@pytest.fixture
async def batches(db: AsyncSession) -> list[Batch]:
    rows = [Batch(batch_year=year, name=f"Batch of {year}") for year in (2010, 2015, 2020)]
    db.add_all(rows)
    await db.flush()
    return rows


MemberFactory = Callable[..., Awaitable[User]]


@pytest.fixture
def make_member(db: AsyncSession, batches: list[Batch]) -> MemberFactory:
    """Create an identity and, unless profile=False, its profile."""

    async def _make(
        full_name: str = "Test Member",
        *,
        batch_year: int = 2015,
        status: ProfileStatus = ProfileStatus.APPROVED,
        profile: bool = True,
        email: str | None = None,
        central_admin: bool = False,
        admin_of: tuple[int, ...] = (),
        created_at: datetime | None = None,
        **fields,
    ) -> User:
        user_id = uuid.uuid4()
        user = User(
            id=user_id,
            external_auth_id=f"user_{user_id.hex[:12]}",
            email=email or f"{user_id.hex[:8]}@example.com",
            is_active=True,
        )
        db.add(user)
        if profile:
            row = Profile(
                id=user_id,
                full_name=full_name,
                batch_year=batch_year,
                status=status,
                **fields,
            )
            if created_at is not None:
                row.created_at = created_at
            db.add(row)
        if central_admin:
            db.add(CentralAdmin(user_id=user_id))
        for year in admin_of:
            db.add(BatchRole(user_id=user_id, batch_year=year))
        await db.flush()
        await db.refresh(user)
        if profile:
            await db.refresh(row)
        return user

    return _make


@pytest.fixture
def make_event(db: AsyncSession) -> Callable[..., Awaitable[Event]]:
    async def _make(
        created_by: User,
        *,
        title: str = "Reunion",
        batch_year: int | None = None,
        days_from_now: float = 7,
        **fields,
    ) -> Event:
        event = Event(
            title=title,
            batch_year=batch_year,
            start_at=datetime.now(timezone.utc) + timedelta(days=days_from_now),
            created_by=created_by.id,
            **fields,
        )
        db.add(event)
        await db.flush()
        await db.refresh(event)
        return event

    return _make


@pytest.fixture
def make_announcement(db: AsyncSession) -> Callable[..., Awaitable[Announcement]]:
    async def _make(
        created_by: User,
        *,
        title: str = "News",
        content: str = "Hello, alumni",
        batch_year: int | None = None,
        created_at: datetime | None = None,
    ) -> Announcement:
        announcement = Announcement(
            title=title,
            content=content,
            batch_year=batch_year,
            created_by=created_by.id,
        )
        if created_at is not None:
            announcement.created_at = created_at
        db.add(announcement)
        await db.flush()
        await db.refresh(announcement)
        return announcement

    return _make


@pytest.fixture
def mock_clerk_jwt():
    """Mock verify_clerk_token to bypass Clerk JWKS verification in tests."""
    mock_payload = {
        "sub": SAMPLE_CLERK_ID,
        "iss": "https://test.clerk.accounts.dev",
        "exp": int(datetime.now(timezone.utc).timestamp()) + 3600,
    }
    with patch(
        "alumni.auth.clerk_jwt.verify_clerk_token",
        new_callable=AsyncMock,
        return_value=mock_payload,
    ) as mock:
        yield mock

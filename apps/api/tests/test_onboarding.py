"""Tests for the onboarding module."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.models.core import Profile
from alumni.models.enums import ProfileStatus

pytestmark = pytest.mark.anyio


class TestOnboardingBatches:
    async def test_lists_batches_newest_first(self, client: AsyncClient, make_member, login):
        login(await make_member(profile=False))
        response = await client.get("/v1/onboarding/batches")
        assert response.status_code == 200
        assert [b["batch_year"] for b in response.json()] == [2020, 2015, 2010]


class TestCreateProfile:
    async def test_creates_pending_profile(
        self, client: AsyncClient, db: AsyncSession, make_member, login
    ):
        user = await make_member(profile=False)
        login(user)
        response = await client.post(
            "/v1/onboarding/profile",
            json={
                "full_name": "  Asha Rao ",
                "batch_year": 2015,
                "industry": "Energy",
                "job_title": "",
                "phone": "   ",
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["id"] == str(user.id)
        assert body["full_name"] == "Asha Rao"
        assert body["status"] == "pending"
        assert body["job_title"] is None
        assert body["phone"] is None
        assert body["email_public"] is False

        profile = await db.get(Profile, user.id)
        assert profile.status == ProfileStatus.PENDING

    async def test_second_profile_is_conflict(self, client: AsyncClient, make_member, login):
        login(await make_member("Asha Rao"))
        response = await client.post(
            "/v1/onboarding/profile",
            json={"full_name": "Asha Again", "batch_year": 2015},
        )
        assert response.status_code == 409

    async def test_unknown_batch_is_rejected(self, client: AsyncClient, make_member, login):
        login(await make_member(profile=False))
        response = await client.post(
            "/v1/onboarding/profile",
            json={"full_name": "Asha Rao", "batch_year": 1999},
        )
        assert response.status_code == 422

    async def test_blank_name_is_rejected(self, client: AsyncClient, make_member, login):
        login(await make_member(profile=False))
        response = await client.post(
            "/v1/onboarding/profile",
            json={"full_name": "   ", "batch_year": 2015},
        )
        assert response.status_code == 422

    async def test_member_without_profile_is_sent_to_onboarding(
        self, client: AsyncClient, make_member, login
    ):
        login(await make_member(profile=False))
        response = await client.get("/v1/home")
        assert response.status_code == 403
        assert response.json()["error"] == "onboarding_required"

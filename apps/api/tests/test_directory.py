"""Tests for the member directory."""

import pytest
from httpx import AsyncClient

from alumni.models.enums import ProfileStatus

pytestmark = pytest.mark.anyio


@pytest.fixture
async def members(make_member):
    await make_member("Charlie Kim", batch_year=2010, industry="Finance", location_state="Kerala")
    await make_member("Alice Menon", batch_year=2015, industry="Energy", location_state="Goa")
    await make_member("Bob Das", batch_year=2015, industry="Renewable energy", location_state="Kerala")
    await make_member("Pending Person", batch_year=2015, status=ProfileStatus.PENDING)
    await make_member("Suspended Sam", batch_year=2015, status=ProfileStatus.SUSPENDED)
    return await make_member("Viewer Vee", batch_year=2020, status=ProfileStatus.PENDING)


def _names(response) -> list[str]:
    return [item["full_name"] for item in response.json()["items"]]


class TestDirectorySearch:
    async def test_only_approved_members_sorted_by_name(
        self, client: AsyncClient, members, login
    ):
        login(members)
        response = await client.get("/v1/directory")
        assert response.status_code == 200
        assert _names(response) == ["Alice Menon", "Bob Das", "Charlie Kim"]
        body = response.json()
        assert body["total"] == 3
        assert body["page"] == 0
        assert body["has_next"] is False

    async def test_search_is_case_insensitive_substring(
        self, client: AsyncClient, members, login
    ):
        login(members)
        response = await client.get("/v1/directory", params={"search": "mEnOn"})
        assert _names(response) == ["Alice Menon"]

    async def test_filters_combine_and_only_narrow(self, client: AsyncClient, members, login):
        login(members)
        broad = _names(await client.get("/v1/directory", params={"industry": "energy"}))
        narrower = _names(
            await client.get("/v1/directory", params={"industry": "energy", "batch_year": 2015})
        )
        narrowest = _names(
            await client.get(
                "/v1/directory",
                params={"industry": "energy", "batch_year": 2015, "location": "kerala"},
            )
        )
        assert sorted(broad) == ["Alice Menon", "Bob Das"]
        assert set(narrower) <= set(broad)
        assert narrowest == ["Bob Das"]

    async def test_wildcards_are_literal(self, client: AsyncClient, members, login):
        login(members)
        response = await client.get("/v1/directory", params={"search": "%"})
        assert response.json()["items"] == []

    async def test_pending_member_never_listed(self, client: AsyncClient, members, login):
        login(members)
        response = await client.get("/v1/directory", params={"search": "Pending"})
        assert response.json()["total"] == 0


class TestDirectoryPaging:
    async def test_pages_of_twenty(self, client: AsyncClient, make_member, login):
        for i in range(23):
            await make_member(f"Member {i:02d}")
        login(await make_member("Zed Viewer", status=ProfileStatus.PENDING))

        first = (await client.get("/v1/directory")).json()
        assert first["page_size"] == 20
        assert len(first["items"]) == 20
        assert first["total"] == 23
        assert first["has_next"] is True
        assert first["items"][0]["full_name"] == "Member 00"

        second = (await client.get("/v1/directory", params={"page": 1})).json()
        assert [i["full_name"] for i in second["items"]] == ["Member 20", "Member 21", "Member 22"]
        assert second["has_next"] is False

    async def test_negative_page_is_rejected(self, client: AsyncClient, make_member, login):
        login(await make_member("Viewer"))
        response = await client.get("/v1/directory", params={"page": -1})
        assert response.status_code == 422

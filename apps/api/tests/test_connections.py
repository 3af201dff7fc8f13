"""Tests for connection requests."""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.models.connections import Connection
from alumni.models.core import Profile
from alumni.models.enums import ConnectionStatus, ProfileStatus

pytestmark = pytest.mark.anyio


@pytest.fixture
async def pair(make_member):
    alice = await make_member("Alice Menon", batch_year=2015, job_title="Engineer")
    bob = await make_member("Bob Das", batch_year=2010)
    return alice, bob


async def _request(client: AsyncClient, login, requester, receiver):
    login(requester)
    return await client.post("/v1/connections", json={"receiver_id": str(receiver.id)})


class TestRequest:
    async def test_request_creates_pending(self, client: AsyncClient, pair, login):
        alice, bob = pair
        response = await _request(client, login, alice, bob)
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["requester_id"] == str(alice.id)
        assert body["receiver_id"] == str(bob.id)

    async def test_cannot_connect_with_self(self, client: AsyncClient, pair, login):
        alice, _ = pair
        response = await _request(client, login, alice, alice)
        assert response.status_code == 422

    async def test_duplicate_request_is_conflict(self, client: AsyncClient, pair, login):
        alice, bob = pair
        await _request(client, login, alice, bob)
        response = await _request(client, login, alice, bob)
        assert response.status_code == 409

    async def test_reverse_request_while_pending_is_conflict(
        self, client: AsyncClient, db: AsyncSession, pair, login
    ):
        alice, bob = pair
        await _request(client, login, alice, bob)
        response = await _request(client, login, bob, alice)
        assert response.status_code == 409

        count = (await db.execute(select(func.count()).select_from(Connection))).scalar_one()
        assert count == 1

    async def test_request_after_rejection_is_allowed(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        login(bob)
        await client.post(f"/v1/connections/{conn_id}/reject")

        response = await _request(client, login, bob, alice)
        assert response.status_code == 201

    async def test_pending_members_cannot_request(self, client: AsyncClient, make_member, login):
        target = await make_member("Target")
        pending = await make_member("Newcomer", status=ProfileStatus.PENDING)
        response = await _request(client, login, pending, target)
        assert response.status_code == 403

    async def test_cannot_request_unapproved_member(self, client: AsyncClient, make_member, login):
        member = await make_member("Member")
        pending = await make_member("Newcomer", status=ProfileStatus.PENDING)
        response = await _request(client, login, member, pending)
        assert response.status_code == 422

    async def test_unknown_receiver_is_404(self, client: AsyncClient, pair, login):
        alice, _ = pair
        login(alice)
        response = await client.post(
            "/v1/connections",
            json={"receiver_id": "00000000-0000-0000-0000-0000000000aa"},
        )
        assert response.status_code == 404


class TestRespond:
    async def test_receiver_accepts(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        login(bob)
        response = await client.post(f"/v1/connections/{conn_id}/accept")
        assert response.status_code == 200
        assert response.json()["status"] == "accepted"

    async def test_requester_cannot_accept_own_request(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        response = await client.post(f"/v1/connections/{conn_id}/accept")
        assert response.status_code == 403

    async def test_outsider_sees_404(self, client: AsyncClient, pair, make_member, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        login(await make_member("Outsider"))
        response = await client.post(f"/v1/connections/{conn_id}/accept")
        assert response.status_code == 404

    async def test_suspended_receiver_cannot_accept(
        self, client: AsyncClient, db: AsyncSession, pair, login
    ):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        bob_profile = await db.get(Profile, bob.id)
        bob_profile.status = ProfileStatus.SUSPENDED
        await db.flush()

        login(bob)
        response = await client.post(f"/v1/connections/{conn_id}/accept")
        assert response.status_code == 403
        connection = await db.get(Connection, uuid.UUID(conn_id))
        assert connection.status == ConnectionStatus.PENDING

        response = await client.post(f"/v1/connections/{conn_id}/reject")
        assert response.status_code == 200
        assert response.json()["status"] == "rejected"

    async def test_cannot_accept_from_suspended_requester(
        self, client: AsyncClient, db: AsyncSession, pair, login
    ):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        alice_profile = await db.get(Profile, alice.id)
        alice_profile.status = ProfileStatus.SUSPENDED
        await db.flush()

        login(bob)
        response = await client.post(f"/v1/connections/{conn_id}/accept")
        assert response.status_code == 403

    async def test_accepted_is_final(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        login(bob)
        await client.post(f"/v1/connections/{conn_id}/accept")
        response = await client.post(f"/v1/connections/{conn_id}/reject")
        assert response.status_code == 409

    async def test_connected_pair_cannot_request_again(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        login(bob)
        await client.post(f"/v1/connections/{conn_id}/accept")
        response = await _request(client, login, bob, alice)
        assert response.status_code == 409


class TestCancel:
    async def test_requester_withdraws_pending(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        response = await client.delete(f"/v1/connections/{conn_id}")
        assert response.status_code == 204

        login(bob)
        overview = (await client.get("/v1/connections")).json()
        assert overview["incoming"] == []

    async def test_receiver_cannot_withdraw(self, client: AsyncClient, pair, login):
        alice, bob = pair
        conn_id = (await _request(client, login, alice, bob)).json()["id"]
        login(bob)
        response = await client.delete(f"/v1/connections/{conn_id}")
        assert response.status_code == 403


class TestOverview:
    async def test_lists_connected_incoming_and_sent(
        self, client: AsyncClient, make_member, pair, login
    ):
        alice, bob = pair
        carol = await make_member("Carol Iyer")
        dan = await make_member("Dan Roy")

        accepted_id = (await _request(client, login, bob, alice)).json()["id"]
        login(alice)
        await client.post(f"/v1/connections/{accepted_id}/accept")
        await _request(client, login, carol, alice)
        await _request(client, login, alice, dan)

        login(alice)
        body = (await client.get("/v1/connections")).json()
        assert [c["counterparty"]["full_name"] for c in body["connected"]] == ["Bob Das"]
        assert [c["counterparty"]["full_name"] for c in body["incoming"]] == ["Carol Iyer"]
        assert [c["counterparty"]["full_name"] for c in body["sent"]] == ["Dan Roy"]
        assert body["connected"][0]["counterparty"]["batch_year"] == 2010

        login(bob)
        body = (await client.get("/v1/connections")).json()
        assert body["connected"][0]["counterparty"]["full_name"] == "Alice Menon"
        assert body["connected"][0]["counterparty"]["job_title"] == "Engineer"
        assert body["incoming"] == [] and body["sent"] == []

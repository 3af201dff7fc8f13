"""Connection service: request, respond, cancel, list.

At most one live (non-rejected) connection exists per unordered pair of
members; the partial unique index on (user_low_id, user_high_id) backs
the check made here. Only pending requests change state: the receiver
accepts or rejects, the requester may withdraw.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy import case, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.policy import get_connection_between
from alumni.core.errors import ConflictError
from alumni.models.connections import Connection, pair_key
from alumni.models.core import Profile
from alumni.models.enums import ConnectionStatus
from alumni.modules.connections.schemas import (
    ConnectionItem,
    ConnectionsOverview,
    Counterparty,
)
from alumni.schemas.auth import CurrentUser

logger = structlog.get_logger()


async def request_connection(
    db: AsyncSession, current_user: CurrentUser, receiver_id: uuid.UUID
) -> Connection:
    requester_id = current_user.user_id
    if receiver_id == requester_id:
        raise ValueError("You cannot connect with yourself")
    if not current_user.is_approved:
        raise PermissionError("Only approved members can send connection requests")

    receiver = await db.get(Profile, receiver_id)
    if receiver is None:
        raise LookupError("Profile not found")
    if not receiver.is_approved:
        raise ValueError("This member has not been approved yet")

    existing = await get_connection_between(db, requester_id, receiver_id)
    if existing is not None and existing.status != ConnectionStatus.REJECTED:
        if existing.status == ConnectionStatus.ACCEPTED:
            raise ConflictError("You are already connected")
        if existing.requester_id == requester_id:
            raise ConflictError("Connection request already sent")
        raise ConflictError("This member has already sent you a request")

    low, high = pair_key(requester_id, receiver_id)
    connection = Connection(
        requester_id=requester_id,
        receiver_id=receiver_id,
        user_low_id=low,
        user_high_id=high,
        status=ConnectionStatus.PENDING,
    )
    db.add(connection)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        raise ConflictError("A connection between these members already exists") from exc

    await db.refresh(connection)
    logger.info(
        "connections.request_sent",
        connection_id=str(connection.id),
        requester_id=str(requester_id),
        receiver_id=str(receiver_id),
    )
    return connection


async def _get_pending_for(
    db: AsyncSession, connection_id: uuid.UUID, party_id: uuid.UUID, *, as_receiver: bool
) -> Connection:
    connection = await db.get(Connection, connection_id)
    if connection is None or party_id not in (connection.requester_id, connection.receiver_id):
        raise LookupError("Connection not found")
    owner = connection.receiver_id if as_receiver else connection.requester_id
    if owner != party_id:
        role = "receiver" if as_receiver else "requester"
        raise PermissionError(f"Only the {role} can do this")
    if connection.status != ConnectionStatus.PENDING:
        raise ConflictError(f"Connection is already {connection.status.value}")
    return connection


async def respond_to_request(
    db: AsyncSession,
    current_user: CurrentUser,
    connection_id: uuid.UUID,
    accept: bool,
) -> Connection:
    connection = await _get_pending_for(
        db, connection_id, current_user.user_id, as_receiver=True
    )
    if accept:
        requester = await db.get(Profile, connection.requester_id)
        if not current_user.is_approved or requester is None or not requester.is_approved:
            raise PermissionError("Both members must be approved to connect")
    connection.status = ConnectionStatus.ACCEPTED if accept else ConnectionStatus.REJECTED
    await db.flush()
    await db.refresh(connection)
    logger.info(
        "connections.request_answered",
        connection_id=str(connection.id),
        status=connection.status.value,
    )
    return connection


async def cancel_request(
    db: AsyncSession, current_user: CurrentUser, connection_id: uuid.UUID
) -> None:
    connection = await _get_pending_for(
        db, connection_id, current_user.user_id, as_receiver=False
    )
    await db.delete(connection)
    await db.flush()
    logger.info("connections.request_cancelled", connection_id=str(connection_id))


async def _items(db: AsyncSession, me: uuid.UUID, *where) -> list[ConnectionItem]:
    other_id = case(
        (Connection.requester_id == me, Connection.receiver_id),
        else_=Connection.requester_id,
    )
    stmt = (
        select(Connection, Profile)
        .join(Profile, Profile.id == other_id)
        .where(*where)
        .order_by(Connection.created_at.desc())
    )
    result = await db.execute(stmt)
    return [
        ConnectionItem(
            id=connection.id,
            status=connection.status,
            created_at=connection.created_at,
            counterparty=Counterparty.model_validate(profile),
        )
        for connection, profile in result.all()
    ]


async def list_connections(db: AsyncSession, current_user: CurrentUser) -> ConnectionsOverview:
    me = current_user.user_id
    involves_me = (Connection.requester_id == me) | (Connection.receiver_id == me)
    return ConnectionsOverview(
        connected=await _items(db, me, involves_me, Connection.status == ConnectionStatus.ACCEPTED),
        incoming=await _items(
            db, me, Connection.receiver_id == me, Connection.status == ConnectionStatus.PENDING
        ),
        sent=await _items(
            db, me, Connection.requester_id == me, Connection.status == ConnectionStatus.PENDING
        ),
    )

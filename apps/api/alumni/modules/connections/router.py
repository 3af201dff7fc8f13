"""Connections API router."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_approved, require_profile
from alumni.core.database import get_db
from alumni.core.errors import ConflictError, service_error_to_http
from alumni.modules.connections import service
from alumni.modules.connections.schemas import (
    ConnectionCreateRequest,
    ConnectionResponse,
    ConnectionsOverview,
)
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/connections", tags=["connections"])


@router.get("", response_model=ConnectionsOverview)
async def list_connections(
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Accepted connections, incoming requests and sent requests."""
    return await service.list_connections(db, current_user)


@router.post("", response_model=ConnectionResponse, status_code=status.HTTP_201_CREATED)
async def request_connection(
    body: ConnectionCreateRequest,
    current_user: CurrentUser = Depends(require_approved),
    db: AsyncSession = Depends(get_db),
):
    try:
        connection = await service.request_connection(db, current_user, body.receiver_id)
        await db.commit()
    except (LookupError, PermissionError, ConflictError, ValueError) as exc:
        raise service_error_to_http(exc)
    return ConnectionResponse.model_validate(connection)


@router.post("/{connection_id}/accept", response_model=ConnectionResponse)
async def accept_connection(
    connection_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        connection = await service.respond_to_request(db, current_user, connection_id, accept=True)
        await db.commit()
    except (LookupError, PermissionError, ConflictError) as exc:
        raise service_error_to_http(exc)
    return ConnectionResponse.model_validate(connection)


@router.post("/{connection_id}/reject", response_model=ConnectionResponse)
async def reject_connection(
    connection_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    try:
        connection = await service.respond_to_request(db, current_user, connection_id, accept=False)
        await db.commit()
    except (LookupError, PermissionError, ConflictError) as exc:
        raise service_error_to_http(exc)
    return ConnectionResponse.model_validate(connection)


@router.delete("/{connection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_connection(
    connection_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Withdraw a pending request you sent."""
    try:
        await service.cancel_request(db, current_user, connection_id)
        await db.commit()
    except (LookupError, PermissionError, ConflictError) as exc:
        raise service_error_to_http(exc)

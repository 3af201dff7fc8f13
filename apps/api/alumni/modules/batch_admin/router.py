"""Batch admin panel router."""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_approved, require_profile
from alumni.core.database import get_db
from alumni.core.errors import service_error_to_http
from alumni.modules.announcements.schemas import (
    AnnouncementCreateRequest,
    AnnouncementResponse,
)
from alumni.modules.batch_admin import service
from alumni.modules.batch_admin.schemas import BatchAdminOverview
from alumni.modules.events.schemas import EventCreateRequest, EventResponse
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/batch-admin", tags=["batch-admin"])


@router.get("", response_model=BatchAdminOverview)
async def overview(
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Managed batches with their events and announcements. Empty for non-admins."""
    return await service.get_overview(db, current_user)


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    body: EventCreateRequest,
    current_user: CurrentUser = Depends(require_approved),
    db: AsyncSession = Depends(get_db),
):
    try:
        event = await service.create_event(db, current_user, body)
        await db.commit()
    except (PermissionError, ValueError) as exc:
        raise service_error_to_http(exc)
    return EventResponse.model_validate(event)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_approved),
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.delete_event(db, current_user, event_id)
        await db.commit()
    except (LookupError, PermissionError) as exc:
        raise service_error_to_http(exc)


@router.post(
    "/announcements",
    response_model=AnnouncementResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_announcement(
    body: AnnouncementCreateRequest,
    current_user: CurrentUser = Depends(require_approved),
    db: AsyncSession = Depends(get_db),
):
    try:
        announcement = await service.create_announcement(db, current_user, body)
        await db.commit()
    except (PermissionError, ValueError) as exc:
        raise service_error_to_http(exc)
    return AnnouncementResponse.model_validate(announcement)


@router.delete("/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_approved),
    db: AsyncSession = Depends(get_db),
):
    try:
        await service.delete_announcement(db, current_user, announcement_id)
        await db.commit()
    except (LookupError, PermissionError) as exc:
        raise service_error_to_http(exc)

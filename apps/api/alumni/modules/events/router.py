"""Events API router."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_approved, require_profile
from alumni.core.database import get_db
from alumni.modules.events import service
from alumni.modules.events.schemas import (
    EventWindow,
    EventWithRsvp,
    RsvpRequest,
    RsvpResponse,
)
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=list[EventWithRsvp])
async def list_events(
    when: EventWindow = Query("upcoming"),
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Global events plus the caller's batch events, each with the caller's RSVP."""
    return await service.list_events(db, current_user, when)


@router.put("/{event_id}/rsvp", response_model=RsvpResponse)
async def set_rsvp(
    event_id: uuid.UUID,
    body: RsvpRequest,
    current_user: CurrentUser = Depends(require_approved),
    db: AsyncSession = Depends(get_db),
):
    try:
        rsvp = await service.set_rsvp(db, current_user, event_id, body.status)
        await db.commit()
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return RsvpResponse.model_validate(rsvp)

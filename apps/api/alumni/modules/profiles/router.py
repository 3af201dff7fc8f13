"""Profiles API router."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_profile
from alumni.core.database import get_db
from alumni.modules.profiles import service
from alumni.modules.profiles.schemas import (
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    profile = await service.get_profile(db, current_user.user_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return ProfileResponse.model_validate(profile)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    body: ProfileUpdateRequest,
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Edit own details and privacy flags. Pending members may edit too."""
    try:
        profile = await service.update_own_profile(db, current_user, body)
        await db.commit()
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return ProfileResponse.model_validate(profile)


@router.get("/{profile_id}", response_model=ProfileDetailResponse)
async def get_profile_detail(
    profile_id: uuid.UUID,
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Member card with connection state and whatever contact details the caller may see."""
    try:
        return await service.get_profile_detail(db, current_user, profile_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

"""Onboarding API router."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import get_current_user
from alumni.core.database import get_db
from alumni.core.errors import ConflictError
from alumni.modules.batches.schemas import BatchResponse
from alumni.modules.batches.service import list_batches
from alumni.modules.onboarding.schemas import OnboardingProfileRequest
from alumni.modules.onboarding.service import create_profile
from alumni.modules.profiles.schemas import ProfileResponse
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.get("/batches", response_model=list[BatchResponse])
async def list_onboarding_batches(
    _current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Batches to choose from, newest year first."""
    return await list_batches(db)


@router.post("/profile", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile_endpoint(
    body: OnboardingProfileRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Complete onboarding. The new profile stays pending until an admin approves it."""
    try:
        profile = await create_profile(db, current_user, body)
        await db.commit()
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return ProfileResponse.model_validate(profile)

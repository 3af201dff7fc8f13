"""Admin module: central administration endpoints.

Every route requires a central admin. Batch admins use /batch-admin.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_central_admin
from alumni.core.database import get_db
from alumni.core.errors import ConflictError
from alumni.models.enums import ProfileStatus
from alumni.modules.admin import service
from alumni.modules.admin.schemas import (
    AdminProfileRow,
    BatchRoleAssignRequest,
    BatchRoleResponse,
)
from alumni.modules.batches import service as batch_service
from alumni.modules.batches.schemas import BatchCreateRequest, BatchResponse
from alumni.modules.profiles.schemas import ProfileResponse
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/admin", tags=["admin"])


# ── Profiles ──────────────────────────────────────────────────────────────────


@router.get("/profiles/pending", response_model=list[AdminProfileRow])
async def list_pending_profiles(
    _: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    """Approval queue, newest applications first."""
    return await service.list_profiles(db, ProfileStatus.PENDING)


@router.get("/profiles", response_model=list[AdminProfileRow])
async def list_profiles(
    profile_status: ProfileStatus | None = Query(None, alias="status"),
    _: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_profiles(db, profile_status)


async def _transition(
    db: AsyncSession, admin: CurrentUser, profile_id: uuid.UUID, action: str
) -> ProfileResponse:
    try:
        profile = await service.change_status(db, admin, profile_id, action)
        await db.commit()
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return ProfileResponse.model_validate(profile)


@router.post("/profiles/{profile_id}/approve", response_model=ProfileResponse)
async def approve_profile(
    profile_id: uuid.UUID,
    admin: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _transition(db, admin, profile_id, "approve")


@router.post("/profiles/{profile_id}/suspend", response_model=ProfileResponse)
async def suspend_profile(
    profile_id: uuid.UUID,
    admin: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    """Suspend a member, or turn down a pending application."""
    return await _transition(db, admin, profile_id, "suspend")


@router.post("/profiles/{profile_id}/reactivate", response_model=ProfileResponse)
async def reactivate_profile(
    profile_id: uuid.UUID,
    admin: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    return await _transition(db, admin, profile_id, "reactivate")


# ── Batch roles ───────────────────────────────────────────────────────────────


@router.post(
    "/batch-roles",
    response_model=BatchRoleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def assign_batch_admin(
    body: BatchRoleAssignRequest,
    admin: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        role = await service.assign_batch_admin(db, admin, body)
        await db.commit()
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return BatchRoleResponse.model_validate(role)


# ── Batches ───────────────────────────────────────────────────────────────────


@router.get("/batches", response_model=list[BatchResponse])
async def list_batches(
    _: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    return await batch_service.list_batches(db)


@router.post("/batches", response_model=BatchResponse, status_code=status.HTTP_201_CREATED)
async def create_batch(
    body: BatchCreateRequest,
    _: CurrentUser = Depends(require_central_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        batch = await batch_service.create_batch(db, body)
        await db.commit()
    except ConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return BatchResponse.model_validate(batch)

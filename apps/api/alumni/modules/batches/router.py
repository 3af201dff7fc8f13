"""Batches API router."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_profile
from alumni.core.database import get_db
from alumni.modules.batches import service
from alumni.modules.batches.schemas import BatchPageResponse, BatchResponse
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/batches", tags=["batches"])


@router.get("", response_model=list[BatchResponse])
async def list_batches(
    _current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    return await service.list_batches(db)


@router.get("/{batch_year}", response_model=BatchPageResponse)
async def get_batch_page(
    batch_year: int,
    _current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Batch page. Unknown years return `batch: null` with empty lists."""
    return await service.get_batch_page(db, batch_year)

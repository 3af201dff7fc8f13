"""Home dashboard router."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth.dependencies import require_profile
from alumni.core.database import get_db
from alumni.modules.home.schemas import HomeResponse
from alumni.modules.home.service import get_home
from alumni.schemas.auth import CurrentUser

router = APIRouter(prefix="/home", tags=["home"])


@router.get("", response_model=HomeResponse)
async def home(
    current_user: CurrentUser = Depends(require_profile),
    db: AsyncSession = Depends(get_db),
):
    """Dashboard for any member with a profile, including those pending approval."""
    try:
        return await get_home(db, current_user)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc))

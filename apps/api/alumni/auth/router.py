"""Auth API router: Clerk webhook, OAuth callback, current member summary."""

import httpx
import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth import clerk_jwt
from alumni.auth.clerk_webhook import EVENT_HANDLERS, verify_webhook_signature
from alumni.auth.dependencies import bearer_scheme, get_current_user, resolve_identity
from alumni.core.database import get_db
from alumni.models.core import Profile
from alumni.models.enums import ProfileStatus
from alumni.schemas.auth import CallbackResponse, CurrentUser, MeResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/webhook", status_code=200)
async def clerk_webhook(request: Request, db: AsyncSession = Depends(get_db)):
    """Clerk webhook receiver. Verifies signature, dispatches to handler."""
    payload = await verify_webhook_signature(request)
    event_type = payload.get("type", "")
    data = payload.get("data", {})

    handler = EVENT_HANDLERS.get(event_type)
    if handler:
        await handler(data, db)
        await db.commit()
        logger.info("webhook_processed", event_type=event_type)
    else:
        logger.info("webhook_event_ignored", event_type=event_type)

    return {"status": "ok"}


@router.get("/callback", response_model=CallbackResponse)
async def oauth_callback(
    code: str | None = Query(None),
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
):
    """Finish sign-in and tell the client where to go next.

    With ?code= the authorization code is exchanged for a Clerk session
    first. Members without a profile are sent to onboarding; callers that
    cannot be identified are sent back to login.
    """
    session: dict | None = None
    token = credentials.credentials if credentials else None

    if code:
        try:
            session = await clerk_jwt.exchange_code_for_session(code)
        except httpx.HTTPError as exc:
            logger.warning("oauth_code_exchange_failed", error=str(exc))
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Could not complete sign-in. Please try again.",
            ) from exc
        token = session.get("id_token") or session.get("access_token") or token

    if not token:
        return CallbackResponse(redirect_to="/login", session=session)

    try:
        identity = await resolve_identity(db, token)
    except HTTPException:
        return CallbackResponse(redirect_to="/login", session=session)

    profile = await db.get(Profile, identity.user_id)
    return CallbackResponse(
        redirect_to="/home" if profile else "/onboarding",
        session=session,
    )


@router.get("/me", response_model=MeResponse)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Identity, profile summary and the navigation flags (admin panels, pending banner)."""
    profile = await db.get(Profile, current_user.user_id)
    return MeResponse(
        user_id=current_user.user_id,
        email=current_user.email,
        has_profile=profile is not None,
        full_name=profile.full_name if profile else None,
        batch_year=current_user.batch_year,
        profile_status=current_user.profile_status,
        pending_approval=current_user.profile_status == ProfileStatus.PENDING,
        is_central_admin=current_user.is_central_admin,
        is_batch_admin=current_user.is_batch_admin,
        admin_batch_years=current_user.admin_batch_years,
    )

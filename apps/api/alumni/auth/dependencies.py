"""FastAPI auth dependencies: identity, request context and role gates."""

import sentry_sdk
import structlog
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from alumni.auth import clerk_jwt
from alumni.auth.policy import get_batch_roles, is_central_admin
from alumni.core.database import get_db
from alumni.models.core import Profile, User
from alumni.schemas.auth import CurrentUser, Identity

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return await resolve_identity(db, credentials.credentials)


async def resolve_identity(db: AsyncSession, token: str) -> Identity:
    """
    Verify the Clerk JWT and resolve the identity row.

    Decodes JWT -> gets Clerk's `sub` claim (external_auth_id) ->
    looks up the active User row for its internal id and email.
    """
    try:
        payload = await clerk_jwt.verify_clerk_token(token)
    except (JWTError, Exception) as e:
        logger.warning("jwt_verification_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    clerk_user_id = payload.get("sub")
    if not clerk_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing subject claim",
        )

    stmt = select(User).where(
        User.external_auth_id == clerk_user_id,
        User.is_active.is_(True),
    )
    user = (await db.execute(stmt)).scalar_one_or_none()
    if user is None:
        logger.warning("user_not_found_for_clerk_id", clerk_id=clerk_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )

    sentry_sdk.set_user({"id": str(user.id)})
    return Identity(user_id=user.id, email=user.email, external_auth_id=clerk_user_id)


async def get_current_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
) -> CurrentUser:
    """Build the explicit request context: profile facts plus admin roles."""
    profile = await db.get(Profile, identity.user_id)
    roles = await get_batch_roles(db, identity.user_id)

    return CurrentUser(
        **identity.model_dump(),
        profile_status=profile.status if profile else None,
        batch_year=profile.batch_year if profile else None,
        is_central_admin=await is_central_admin(db, identity.user_id),
        admin_batch_years=[role.batch_year for role in roles],
    )


async def require_profile(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Members who signed in but never finished onboarding get sent back there."""
    if not current_user.has_profile:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "onboarding_required",
                "message": "Complete your profile to continue",
            },
        )
    return current_user


async def require_approved(
    current_user: CurrentUser = Depends(require_profile),
) -> CurrentUser:
    if not current_user.is_approved:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "error": "approval_required",
                "message": "Your profile is awaiting approval from an administrator",
            },
        )
    return current_user


async def require_central_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    if not current_user.is_central_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Central administrator access required",
        )
    return current_user

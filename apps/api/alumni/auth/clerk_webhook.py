"""Clerk webhook handler: sync identities from Clerk to the users table.

Verifies signatures using svix (Clerk's webhook infra). Each handler is idempotent.
"""

import structlog
from fastapi import HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from svix.webhooks import Webhook, WebhookVerificationError

from alumni.core.config import settings
from alumni.models.core import User

logger = structlog.get_logger()


async def verify_webhook_signature(request: Request) -> dict:
    """Verify the Clerk webhook using svix and return parsed payload."""
    body = await request.body()
    headers = {
        "svix-id": request.headers.get("svix-id", ""),
        "svix-timestamp": request.headers.get("svix-timestamp", ""),
        "svix-signature": request.headers.get("svix-signature", ""),
    }

    try:
        wh = Webhook(settings.CLERK_WEBHOOK_SECRET)
        return wh.verify(body, headers)
    except WebhookVerificationError as e:
        logger.warning("webhook_verification_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid webhook signature",
        ) from e
    except Exception as e:
        logger.error("webhook_verification_error", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Webhook verification failed",
        ) from e


def _primary_email(data: dict) -> str:
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    for entry in addresses:
        if entry.get("id") == primary_id:
            return entry.get("email_address", "")
    return addresses[0].get("email_address", "") if addresses else ""


async def _find_user(db: AsyncSession, clerk_user_id: str) -> User | None:
    result = await db.execute(select(User).where(User.external_auth_id == clerk_user_id))
    return result.scalar_one_or_none()


# ── Event handlers ────────────────────────────────────────────────────────


async def handle_user_created(data: dict, db: AsyncSession) -> None:
    """Handle user.created: create the identity row. Profiles come later, via onboarding."""
    clerk_user_id = data.get("id", "")
    if await _find_user(db, clerk_user_id):
        logger.info("webhook_user_already_exists", clerk_id=clerk_user_id)
        return

    user = User(
        external_auth_id=clerk_user_id,
        email=_primary_email(data),
        is_active=True,
    )
    db.add(user)
    await db.flush()
    logger.info("webhook_user_created", user_id=str(user.id))


async def handle_user_updated(data: dict, db: AsyncSession) -> None:
    """Handle user.updated: sync the email address from Clerk."""
    clerk_user_id = data.get("id", "")
    user = await _find_user(db, clerk_user_id)
    if not user:
        logger.warning("webhook_user_not_found", clerk_id=clerk_user_id)
        return

    email = _primary_email(data)
    if email:
        user.email = email
    await db.flush()
    logger.info("webhook_user_updated", clerk_id=clerk_user_id)


async def handle_user_deleted(data: dict, db: AsyncSession) -> None:
    """Handle user.deleted: deactivate the identity; the profile row is kept."""
    clerk_user_id = data.get("id", "")
    user = await _find_user(db, clerk_user_id)
    if not user:
        return

    user.is_active = False
    await db.flush()
    logger.info("webhook_user_deleted", clerk_id=clerk_user_id)


# ── Event dispatcher ─────────────────────────────────────────────────────

EVENT_HANDLERS = {
    "user.created": handle_user_created,
    "user.updated": handle_user_updated,
    "user.deleted": handle_user_deleted,
}

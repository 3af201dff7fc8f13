"""Clerk RS256 JWT verification via JWKS, plus the OAuth code exchange.

Fetches Clerk's public keys from the well-known JWKS endpoint, caches them
in Redis (shared across all worker processes) and verifies RS256-signed
tokens.
"""

import json

import httpx
import structlog
from jose import JWTError, jwt

from alumni.core.config import settings

logger = structlog.get_logger()

_REDIS_KEY = "clerk:jwks"


async def _redis_client():
    """Return a short-lived Redis client, or None if Redis is unavailable."""
    try:
        from redis.asyncio import from_url  # type: ignore[import-untyped]
        return from_url(settings.REDIS_URL, decode_responses=True)
    except Exception:  # noqa: BLE001
        return None


async def _cached_jwks() -> dict | None:
    redis = await _redis_client()
    if not redis:
        return None
    try:
        cached = await redis.get(_REDIS_KEY)
        return json.loads(cached) if cached else None
    except Exception as exc:  # noqa: BLE001
        logger.warning("clerk_jwks_cache_read_failed", error=str(exc))
        return None
    finally:
        await redis.aclose()


async def _store_jwks(jwks: dict) -> None:
    redis = await _redis_client()
    if not redis:
        return
    try:
        await redis.setex(_REDIS_KEY, settings.CLERK_JWKS_CACHE_TTL, json.dumps(jwks))
    except Exception as exc:  # noqa: BLE001
        logger.warning("clerk_jwks_cache_write_failed", error=str(exc))
    finally:
        await redis.aclose()


async def _fetch_jwks() -> dict:
    """Return Clerk's JWKS, from Redis when cached, otherwise from Clerk."""
    jwks = await _cached_jwks()
    if jwks:
        return jwks

    jwks_url = f"{settings.CLERK_ISSUER_URL}/.well-known/jwks.json"
    async with httpx.AsyncClient() as client:
        response = await client.get(jwks_url, timeout=10.0)
        response.raise_for_status()
        jwks = response.json()

    logger.info("clerk_jwks_refreshed", keys_count=len(jwks.get("keys", [])))
    await _store_jwks(jwks)
    return jwks


def _get_signing_key(jwks: dict, token: str) -> dict:
    """Match the JWT header's kid to the correct JWKS key."""
    unverified_header = jwt.get_unverified_header(token)
    kid = unverified_header.get("kid")
    for key in jwks.get("keys", []):
        if key.get("kid") == kid:
            return key
    raise JWTError(f"No matching key found for kid={kid}")


async def verify_clerk_token(token: str) -> dict:
    """
    Verify a Clerk-issued RS256 JWT.

    Returns the decoded payload with claims (sub, email, etc.).
    Raises JWTError on any validation failure.
    """
    jwks = await _fetch_jwks()
    try:
        signing_key = _get_signing_key(jwks, token)
    except JWTError:
        # Unknown kid: Clerk rotated keys after the cache was filled
        await clear_jwks_cache()
        signing_key = _get_signing_key(await _fetch_jwks(), token)

    return jwt.decode(
        token,
        signing_key,
        algorithms=["RS256"],
        issuer=settings.CLERK_ISSUER_URL,
        options={
            "verify_aud": False,  # Clerk session tokens carry no aud
            "verify_iss": bool(settings.CLERK_ISSUER_URL),
            "verify_exp": True,
        },
    )


async def exchange_code_for_session(code: str) -> dict:
    """Complete an OAuth authorization-code callback against Clerk's token endpoint.

    Returns the token response (access_token, id_token, expires_in, ...).
    Raises httpx.HTTPStatusError when Clerk rejects the code.
    """
    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{settings.CLERK_ISSUER_URL}/oauth/token",
            data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": settings.CLERK_OAUTH_CLIENT_ID,
                "client_secret": settings.CLERK_OAUTH_CLIENT_SECRET,
                "redirect_uri": settings.CLERK_OAUTH_REDIRECT_URI,
            },
            timeout=10.0,
        )
        response.raise_for_status()
        return response.json()


async def clear_jwks_cache() -> None:
    """Clear the JWKS cache in Redis (key rotation)."""
    redis = await _redis_client()
    if not redis:
        return
    try:
        await redis.delete(_REDIS_KEY)
    except Exception as exc:  # noqa: BLE001
        logger.warning("clerk_jwks_cache_clear_failed", error=str(exc))
    finally:
        await redis.aclose()

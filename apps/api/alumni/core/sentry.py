"""Sentry wiring for the alumni API.

Member contact details (email, phone) never leave the API: request
bodies are dropped and identity is reported by internal id only.
"""

import structlog
import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.httpx import HttpxIntegration
from sentry_sdk.integrations.redis import RedisIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

logger = structlog.get_logger()

_REDACTED = "[REDACTED]"
_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "svix-signature"})
_HEALTH_TRANSACTIONS = frozenset({"/health", "health_check"})


def scrub_event(event: dict, hint: dict) -> dict:
    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for name in list(headers):
        if name.lower() in _SENSITIVE_HEADERS:
            headers[name] = _REDACTED
    if "data" in request:
        request["data"] = _REDACTED
    # the callback carries a one-time OAuth code in its query string
    if "code=" in (request.get("query_string") or ""):
        request["query_string"] = _REDACTED

    user = event.get("user")
    if user:
        event["user"] = {"id": user["id"]} if "id" in user else {}
    return event


def _traces_sampler(rate: float):
    def sample(context: dict) -> float:
        name = (context.get("transaction_context") or {}).get("name", "")
        return 0.0 if name in _HEALTH_TRANSACTIONS else rate

    return sample


def init_sentry(
    dsn: str | None,
    environment: str = "development",
    release: str | None = None,
) -> None:
    """Initialise Sentry before the FastAPI app is created. No-op without a DSN."""
    if not dsn:
        logger.info("sentry.disabled", reason="SENTRY_DSN not set")
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sampler=_traces_sampler(0.1 if environment == "production" else 1.0),
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
            RedisIntegration(),
            HttpxIntegration(),
        ],
        send_default_pii=False,
        before_send=scrub_event,
    )
    logger.info("sentry.initialized", environment=environment)

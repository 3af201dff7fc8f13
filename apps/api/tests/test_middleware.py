"""Tests for the HTTP hardening middleware, error helpers and the health check."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from alumni.core.errors import ConflictError, service_error_to_http
from alumni.core.sentry import scrub_event
from alumni.middleware.security import (
    DEFAULT_RATE,
    RateLimitMiddleware,
    RequestBodySizeLimitMiddleware,
    SecurityHeadersMiddleware,
    rule_for,
)

pytestmark = pytest.mark.anyio


def _echo_app() -> FastAPI:
    app = FastAPI()

    @app.post("/echo")
    async def echo(payload: dict) -> dict:
        return payload

    @app.get("/ping")
    async def ping() -> dict:
        return {"ok": True}

    return app


async def _client(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRateRules:
    @pytest.mark.parametrize(
        ("path", "bucket"),
        [
            ("/v1/auth/webhook", "/auth/webhook"),
            ("/v1/auth/me", "/auth/"),
            ("/v1/connections/abc/accept", "/connections"),
            ("/v1/onboarding/profile", "/onboarding/"),
        ],
    )
    def test_specific_buckets(self, path: str, bucket: str):
        assert rule_for(path)[0] == bucket

    def test_default_bucket(self):
        assert rule_for("/v1/directory") == ("default", *DEFAULT_RATE)

    def test_client_ip_prefers_forwarded_header(self):
        scope = {
            "headers": [(b"x-forwarded-for", b"203.0.113.9, 10.0.0.1")],
            "client": ("10.0.0.1", 1234),
        }
        assert RateLimitMiddleware.client_ip(scope) == "203.0.113.9"
        assert RateLimitMiddleware.client_ip({"headers": [], "client": ("10.0.0.2", 1)}) == "10.0.0.2"

    async def test_redis_failure_lets_request_through(self):
        app = _echo_app()
        app.add_middleware(RateLimitMiddleware, redis_url="redis://127.0.0.1:1/0")
        async with await _client(app) as client:
            response = await client.get("/ping")
        assert response.status_code == 200
        assert response.headers["x-ratelimit-limit"] == str(DEFAULT_RATE[0])


class TestBodyLimit:
    async def test_oversized_body_rejected(self):
        app = _echo_app()
        app.add_middleware(RequestBodySizeLimitMiddleware, max_bytes=64)
        async with await _client(app) as client:
            response = await client.post("/echo", json={"bio": "x" * 200})
        assert response.status_code == 413

    async def test_small_body_passes(self):
        app = _echo_app()
        app.add_middleware(RequestBodySizeLimitMiddleware, max_bytes=64)
        async with await _client(app) as client:
            response = await client.post("/echo", json={"bio": "hi"})
        assert response.status_code == 200
        assert response.json() == {"bio": "hi"}


class TestSecurityHeaders:
    async def test_headers_added(self):
        app = _echo_app()
        app.add_middleware(SecurityHeadersMiddleware)
        async with await _client(app) as client:
            response = await client.get("/ping")
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["server"] == "alumni-api"
        assert "strict-transport-security" not in response.headers

    async def test_hsts_in_production(self):
        app = _echo_app()
        app.add_middleware(SecurityHeadersMiddleware, is_production=True)
        async with await _client(app) as client:
            response = await client.get("/ping")
        assert response.headers["strict-transport-security"].startswith("max-age=")


class TestAppWiring:
    async def test_health_reports_status(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["service"] == "alumni-api"
        assert body["status"] in {"healthy", "degraded"}
        assert body["checks"]["database"]["status"] == "healthy"

    async def test_version_and_security_headers(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.headers["x-api-version"] == "v1"
        assert response.headers["x-content-type-options"] == "nosniff"

    async def test_unknown_route_uses_error_envelope(self, client: AsyncClient):
        response = await client.get("/v1/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "http_404"


class TestErrorHelpers:
    @pytest.mark.parametrize(
        ("exc", "status_code"),
        [
            (LookupError("Profile not found"), 404),
            (PermissionError("nope"), 403),
            (ConflictError("already connected"), 409),
            (ValueError("bad batch"), 422),
        ],
    )
    def test_service_errors_map_to_status(self, exc: Exception, status_code: int):
        http = service_error_to_http(exc)
        assert http.status_code == status_code
        assert http.detail == str(exc)

    def test_unexpected_error_is_reraised(self):
        with pytest.raises(RuntimeError):
            service_error_to_http(RuntimeError("boom"))

    def test_sentry_scrubs_contact_details(self):
        event = {
            "request": {
                "headers": {"Authorization": "Bearer abc", "Accept": "application/json"},
                "data": {"phone": "+60 12 345 6789"},
                "query_string": "code=one-time-code",
            },
            "user": {"id": "42", "email": "asha@example.com"},
        }
        scrubbed = scrub_event(event, {})
        assert scrubbed["request"]["headers"]["Authorization"] == "[REDACTED]"
        assert scrubbed["request"]["headers"]["Accept"] == "application/json"
        assert scrubbed["request"]["data"] == "[REDACTED]"
        assert scrubbed["request"]["query_string"] == "[REDACTED]"
        assert scrubbed["user"] == {"id": "42"}

"""HTTP hardening middleware: response headers, body size cap, per-IP rate limit.

Pure ASGI classes rather than BaseHTTPMiddleware, so they wrap any
response type without buffering it.
"""

import json
import time

import redis.asyncio as aioredis
import structlog
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Receive, Scope, Send

logger = structlog.get_logger()


async def _send_json(
    send: Send,
    status: int,
    payload: dict,
    extra_headers: list[tuple[bytes, bytes]] | None = None,
) -> None:
    body = json.dumps(payload).encode()
    headers = [
        (b"content-type", b"application/json"),
        (b"content-length", str(len(body)).encode()),
        *(extra_headers or []),
    ]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body, "more_body": False})


# ── Security headers ──────────────────────────────────────────────────────────


class SecurityHeadersMiddleware:
    """Add browser security headers and hide the server banner."""

    _BASE_HEADERS = (
        ("x-content-type-options", "nosniff"),
        ("x-frame-options", "DENY"),
        ("x-xss-protection", "0"),
        ("referrer-policy", "strict-origin-when-cross-origin"),
        ("permissions-policy", "geolocation=(), microphone=(), camera=()"),
    )
    _HSTS = ("strict-transport-security", "max-age=63072000; includeSubDomains")

    def __init__(self, app: ASGIApp, is_production: bool = False) -> None:
        self.app = app
        self.headers = list(self._BASE_HEADERS)
        if is_production:
            self.headers.append(self._HSTS)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in self.headers:
                    headers.append(name, value)
                headers["server"] = "alumni-api"
            await send(message)

        await self.app(scope, receive, send_wrapper)


# ── Request body size ─────────────────────────────────────────────────────────


class RequestBodySizeLimitMiddleware:
    """Answer 413 when the declared Content-Length is above max_bytes.

    The API only takes small JSON bodies, so the default cap is 1 MB.
    """

    def __init__(self, app: ASGIApp, max_bytes: int = 1_048_576) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        declared = dict(scope.get("headers", [])).get(b"content-length")
        try:
            too_large = declared is not None and int(declared) > self.max_bytes
        except ValueError:
            too_large = False  # malformed header is the server's problem, not ours

        if too_large:
            await _send_json(
                send,
                413,
                {"detail": f"Request body too large. Maximum {self.max_bytes} bytes."},
            )
            return

        await self.app(scope, receive, send)


# ── Rate limiting ─────────────────────────────────────────────────────────────

# (path prefix after /v1, requests, window seconds); first match wins
RATE_RULES: list[tuple[str, int, int]] = [
    ("/auth/webhook", 200, 60),
    ("/auth/", 20, 60),
    ("/connections", 60, 60),
    ("/onboarding/", 20, 60),
]
DEFAULT_RATE: tuple[int, int] = (300, 60)

_EXEMPT = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


def rule_for(path: str) -> tuple[str, int, int]:
    """Return (bucket, limit, window) for a request path."""
    if path.startswith("/v1"):
        path = path[3:]
    for prefix, limit, window in RATE_RULES:
        if path.startswith(prefix):
            return prefix, limit, window
    return "default", *DEFAULT_RATE


class RateLimitMiddleware:
    """Sliding-window limit per client IP and path bucket, kept in Redis.

    A Redis failure lets the request through: availability wins over
    throttling.
    """

    def __init__(self, app: ASGIApp, redis_url: str, enabled: bool = True) -> None:
        self.app = app
        self.enabled = enabled
        self.redis_url = redis_url
        self._redis: aioredis.Redis | None = None

    def _client(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=0.5,
                socket_timeout=0.5,
            )
        return self._redis

    @staticmethod
    def client_ip(scope: Scope) -> str:
        for name, value in scope.get("headers", []):
            if name == b"x-forwarded-for":
                return value.decode().split(",")[0].strip()
        client = scope.get("client")
        return client[0] if client else "unknown"

    async def _hit(self, key: str, limit: int, window: int) -> tuple[bool, int]:
        now = time.time()
        pipe = self._client().pipeline()
        pipe.zremrangebyscore(key, 0, now - window)
        pipe.zadd(key, {f"{now:.6f}": now})
        pipe.zcard(key)
        pipe.expire(key, window + 1)
        _, _, count, _ = await pipe.execute()
        return count <= limit, max(0, limit - count)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path: str = scope.get("path", "")
        if scope["type"] != "http" or not self.enabled or path in _EXEMPT:
            await self.app(scope, receive, send)
            return

        bucket, limit, window = rule_for(path)
        ip = self.client_ip(scope)
        allowed, remaining = True, limit
        try:
            allowed, remaining = await self._hit(f"rl:{ip}:{bucket}", limit, window)
        except Exception as exc:  # noqa: BLE001
            logger.warning("rate_limit.redis_error", error=str(exc))

        if not allowed:
            logger.info("rate_limit.exceeded", ip=ip, bucket=bucket)
            await _send_json(
                send,
                429,
                {"detail": "Too many requests. Please slow down."},
                extra_headers=[
                    (b"retry-after", str(window).encode()),
                    (b"x-ratelimit-limit", str(limit).encode()),
                    (b"x-ratelimit-remaining", b"0"),
                ],
            )
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.append("x-ratelimit-limit", str(limit))
                headers.append("x-ratelimit-remaining", str(remaining))
                headers.append("x-ratelimit-window", str(window))
            await send(message)

        await self.app(scope, receive, send_wrapper)

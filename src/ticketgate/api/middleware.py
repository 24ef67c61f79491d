"""API middleware: CORS, security headers, rate limiting, request logging."""

from __future__ import annotations

import logging
import time
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from ticketgate.core.context import new_correlation_id, set_correlation_id

logger = logging.getLogger(__name__)

# ── In-memory rate limit store (per-process) ────────────────────────

RATE_LIMIT_WINDOW = 60  # seconds

HEALTH_PATHS = frozenset({"/health", "/health/ready", "/health/live"})


class RateLimiter:
    """Sliding one-minute window per client key.

    One instance per application, held on ``app.state``. Keys with no
    hits inside the window are dropped once per window, so memory is
    bounded by the number of clients seen in the last minute.
    """

    def __init__(self, window: int = RATE_LIMIT_WINDOW) -> None:
        self.window = window
        self._buckets: dict[str, list[float]] = {}
        self._last_sweep = 0.0

    def __len__(self) -> int:
        return len(self._buckets)

    def check(self, key: str, limit: int, now: float | None = None) -> tuple[bool, int]:
        """Return (allowed, remaining) for a given key and per-window limit."""
        if now is None:
            now = time.time()
        window_start = now - self.window
        if now - self._last_sweep >= self.window:
            self._sweep(window_start)
            self._last_sweep = now
        bucket = [t for t in self._buckets.get(key, ()) if t > window_start]
        if len(bucket) >= limit:
            self._buckets[key] = bucket
            return False, 0
        bucket.append(now)
        self._buckets[key] = bucket
        return True, limit - len(bucket)

    def _sweep(self, window_start: float) -> None:
        stale = [k for k, hits in self._buckets.items() if not hits or hits[-1] <= window_start]
        for key in stale:
            del self._buckets[key]
        if stale:
            logger.debug("Rate limiter evicted %d idle keys", len(stale))


def _get_client_key(request: Request) -> str:
    """Build rate-limit key from client IP."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


# ── Security Headers ───────────────────────────────────────────────

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(self), microphone=(), geolocation=()",
}

HSTS_HEADER = "max-age=31536000; includeSubDomains"


def setup_middleware(app: FastAPI) -> None:
    """Attach all middleware to the FastAPI app."""
    settings = getattr(app.state, "settings", None)
    is_prod = settings.is_production if settings else False
    app.state.rate_limiter = RateLimiter()

    app.add_middleware(GZipMiddleware, minimum_size=500)

    origins = _get_cors_origins(settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Correlation-ID"],
    )

    @app.middleware("http")
    async def security_and_logging(  # type: ignore[no-untyped-def]
        request: Request, call_next
    ):
        correlation_id = request.headers.get("x-correlation-id") or new_correlation_id()
        set_correlation_id(correlation_id)

        rate_result = _apply_rate_limit(request, settings)
        if rate_result is not None:
            return rate_result

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = correlation_id
        response.headers["X-Response-Time"] = f"{elapsed:.1f}ms"
        for header, value in SECURITY_HEADERS.items():
            response.headers[header] = value
        if is_prod:
            response.headers["Strict-Transport-Security"] = HSTS_HEADER

        # Query strings carry signatures; log the path only
        logger.info(
            "[%s] %s %s -> %d (%.1fms)",
            correlation_id,
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response


def _get_cors_origins(settings: Any) -> list[str]:
    """Resolve CORS origins from settings."""
    if settings is None:
        return ["*"]
    return list(settings.cors_origin_list)


def _apply_rate_limit(request: Request, settings: Any) -> JSONResponse | None:
    """Apply per-IP rate limiting. Returns error response if limit exceeded."""
    if settings is None or settings.is_testing:
        return None
    if request.url.path in HEALTH_PATHS:
        return None

    limit = settings.rate_limit_anonymous
    limiter: RateLimiter = request.app.state.rate_limiter
    allowed, _remaining = limiter.check(f"ip:{_get_client_key(request)}", limit)
    if allowed:
        return None
    return rfc7807_error_response(
        status=429,
        title="Too Many Requests",
        detail=f"Rate limit exceeded. Max {limit} requests per minute.",
        headers={
            "Retry-After": str(RATE_LIMIT_WINDOW),
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Remaining": "0",
        },
    )


def rfc7807_error_response(
    status: int,
    title: str,
    detail: str,
    type_uri: str = "about:blank",
    instance: str | None = None,
    extra: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build an RFC 7807 Problem Details JSON response."""
    body: dict[str, Any] = {
        "type": type_uri,
        "title": title,
        "status": status,
        "detail": detail,
    }
    if instance:
        body["instance"] = instance
    if extra:
        body.update(extra)
    return JSONResponse(status_code=status, content=body, headers=headers)

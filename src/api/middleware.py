"""
HTTP middleware: rate limiting, security headers, body size limit and
request logging.

The rate limiter keeps one fixed window per client IP. Its state belongs to
the app instance (app.state.rate_limiter) and is not shared across
processes, so limits are per instance.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Sequence, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .responses import error_body

logger = logging.getLogger(__name__)

EXEMPT_PATHS = ("/health",)


def client_ip(request: Request, trusted_proxies: Sequence[str] = ()) -> str:
    """
    Client IP for rate limiting.

    The socket peer, unless the peer is a trusted reverse proxy, in which
    case the first X-Forwarded-For hop it reports.
    """
    peer = request.client.host if request.client else "unknown"
    if peer in trusted_proxies:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded and forwarded.split(",")[0].strip():
            return forwarded.split(",")[0].strip()
    return peer


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def retry_after(self, now: float) -> int:
        return max(1, int(round(self.reset_at - now)))


class RateLimiter:
    """
    Fixed-window request counter keyed by client.

    The count for a key resets once its window has elapsed.
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitDecision:
        now = self.clock()
        with self._lock:
            count, reset_at = self._windows.get(key, (0, 0.0))
            if now >= reset_at:
                count, reset_at = 0, now + self.window_seconds
                if len(self._windows) > 10_000:
                    self._purge(now)
            count += 1
            self._windows[key] = (count, reset_at)

        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_at=reset_at,
        )

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def _purge(self, now: float) -> None:
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        limiter: RateLimiter = request.app.state.rate_limiter
        ip = client_ip(request, request.app.state.config.TRUSTED_PROXIES)
        decision = limiter.hit(ip)
        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
            "X-RateLimit-Reset": str(int(decision.reset_at)),
        }

        if not decision.allowed:
            logger.warning("Rate limit exceeded for %s on %s", ip, request.url.path)
            headers["Retry-After"] = str(decision.retry_after(limiter.clock()))
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content=error_body(
                    "RATE_LIMITED",
                    "Too many requests, please try again later",
                    status.HTTP_429_TOO_MANY_REQUESTS,
                ),
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "DENY",
        "X-XSS-Protection": "1; mode=block",
        "Strict-Transport-Security": "max-age=31536000; includeSubDomains",
        "Referrer-Policy": "strict-origin-when-cross-origin",
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Rejects requests whose declared Content-Length exceeds max_bytes"""

    def __init__(self, app, max_bytes: int):
        super().__init__(app)
        self.max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next):
        length = request.headers.get("Content-Length")
        if length and length.isdigit() and int(length) > self.max_bytes:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content=error_body(
                    "PAYLOAD_TOO_LARGE",
                    f"Request body exceeds {self.max_bytes} bytes",
                    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                ),
            )
        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

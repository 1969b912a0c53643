"""
Per-client rate limiting for the /api routes.

Sliding-window log keyed by client address (first ``x-forwarded-for``
hop, else the socket peer). Over-limit calls get a 429 with a
``retry-after`` header before any router runs.
"""
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Callable

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .errors import error_response

log = structlog.get_logger(__name__)

BLOCKED_MESSAGE = "Blocked due to too many requests"


@dataclass
class RateLimitResult:
    """Outcome of one admission check."""
    allowed: bool
    remaining: int
    retry_after: int = 0


class SlidingWindowRateLimiter:
    """
    At most ``limit`` admissions per key within any ``window_seconds`` span.

    Keys whose newest admission has left the window are dropped. The
    sweep runs at most once per window.
    """

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.limit = max(1, int(limit))
        self.window_seconds = float(window_seconds)
        self._clock = clock
        self._windows: dict[str, deque] = defaultdict(deque)
        self._last_sweep = clock()

    @property
    def tracked_keys(self) -> int:
        return len(self._windows)

    def _sweep(self, cutoff: float) -> None:
        idle = [key for key, window in self._windows.items() if not window or window[-1] <= cutoff]
        for key in idle:
            del self._windows[key]

    def check(self, key: str) -> RateLimitResult:
        now = self._clock()
        cutoff = now - self.window_seconds
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(cutoff)
            self._last_sweep = now

        window = self._windows[key]
        while window and window[0] <= cutoff:
            window.popleft()

        if len(window) >= self.limit:
            retry_after = max(0, int(window[0] + self.window_seconds - now))
            return RateLimitResult(allowed=False, remaining=0, retry_after=retry_after)

        window.append(now)
        return RateLimitResult(allowed=True, remaining=self.limit - len(window))


def client_address(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: SlidingWindowRateLimiter, path_prefix: str = "/api/"):
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client = client_address(request)
        result = self.limiter.check(client)
        if not result.allowed:
            log.warning("rate_limit.blocked", client=client, retry_after=result.retry_after)
            return error_response(
                429, BLOCKED_MESSAGE, headers={"retry-after": str(result.retry_after)}
            )
        return await call_next(request)

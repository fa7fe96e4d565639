import logging
import math
import threading
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class FixedWindowRateLimiter:
    """
    `points` requests per `duration` seconds per key. The window opens on a
    key's first request and resets once it has elapsed.
    """

    def __init__(self, points: int, duration: float, clock: Callable[[], float] = time.monotonic):
        self.points = points
        self.duration = duration
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: dict[str, tuple[float, int]] = {}  # key -> (window start, count)
        self._last_sweep = clock()

    def consume(self, key: str) -> float | None:
        """Returns None if allowed, else the seconds until the window resets."""
        now = self._clock()
        with self._lock:
            start, count = self._windows.get(key, (now, 0))
            if now - self._last_sweep >= self.duration:
                self._sweep(now)
            if now - start >= self.duration:
                start, count = now, 0
            if count >= self.points:
                return self.duration - (now - start)
            self._windows[key] = (start, count + 1)
        return None

    def _sweep(self, now: float) -> None:
        """Drop every expired window. Caller holds the lock."""
        expired = [k for k, (start, _) in self._windows.items() if now - start >= self.duration]
        for k in expired:
            del self._windows[k]
        self._last_sweep = now


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: FixedWindowRateLimiter):
        super().__init__(app)
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next):
        key = request.client.host if request.client else "unknown"
        wait = self.limiter.consume(key)
        if wait is None:
            return await call_next(request)

        retry_after = max(1, math.ceil(wait))
        logger.warning("Rate limit exceeded for %s, retry in %ss", key, retry_after)
        return JSONResponse(
            status_code=429,
            content={"message": "Too many requests", "retryAfter": retry_after},
            headers={"Retry-After": str(retry_after)},
        )

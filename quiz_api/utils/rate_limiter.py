"""
Per-client request throttling
"""
import time
from collections import defaultdict, deque
from fastapi import Request, HTTPException
from typing import Deque, Dict, Tuple
import logging

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding-window rate limiter keyed by client address

    One instance per application; counts are not shared between processes.
    """

    EXEMPT_PATHS = ("/health", "/docs", "/redoc", "/openapi.json")

    def __init__(self, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour

        # {client_id: timestamps within the last hour}
        self.history: Dict[str, Deque[float]] = defaultdict(deque)

    def _get_client_id(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _cleanup_old_entries(self, now: float) -> None:
        """Drop timestamps older than an hour and forget clients left with none"""
        cutoff = now - 3600

        for client_id in list(self.history.keys()):
            timestamps = self.history[client_id]
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()

            if not timestamps:
                del self.history[client_id]

    def _window_counts(self, timestamps: Deque[float], now: float) -> Tuple[int, int]:
        minute_cutoff = now - 60
        last_minute = sum(1 for ts in timestamps if ts > minute_cutoff)
        return last_minute, len(timestamps)

    def _reject(self, client_id: str, limit: int, period: str, retry_after: int):
        logger.warning(f"Rate limit exceeded ({period}): {client_id}")
        raise HTTPException(
            status_code=429,
            detail={
                "error": "rate_limit_exceeded",
                "message": f"Too many requests. Limit: {limit} requests per {period}",
                "retry_after": retry_after
            }
        )

    async def check_rate_limit(self, request: Request) -> None:
        """
        Record the request or reject it

        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        if request.url.path in self.EXEMPT_PATHS:
            return

        client_id = self._get_client_id(request)
        now = time.time()

        self._cleanup_old_entries(now)
        timestamps = self.history[client_id]

        last_minute, last_hour = self._window_counts(timestamps, now)

        if last_minute >= self.requests_per_minute:
            self._reject(client_id, self.requests_per_minute, "minute", 60)

        if last_hour >= self.requests_per_hour:
            self._reject(client_id, self.requests_per_hour, "hour", 3600)

        timestamps.append(now)

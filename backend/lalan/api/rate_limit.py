"""Redis-backed request throttling that degrades to a no-op without Redis."""

from __future__ import annotations

from fastapi import Depends, Request, Response
from fastapi_limiter import FastAPILimiter
from fastapi_limiter.depends import RateLimiter

_SECONDS_BY_WINDOW = {
    "second": 1,
    "seconds": 1,
    "minute": 60,
    "minutes": 60,
    "hour": 3600,
    "hours": 3600,
    "day": 86400,
    "days": 86400,
}


def parse_rate(value: str, *, fallback: tuple[int, int]) -> tuple[int, int]:
    """Parse ``"20/minute"`` into ``(20, 60)``; malformed values use ``fallback``."""
    count_str, sep, window_str = value.partition("/")
    if not sep:
        return fallback
    try:
        count = int(count_str.strip())
    except ValueError:
        return fallback
    seconds = _SECONDS_BY_WINDOW.get(window_str.strip().lower(), fallback[1])
    return count, seconds


def rate_limit(limit: tuple[int, int]):
    """Return a dependency enforcing ``limit`` once the limiter is initialised."""

    async def _dependency(request: Request, response: Response) -> None:
        if FastAPILimiter.redis is None:
            return None
        limiter = RateLimiter(times=limit[0], seconds=limit[1])
        await limiter(request, response)

    return Depends(_dependency)

from __future__ import annotations
import time
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis

from app.core.config import settings

@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_seconds: int

class FixedWindowRateLimiter:
    """Counts hits per key in fixed windows; counters live in Redis so all workers share them."""

    def __init__(self, redis_url: str, *, namespace: str = "rl"):
        self.r = redis.from_url(redis_url, decode_responses=True)
        self.namespace = namespace

    async def allow(self, *, key: str, limit: int, window_seconds: int) -> RateLimitResult:
        now = int(time.time())
        rkey = f"{self.namespace}:{key}:{now // window_seconds}"

        # window-scoped key: refreshing its TTL never stretches the window itself
        async with self.r.pipeline(transaction=True) as pipe:
            pipe.incr(rkey)
            pipe.expire(rkey, window_seconds)
            hits, _ = await pipe.execute()

        return RateLimitResult(
            allowed=hits <= limit,
            remaining=max(0, limit - hits),
            reset_seconds=window_seconds - (now % window_seconds),
        )


@lru_cache
def _login_limiter() -> FixedWindowRateLimiter:
    return FixedWindowRateLimiter(settings.redis_url, namespace="rl:admin-login")


def get_login_limiter() -> FixedWindowRateLimiter | None:
    # admin_login_rate_limit = 0 turns throttling off
    if settings.admin_login_rate_limit <= 0:
        return None
    return _login_limiter()

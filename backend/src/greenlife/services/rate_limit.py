"""Rate limiting keyed by client identifier.

The limiter is a collaborator behind ``RateLimiter``: the in-memory sliding
window suits a single instance, the Redis fixed window is shared across
instances.
"""

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

from fastapi import Request
from redis import asyncio as aioredis

from greenlife.config import settings

logger = logging.getLogger(__name__)


class RateLimitType(str, Enum):
    """Rate limit types for different endpoint categories."""

    FORMS = "forms"
    AUTH = "auth"


@dataclass
class RateLimitConfig:
    """Configuration for a rate limit type."""

    requests: int
    window_seconds: int


RATE_LIMIT_CONFIG: dict[RateLimitType, RateLimitConfig] = {
    RateLimitType.FORMS: RateLimitConfig(requests=5, window_seconds=60),
    RateLimitType.AUTH: RateLimitConfig(requests=10, window_seconds=60),
}


@dataclass
class RateLimitResult:
    """Result of a rate limit check."""

    success: bool
    limit: int
    remaining: int
    reset: int  # Unix timestamp in seconds


class RateLimiter(ABC):
    """Store-agnostic rate limiter."""

    @abstractmethod
    async def check(self, identifier: str, limit_type: RateLimitType) -> RateLimitResult:
        """Record a request for identifier and report whether it is allowed."""

    @abstractmethod
    async def reset(self) -> None:
        """Forget all recorded requests."""

    async def close(self) -> None:
        """Release any connections held by the limiter."""


class InMemoryRateLimiter(RateLimiter):
    """In-memory rate limiter using a sliding window.

    Only correct for single-instance deployments.
    """

    CLEANUP_INTERVAL = 60.0

    def __init__(self) -> None:
        self._requests: dict[str, list[float]] = defaultdict(list)
        self._lock = asyncio.Lock()
        self._last_cleanup = time.time()

    async def check(
        self,
        identifier: str,
        limit_type: RateLimitType,
    ) -> RateLimitResult:
        """Check rate limit for an identifier.

        Args:
            identifier: Unique identifier (e.g., "ip:1.2.3.4" or "user:123")
            limit_type: Type of rate limit to apply

        Returns:
            RateLimitResult with success status and limit info
        """
        config = RATE_LIMIT_CONFIG[limit_type]
        key = f"{limit_type.value}:{identifier}"
        now = time.time()
        window_start = now - config.window_seconds

        if now - self._last_cleanup > self.CLEANUP_INTERVAL:
            self._last_cleanup = now
            await self.cleanup_old_entries()

        async with self._lock:
            timestamps = [t for t in self._requests[key] if t > window_start]
            self._requests[key] = timestamps

            current_count = len(timestamps)
            remaining = max(0, config.requests - current_count)

            if current_count >= config.requests:
                # Reset when the oldest request in the window ages out
                oldest = min(timestamps) if timestamps else now
                return RateLimitResult(
                    success=False,
                    limit=config.requests,
                    remaining=0,
                    reset=int(oldest + config.window_seconds),
                )

            timestamps.append(now)

            return RateLimitResult(
                success=True,
                limit=config.requests,
                remaining=remaining - 1,  # Account for this request
                reset=int(now + config.window_seconds),
            )

    async def reset(self) -> None:
        async with self._lock:
            self._requests.clear()

    async def cleanup_old_entries(self) -> int:
        """Remove expired entries from memory.

        Returns:
            Number of entries removed
        """
        removed = 0
        now = time.time()

        async with self._lock:
            keys_to_remove = []
            for key, timestamps in self._requests.items():
                limit_type_str = key.split(":")[0]
                try:
                    window = RATE_LIMIT_CONFIG[RateLimitType(limit_type_str)].window_seconds
                except ValueError:
                    window = 60

                valid_timestamps = [t for t in timestamps if t > now - window]
                if not valid_timestamps:
                    keys_to_remove.append(key)
                    removed += 1
                else:
                    self._requests[key] = valid_timestamps

            for key in keys_to_remove:
                del self._requests[key]

        return removed


class RedisRateLimiter(RateLimiter):
    """Fixed-window limiter on Redis using atomic INCR + EXPIRE."""

    KEY_PREFIX = "greenlife:ratelimit"

    def __init__(self, redis: aioredis.Redis) -> None:
        self.redis = redis

    @classmethod
    def from_url(cls, url: str) -> "RedisRateLimiter":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def check(self, identifier: str, limit_type: RateLimitType) -> RateLimitResult:
        config = RATE_LIMIT_CONFIG[limit_type]
        now = int(time.time())
        window = now // config.window_seconds
        key = f"{self.KEY_PREFIX}:{limit_type.value}:{identifier}:{window}"
        reset = (window + 1) * config.window_seconds

        async with self.redis.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.expire(key, config.window_seconds)
            count, _ = await pipe.execute()

        count = int(count)
        if count > config.requests:
            return RateLimitResult(success=False, limit=config.requests, remaining=0, reset=reset)

        return RateLimitResult(
            success=True,
            limit=config.requests,
            remaining=config.requests - count,
            reset=reset,
        )

    async def reset(self) -> None:
        async for key in self.redis.scan_iter(match=f"{self.KEY_PREFIX}:*"):
            await self.redis.delete(key)

    async def close(self) -> None:
        await self.redis.aclose()


_rate_limiter: RateLimiter | None = None


def create_rate_limiter() -> RateLimiter:
    """Build the limiter selected by settings."""
    if settings.rate_limit_backend == "redis":
        logger.info("Using Redis rate limiter")
        return RedisRateLimiter.from_url(settings.redis_url)
    return InMemoryRateLimiter()


def get_rate_limiter() -> RateLimiter:
    """Get the process-wide rate limiter instance."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = create_rate_limiter()
    return _rate_limiter


def set_rate_limiter(limiter: RateLimiter | None) -> None:
    """Swap the process-wide limiter (None rebuilds from settings on next use)."""
    global _rate_limiter
    _rate_limiter = limiter


async def close_rate_limiter() -> None:
    global _rate_limiter
    if _rate_limiter is not None:
        await _rate_limiter.close()
        _rate_limiter = None


def get_client_ip(request: Request) -> str | None:
    """Extract client IP from request headers.

    Checks common headers used by proxies and load balancers.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # x-forwarded-for can be a comma-separated list, take the first IP
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    if request.client:
        return request.client.host

    return None


def get_identifier(ip: str | None, user_id: str | None = None) -> str:
    """Prefer the user ID for authenticated requests, fall back to IP address."""
    if user_id:
        return f"user:{user_id}"
    return f"ip:{ip or 'unknown'}"


async def check_rate_limit(
    request: Request,
    limit_type: RateLimitType,
    user_id: str | None = None,
) -> RateLimitResult:
    """Check rate limit for a request."""
    identifier = get_identifier(get_client_ip(request), user_id)
    return await get_rate_limiter().check(identifier, limit_type)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Generate rate limit headers for response."""
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset),
    }

    if not result.success:
        retry_after = max(0, result.reset - int(time.time()))
        headers["Retry-After"] = str(retry_after)

    return headers

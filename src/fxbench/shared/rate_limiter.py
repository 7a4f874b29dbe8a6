# src/fxbench/shared/rate_limiter.py
"""
Rate Limiter - Command Throttling for the Bot Surface

Sliding-window throttle keyed by an identifier such as "convert_command:user:42".
Going over the window limit puts the identifier in a penalty block that
outlasts the window. Stress tests are expensive, so they get the tightest
limit and the longest block.

Files that USE this module:
- fxbench.adapters.telegram.handlers (throttles every command)
- tests.test_rate_limiter (unit tests)

Files that this module USES:
- fxbench.shared.clock (injectable time source)
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Optional

from fxbench.shared.clock import Clock, system_clock


@dataclass(frozen=True)
class RateLimitConfig:
    """Window limit and penalty for one command family."""
    max_requests: int
    time_window: float  # seconds
    block_duration: float = 300.0  # seconds


@dataclass(frozen=True)
class ThrottleDecision:
    """Answer to a single admission request."""
    allowed: bool
    remaining: int
    retry_after: float = 0.0  # seconds until a retry can succeed


@dataclass
class _Bucket:
    hits: Deque[float] = field(default_factory=deque)
    blocked_until: Optional[float] = None

    def expire(self, now: float, window: float) -> None:
        if self.blocked_until is not None and now >= self.blocked_until:
            self.blocked_until = None
        while self.hits and self.hits[0] <= now - window:
            self.hits.popleft()


class RateLimiter:
    """In-memory throttle; one bucket per identifier."""

    def __init__(self, clock: Clock = system_clock):
        self._clock = clock
        self._buckets: Dict[str, _Bucket] = {}

    def _bucket(self, identifier: str, config: RateLimitConfig, now: float) -> _Bucket:
        bucket = self._buckets.setdefault(identifier, _Bucket())
        bucket.expire(now, config.time_window)
        return bucket

    def acquire(self, identifier: str, config: RateLimitConfig) -> ThrottleDecision:
        """
        Admit and record one request, or refuse it.

        Args:
            identifier: Throttle key (command family plus user or chat)
            config: Limits for that command family

        Returns:
            ThrottleDecision; a refusal that exceeds the limit starts a block
        """
        now = self._clock.time()
        bucket = self._bucket(identifier, config, now)

        if bucket.blocked_until is not None:
            return ThrottleDecision(False, 0, bucket.blocked_until - now)

        if len(bucket.hits) >= config.max_requests:
            bucket.blocked_until = now + config.block_duration
            return ThrottleDecision(False, 0, config.block_duration)

        bucket.hits.append(now)
        return ThrottleDecision(True, config.max_requests - len(bucket.hits))

    def is_allowed(self, identifier: str, config: RateLimitConfig) -> bool:
        return self.acquire(identifier, config).allowed

    def get_remaining_requests(self, identifier: str, config: RateLimitConfig) -> int:
        """Requests still admitted in the current window (0 while blocked)."""
        bucket = self._bucket(identifier, config, self._clock.time())
        if bucket.blocked_until is not None:
            return 0
        return max(0, config.max_requests - len(bucket.hits))

    def get_reset_time(self, identifier: str, config: RateLimitConfig) -> Optional[float]:
        """Epoch seconds when the block or the oldest recorded hit expires, None if idle."""
        bucket = self._buckets.get(identifier)
        if bucket is None:
            return None
        bucket.expire(self._clock.time(), config.time_window)
        if bucket.blocked_until is not None:
            return bucket.blocked_until
        return bucket.hits[0] + config.time_window if bucket.hits else None

    def reset(self) -> None:
        """Forget every bucket."""
        self._buckets.clear()


# Shared by all handlers
rate_limiter = RateLimiter()

RATE_LIMITS: Dict[str, RateLimitConfig] = {
    "convert_command": RateLimitConfig(max_requests=20, time_window=60),
    "stress_command": RateLimitConfig(max_requests=2, time_window=300, block_duration=600),
    "health_check": RateLimitConfig(max_requests=5, time_window=60),
}

# src/fxbench/shared/clock.py
"""
Clock and Randomness Sources - Injectable Time and Chance

The conversion engine, load-test harness and health checker never call
time.time(), asyncio.sleep() or random.random() directly. They go through
the two small protocols below so tests can supply virtual time and
scripted random sequences.

Files that USE this module:
- fxbench.application.conversion_service (delay, fault injection, timing)
- fxbench.application.load_test (deadline, pacing)
- fxbench.application.health (simulated metrics)
- fxbench.shared.rate_limiter (request timestamps)

Files that this module USES:
- asyncio, random, time (standard library)
"""
from __future__ import annotations

import asyncio
import random
import time
from typing import Protocol


class Clock(Protocol):
    """Source of wall-clock time, monotonic time and suspension."""

    def time(self) -> float:
        """Seconds since the epoch."""
        ...

    def monotonic(self) -> float:
        """Seconds from an arbitrary fixed point; never goes backwards."""
        ...

    async def sleep(self, seconds: float) -> None:
        ...


class RandomSource(Protocol):
    """Source of uniform floats in [0, 1). random.Random satisfies it."""

    def random(self) -> float:
        ...


class SystemClock:
    """Clock backed by the time module and the running event loop."""

    def time(self) -> float:
        return time.time()

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float) -> None:
        await asyncio.sleep(max(0.0, seconds))


def default_random_source() -> RandomSource:
    """A fresh, OS-seeded random.Random instance."""
    return random.Random()


def now_ms(clock: Clock) -> float:
    """Epoch milliseconds from the given clock."""
    return clock.time() * 1000.0


# Shared default clock instance
system_clock = SystemClock()

# tests/conftest.py
"""
Shared Test Fixtures - Virtual Time and Scripted Randomness

Provides a virtual clock and a scripted random source so engine, load-test
and health tests run instantly and deterministically.

Files that USE this module:
- pytest (fixture discovery for every test module)

Files that this module USES:
- fxbench.application.conversion_service (ConversionEngine)
- fxbench.application.conversion_service (set_default_engine for cleanup)
- fxbench.shared.rate_limiter (global rate limiter reset)
"""
import asyncio  # Yield to the event loop from the virtual sleep
import itertools  # Cycle through scripted random values

import pytest  # Testing framework for writing and running tests

from fxbench.application.conversion_service import ConversionEngine, set_default_engine  # Engine under test
from fxbench.shared.rate_limiter import rate_limiter  # Global limiter shared by handlers


class FakeClock:
    """Virtual clock: sleep() advances time instantly."""

    def __init__(self, epoch: float = 1_700_000_000.0):
        self.now = 0.0
        self.epoch = epoch
        self.sleeps = []

    def time(self) -> float:
        return self.epoch + self.now

    def monotonic(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds
        await asyncio.sleep(0)


class ScriptedRandom:
    """Random source that cycles through a fixed list of values."""

    def __init__(self, values=(0.5,)):
        self._values = itertools.cycle(values)

    def random(self) -> float:
        return next(self._values)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_engine(fake_clock):
    """Factory for engines on the virtual clock with faults disabled by default."""

    def _make(values=(0.5,), **kwargs):
        kwargs.setdefault("clock", fake_clock)
        kwargs.setdefault("random_source", ScriptedRandom(values))
        kwargs.setdefault("fault_probability", 0.0)
        return ConversionEngine(**kwargs)

    return _make


@pytest.fixture(autouse=True)
def _reset_globals():
    yield
    set_default_engine(None)
    rate_limiter.reset()

# src/fxbench/application/conversion_service.py
"""
Conversion Service - Currency Conversion Orchestration

This module contains the ConversionEngine, which runs one conversion end to end:
1. validate the raw input
2. wait a simulated network delay
3. occasionally inject a simulated transport fault
4. look up the rate, resolve precision and round the result
5. return a structured ConversionOutcome

No step raises to the caller: failures come back as data, and anything
unexpected becomes a system/critical outcome. Steps 2-5 run under an
optional per-call timeout.

It also exposes the module-level entry points validate_currency_input() and
convert_currency(), bound to a lazily built default engine.

Files that USE this module:
- fxbench.application.load_test (LoadTestHarness drives ConversionEngine)
- fxbench.application.health (conversion probe)
- fxbench.adapters.telegram.handlers (/convert and /validate)
- tests.test_conversion_service (unit tests)

Files that this module USES:
- fxbench.application.rates (RateTable, resolve_precision, convert_amount)
- fxbench.shared.validators (InputValidator, MISSING)
- fxbench.shared.clock (Clock, RandomSource)
- fxbench.domain.models (outcome value objects)
- fxbench.config (settings for from_settings)
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Sequence, Tuple

from fxbench.application.rates import RateTable, convert_amount, load_rate_table, resolve_precision
from fxbench.domain.models import (
    ConversionMetadata,
    ConversionOutcome,
    ErrorKind,
    FaultSpec,
    Severity,
    ValidationFailure,
    ValidationOutcome,
    ValidationSuccess,
)
from fxbench.shared.clock import Clock, RandomSource, default_random_source, now_ms, system_clock
from fxbench.shared.validators import MISSING, InputValidator

logger = logging.getLogger(__name__)

DEFAULT_FAULTS: Tuple[FaultSpec, ...] = (
    FaultSpec("Request timeout - please try again", ErrorKind.NETWORK, Severity.MEDIUM),
    FaultSpec("Network error - check your connection", ErrorKind.NETWORK, Severity.HIGH),
    FaultSpec("Rate limit exceeded - please wait", ErrorKind.RATE_LIMIT, Severity.MEDIUM),
    FaultSpec("Server error - please try again later", ErrorKind.SERVER, Severity.HIGH),
    FaultSpec("Invalid response from currency service", ErrorKind.SERVICE, Severity.MEDIUM),
)

TIMEOUT_FAULT = DEFAULT_FAULTS[0]

SYSTEM_ERROR_MESSAGE = "Currency conversion system error"


class ConversionEngine:
    """
    Orchestrates validation, simulated transport and rate arithmetic.

    The rate table, validator, clock and random source are all injected so
    tests can substitute deterministic versions.
    """

    def __init__(
        self,
        rate_table: Optional[RateTable] = None,
        validator: Optional[InputValidator] = None,
        clock: Optional[Clock] = None,
        random_source: Optional[RandomSource] = None,
        delay_range_ms: Tuple[float, float] = (50.0, 150.0),
        fault_probability: float = 0.001,
        faults: Sequence[FaultSpec] = DEFAULT_FAULTS,
        call_timeout: Optional[float] = 5.0,
    ):
        """
        Initialize the engine.

        Args:
            rate_table: Rate table to convert with (default: built-in table)
            validator: Input validator (default: InputValidator())
            clock: Time source for delays and timings (default: system clock)
            random_source: Source of uniform floats for delay and faults
            delay_range_ms: Simulated network delay bounds [min, max) in ms
            fault_probability: Chance in [0, 1] of injecting a transport fault
            faults: Fault catalogue to pick from, uniformly
            call_timeout: Seconds allowed for delay plus computation, None for no limit

        Raises:
            ValueError: If the delay range, probability or timeout is invalid
        """
        low, high = delay_range_ms
        if low < 0 or high < low:
            raise ValueError(f"Invalid delay range: {delay_range_ms}")
        if not 0.0 <= fault_probability <= 1.0:
            raise ValueError(f"fault_probability must be within [0, 1], got {fault_probability}")
        if call_timeout is not None and call_timeout <= 0:
            raise ValueError(f"call_timeout must be positive or None, got {call_timeout}")

        # An empty table is falsy, so test against None
        self.rate_table = rate_table if rate_table is not None else RateTable.default()
        self.validator = validator if validator is not None else InputValidator()
        self.clock = clock or system_clock
        self.random = random_source or default_random_source()
        self.delay_range_ms = (float(low), float(high))
        self.fault_probability = fault_probability
        self.faults: Tuple[FaultSpec, ...] = tuple(faults)
        self.call_timeout = call_timeout

    @classmethod
    def from_settings(cls, config=None, **overrides: Any) -> ConversionEngine:
        """
        Build an engine from application settings.

        Args:
            config: Settings instance (default: fxbench.config.settings)
            overrides: Constructor arguments that take precedence over settings

        Returns:
            Configured ConversionEngine
        """
        if config is None:
            from fxbench.config import settings as config

        kwargs: dict = {
            "validator": InputValidator(min_amount=config.min_amount),
            "delay_range_ms": (config.delay_min_ms, config.delay_max_ms),
            "fault_probability": config.fault_probability,
            "call_timeout": config.call_timeout,
        }
        if config.rate_table_file:
            kwargs["rate_table"] = load_rate_table(config.rate_table_file)
        kwargs.update(overrides)
        return cls(**kwargs)

    def _elapsed_ms(self, started: float) -> float:
        return (self.clock.monotonic() - started) * 1000.0

    def validate(self, amount: Any = MISSING, from_currency: Any = MISSING,
                 to_currency: Any = MISSING) -> ValidationOutcome:
        return self.validator.validate(amount, from_currency, to_currency)

    async def convert(self, amount: Any = MISSING, from_currency: Any = MISSING,
                      to_currency: Any = MISSING) -> ConversionOutcome:
        """
        Convert an amount between two currencies.

        Args:
            amount: Raw amount (number or numeric string)
            from_currency: Raw source currency code
            to_currency: Raw target currency code

        Returns:
            ConversionOutcome; failures carry error, error_type and severity
        """
        started = self.clock.monotonic()
        try:
            validation = self.validator.validate(amount, from_currency, to_currency)
            if isinstance(validation, ValidationFailure):
                return ConversionOutcome.failed(
                    validation.message, validation.kind, validation.severity,
                    self._elapsed_ms(started),
                )

            if self.call_timeout is None:
                return await self._transport(validation, started)
            try:
                return await asyncio.wait_for(self._transport(validation, started), self.call_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "Conversion %s->%s timed out after %.3fs",
                    validation.normalized_from_currency,
                    validation.normalized_to_currency,
                    self.call_timeout,
                )
                return ConversionOutcome.failed(
                    TIMEOUT_FAULT.message, TIMEOUT_FAULT.kind, TIMEOUT_FAULT.severity,
                    self._elapsed_ms(started),
                )
        except Exception:
            logger.exception("Currency conversion system error")
            return ConversionOutcome.failed(
                SYSTEM_ERROR_MESSAGE, ErrorKind.SYSTEM, Severity.CRITICAL,
                self._elapsed_ms(started),
            )

    async def _transport(self, validation: ValidationSuccess, started: float) -> ConversionOutcome:
        """Simulated round trip: delay, possible fault, then the arithmetic."""
        low, high = self.delay_range_ms
        delay_ms = low + self.random.random() * (high - low)
        await self.clock.sleep(delay_ms / 1000.0)

        fault = self._pick_fault()
        if fault is not None:
            logger.debug("Injected fault %s: %s", fault.kind.value, fault.message)
            return ConversionOutcome.failed(
                fault.message, fault.kind, fault.severity, self._elapsed_ms(started)
            )

        return self._compute(validation, started)

    def _pick_fault(self) -> Optional[FaultSpec]:
        # Always draws once so a scripted random source sees a fixed sequence
        roll = self.random.random()
        if not self.faults or roll >= self.fault_probability:
            return None
        index = min(int(self.random.random() * len(self.faults)), len(self.faults) - 1)
        return self.faults[index]

    def _compute(self, validation: ValidationSuccess, started: float) -> ConversionOutcome:
        amount = validation.sanitized_amount
        source = validation.normalized_from_currency
        target = validation.normalized_to_currency

        found = self.rate_table.lookup(source, target)
        rate = self.rate_table.rate(source, target)
        if found is None:
            logger.debug("No rate for %s->%s, using fallback rate %s", source, target, rate)

        precision = resolve_precision(amount, source, target)
        result = convert_amount(amount, rate, precision)

        metadata = ConversionMetadata(
            rate=rate,
            precision=precision,
            timestamp=now_ms(self.clock),
            from_currency=source,
            to_currency=target,
            rate_found=found is not None,
        )
        return ConversionOutcome.succeeded(result, metadata, self._elapsed_ms(started))


# Default engine shared by the module-level entry points
_default_engine: Optional[ConversionEngine] = None


def get_default_engine() -> ConversionEngine:
    """Return the process-wide engine, building it from settings on first use."""
    global _default_engine
    if _default_engine is None:
        _default_engine = ConversionEngine.from_settings()
        logger.info("Default conversion engine ready: %r", _default_engine.rate_table)
    return _default_engine


def set_default_engine(engine: Optional[ConversionEngine]) -> None:
    """Replace the process-wide engine; None rebuilds it from settings on next use."""
    global _default_engine
    _default_engine = engine


def validate_currency_input(amount: Any = MISSING, from_currency: Any = MISSING,
                            to_currency: Any = MISSING) -> ValidationOutcome:
    """Validate a raw conversion request with the default engine's validator."""
    return get_default_engine().validate(amount, from_currency, to_currency)


async def convert_currency(amount: Any = MISSING, from_currency: Any = MISSING,
                           to_currency: Any = MISSING) -> ConversionOutcome:
    """Convert with the default engine."""
    return await get_default_engine().convert(amount, from_currency, to_currency)

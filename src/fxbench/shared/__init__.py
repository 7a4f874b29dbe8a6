"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Input validation
- Injectable clock and randomness
- Rate limiting
- Logging configuration
"""

from fxbench.shared.validators import (
    MISSING,
    MAX_SAFE_INTEGER,
    MIN_POSITIVE_AMOUNT,
    InputValidator,
    detect_security_threat,
    validate_bot_token,
)
from fxbench.shared.clock import Clock, RandomSource, SystemClock, system_clock
from fxbench.shared.rate_limiter import rate_limiter, RATE_LIMITS

__all__ = [
    "MISSING",
    "MAX_SAFE_INTEGER",
    "MIN_POSITIVE_AMOUNT",
    "InputValidator",
    "detect_security_threat",
    "validate_bot_token",
    "Clock",
    "RandomSource",
    "SystemClock",
    "system_clock",
    "rate_limiter",
    "RATE_LIMITS",
]

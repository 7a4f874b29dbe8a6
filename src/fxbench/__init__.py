"""
fxbench - Currency Validation, Conversion and Load-Testing Engine

An in-process engine that validates raw conversion requests, converts
amounts with a static rate table and magnitude-aware precision over a
simulated transport, and load-tests itself under a concurrency and rate
budget. An optional Telegram bot exposes the same entry points.
"""

__version__ = "1.0.0"

from fxbench.application import (
    convert_currency,
    execute_stress_test,
    get_system_health_metrics,
    validate_currency_input,
)

__all__ = [
    "__version__",
    "convert_currency",
    "execute_stress_test",
    "get_system_health_metrics",
    "validate_currency_input",
]

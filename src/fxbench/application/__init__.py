"""
Application Layer - Use Cases and Services

This package contains the conversion engine, the load-test harness, the
rate table and the health checker, plus the module-level entry points
consumed by callers.
"""

from fxbench.application.rates import RateTable, load_rate_table, resolve_precision, round_to_precision
from fxbench.application.conversion_service import (
    ConversionEngine,
    convert_currency,
    get_default_engine,
    set_default_engine,
    validate_currency_input,
)
from fxbench.application.load_test import LoadTestHarness, execute_stress_test
from fxbench.application.health import HealthChecker, get_system_health_metrics, health_checker

__all__ = [
    "RateTable",
    "load_rate_table",
    "resolve_precision",
    "round_to_precision",
    "ConversionEngine",
    "convert_currency",
    "get_default_engine",
    "set_default_engine",
    "validate_currency_input",
    "LoadTestHarness",
    "execute_stress_test",
    "HealthChecker",
    "get_system_health_metrics",
    "health_checker",
]

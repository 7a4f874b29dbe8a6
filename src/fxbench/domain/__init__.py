"""
Domain Layer - Pure Business Objects

This package contains value objects, currency data and domain errors.
No dependencies on infrastructure or external systems.
"""

from fxbench.domain.models import (
    ConversionMetadata,
    ConversionOutcome,
    ErrorKind,
    FaultSpec,
    HealthMetrics,
    LoadTestResult,
    Severity,
    ValidationFailure,
    ValidationOutcome,
    ValidationSuccess,
)
from fxbench.domain.errors import (
    DomainError,
    InvalidLoadTestParameters,
    InvalidRateError,
)
from fxbench.domain.currencies import (
    SUPPORTED_CURRENCY_CODES,
    ZERO_DECIMAL_CURRENCIES,
    Currency,
)

__all__ = [
    "ConversionMetadata",
    "ConversionOutcome",
    "ErrorKind",
    "FaultSpec",
    "HealthMetrics",
    "LoadTestResult",
    "Severity",
    "ValidationFailure",
    "ValidationOutcome",
    "ValidationSuccess",
    "DomainError",
    "InvalidLoadTestParameters",
    "InvalidRateError",
    "SUPPORTED_CURRENCY_CODES",
    "ZERO_DECIMAL_CURRENCIES",
    "Currency",
]

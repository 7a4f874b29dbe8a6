# src/fxbench/domain/errors.py
"""
Domain Errors - Programmer Error Exceptions

Input and transport problems are returned as data (see fxbench.domain.models).
The exceptions here are reserved for misconfiguration and invalid call
parameters that a caller must fix in code.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class InvalidRateError(DomainError):
    """Raised when a rate value is invalid (e.g., negative, zero or not finite)."""
    pass


class InvalidLoadTestParameters(DomainError, ValueError):
    """Raised when a load test is started with a non-positive rate, concurrency or duration."""
    pass

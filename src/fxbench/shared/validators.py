# src/fxbench/shared/validators.py
"""
Input Validation - Currency Conversion Input Pipeline

This module validates and normalizes the raw (amount, from, to) triple handed
to the engine by its callers. Values arrive untyped; the pipeline below is the
only place that inspects them, and everything downstream works with the
resulting ValidationSuccess.

Checks run in a fixed order and stop at the first failure:
1. amount presence and type (strings are parsed, bool/objects rejected)
2. finiteness (NaN, +inf, -inf)
3. positivity
4. lower bound
5. upper bound (largest exactly representable integer)
6. currency parameter types
7. security scan for injection patterns
8. code format (length, case, letters)
9. allow-list membership

It also keeps the bot token format check used by the settings layer.

Files that USE this module:
- fxbench.application.conversion_service (ConversionEngine validates every call)
- fxbench.config.settings (validate_bot_token in a field validator)
- tests.test_validators (unit tests)

Files that this module USES:
- fxbench.domain.models (ValidationFailure, ValidationSuccess, ErrorKind, Severity)
- fxbench.domain.currencies (SUPPORTED_CURRENCY_CODES)
"""
from __future__ import annotations

import logging
import math
import re
from decimal import Decimal
from fractions import Fraction
from typing import Any, Collection, Optional, Pattern, Tuple, Union

from fxbench.domain.currencies import SUPPORTED_CURRENCY_CODES
from fxbench.domain.models import (
    ErrorKind,
    Severity,
    ValidationFailure,
    ValidationOutcome,
    ValidationSuccess,
)

logger = logging.getLogger(__name__)

# Largest integer a double represents exactly (2**53 - 1)
MAX_SAFE_INTEGER = 9007199254740991
# Smallest positive double; as a lower bound this rejects nothing
MIN_POSITIVE_AMOUNT = 5e-324

_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")

SECURITY_PATTERNS: Tuple[Tuple[Pattern[str], str], ...] = (
    (re.compile(r"[<>]"), "HTML/XML tags"),
    (re.compile(r"['\";]"), "SQL injection characters"),
    (re.compile(r"[&|;`]"), "Command injection characters"),
    (re.compile(r"\.\."), "Path traversal"),
    (re.compile(r"\$\{|\{\{"), "Template injection"),
    (re.compile(r"javascript:", re.IGNORECASE), "JavaScript protocol"),
    (re.compile(r"data:", re.IGNORECASE), "Data protocol"),
    (re.compile(r"vbscript:", re.IGNORECASE), "VBScript protocol"),
)


class _Missing:
    """Marker for an argument that was not supplied at all."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()

_Number = Union[int, float, Fraction, Decimal]


def _fail(kind: ErrorKind, severity: Severity, message: str,
          details: Optional[str] = None) -> ValidationFailure:
    return ValidationFailure(kind=kind, severity=severity, message=message, details=details)


def _type_name(value: Any) -> str:
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    return type(value).__name__


def detect_security_threat(*values: str) -> Optional[str]:
    """
    Scan strings for adversarial patterns.

    Args:
        values: Strings to scan

    Returns:
        Name of the first matching pattern category, or None if all are clean
    """
    for pattern, name in SECURITY_PATTERNS:
        if any(pattern.search(value) for value in values):
            return name
    return None


def _coerce_amount(amount: Any) -> Union[_Number, ValidationFailure]:
    """Map a raw amount to a number, or to a type failure."""
    if amount is MISSING:
        return _fail(ErrorKind.TYPE, Severity.HIGH, "Amount is required",
                     "Amount parameter is missing")
    if amount is None:
        return _fail(ErrorKind.TYPE, Severity.HIGH, "Amount cannot be null",
                     "Amount parameter is null")

    if isinstance(amount, str):
        text = amount.strip()
        # float() also reads Python digit grouping such as "1_000"
        if "_" in text:
            value = math.nan
        else:
            try:
                value = float(text)
            except ValueError:
                value = math.nan
        if math.isnan(value):
            return _fail(ErrorKind.TYPE, Severity.MEDIUM, "Amount must be a valid number",
                         f'Cannot convert string "{amount}" to number')
        return value

    # bool is an int subclass, so it has to be rejected before the numeric branch
    if isinstance(amount, bool):
        return _fail(ErrorKind.TYPE, Severity.MEDIUM, "Amount cannot be a boolean value",
                     f"Boolean value {amount} is not a valid amount")

    if isinstance(amount, int):
        return amount
    if isinstance(amount, (float, Fraction, Decimal)):
        try:
            return float(amount)
        except OverflowError:
            # Too large for a double; keep it exact so the range check reports it
            return amount

    if callable(amount):
        return _fail(ErrorKind.TYPE, Severity.MEDIUM, "Amount cannot be a function",
                     "Function types are not supported for amount")

    return _fail(ErrorKind.TYPE, Severity.MEDIUM, "Amount must be a valid number",
                 f"Object type {_type_name(amount)} is not supported")


class InputValidator:
    """
    Validates raw conversion input and produces a ValidationOutcome.

    Never raises: unexpected internal errors are reported as a
    system/critical ValidationFailure.
    """

    def __init__(
        self,
        min_amount: float = MIN_POSITIVE_AMOUNT,
        max_amount: float = MAX_SAFE_INTEGER,
        allowed_currencies: Collection[str] = SUPPORTED_CURRENCY_CODES,
    ):
        """
        Initialize validator bounds.

        Args:
            min_amount: Smallest accepted amount (default: smallest positive double)
            max_amount: Largest accepted amount (default: 2**53 - 1)
            allowed_currencies: Closed set of recognized currency codes
        """
        self.min_amount = min_amount
        self.max_amount = max_amount
        self.allowed_currencies = frozenset(allowed_currencies)

    def validate(self, amount: Any = MISSING, from_currency: Any = MISSING,
                 to_currency: Any = MISSING) -> ValidationOutcome:
        """
        Validate and normalize a conversion request.

        Args:
            amount: Raw amount (number or numeric string)
            from_currency: Raw source currency code
            to_currency: Raw target currency code

        Returns:
            ValidationSuccess with the numeric amount and normalized codes,
            or the ValidationFailure of the first failing check
        """
        try:
            return self._validate(amount, from_currency, to_currency)
        except Exception as e:
            logger.exception("Validation system error")
            return _fail(ErrorKind.SYSTEM, Severity.CRITICAL, "Validation system error",
                         str(e) or type(e).__name__)

    def _validate(self, amount: Any, from_currency: Any, to_currency: Any) -> ValidationOutcome:
        numeric = _coerce_amount(amount)
        if isinstance(numeric, ValidationFailure):
            return numeric

        failure = self._check_range(numeric)
        if failure:
            return failure

        failure = self._check_currencies(from_currency, to_currency)
        if failure:
            return failure

        return ValidationSuccess(
            sanitized_amount=float(numeric),
            normalized_from_currency=from_currency.upper(),
            normalized_to_currency=to_currency.upper(),
        )

    def _check_range(self, value: _Number) -> Optional[ValidationFailure]:
        if isinstance(value, float) and not math.isfinite(value):
            if math.isnan(value):
                detail = "Amount is NaN (Not a Number)"
            elif value > 0:
                detail = "Amount is positive infinity"
            else:
                detail = "Amount is negative infinity"
            return _fail(ErrorKind.RANGE, Severity.HIGH, "Amount must be a finite number", detail)

        if value <= 0:
            return _fail(ErrorKind.RANGE, Severity.MEDIUM, "Amount must be greater than 0",
                         f"Amount {value} is not positive")

        if value < self.min_amount:
            return _fail(ErrorKind.RANGE, Severity.HIGH, "Amount is too small to process accurately",
                         f"Amount {value} is below minimum of {self.min_amount}")

        if value > self.max_amount:
            return _fail(ErrorKind.RANGE, Severity.HIGH, "Amount is too large to process accurately",
                         f"Amount {value} exceeds maximum of {self.max_amount}")
        return None

    def _check_currencies(self, from_currency: Any, to_currency: Any) -> Optional[ValidationFailure]:
        for label, code in (("From", from_currency), ("To", to_currency)):
            if not isinstance(code, str):
                return _fail(ErrorKind.TYPE, Severity.MEDIUM, "Currency code must be a string",
                             f"{label} currency is {_type_name(code)}, expected string")

        # Runs before the format checks so short malicious input is still flagged
        threat = detect_security_threat(from_currency, to_currency)
        if threat:
            logger.warning("Rejected currency input: %s detected", threat)
            return _fail(ErrorKind.SECURITY, Severity.CRITICAL,
                         "Currency code contains invalid characters",
                         f"Detected {threat} in currency code")

        pairs = (("From", from_currency), ("To", to_currency))
        for label, code in pairs:
            if len(code) != 3:
                return _fail(ErrorKind.FORMAT, Severity.MEDIUM,
                             "Currency code must be exactly 3 characters",
                             f'{label} currency "{code}" has {len(code)} characters')
        for label, code in pairs:
            if code != code.upper():
                return _fail(ErrorKind.FORMAT, Severity.LOW, "Currency code must be uppercase",
                             f'{label} currency "{code}" is not uppercase')
        for label, code in pairs:
            if not _CODE_PATTERN.match(code):
                return _fail(ErrorKind.FORMAT, Severity.MEDIUM, "Invalid currency code format",
                             f'{label} currency "{code}" contains invalid characters')
        for _, code in pairs:
            if code not in self.allowed_currencies:
                return _fail(ErrorKind.FORMAT, Severity.MEDIUM, f"Invalid currency code: {code}",
                             f'Currency "{code}" is not supported')
        return None


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))

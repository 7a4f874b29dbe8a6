# tests/test_validators.py
"""
Validator Tests - Unit Tests for the Conversion Input Pipeline

This module contains unit tests for InputValidator, covering each check of
the pipeline in order: amount type coercion, finiteness, positivity,
bounds, currency types, the security scan, code format and the allow-list.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxbench.shared.validators (InputValidator, detect_security_threat, validate_bot_token)
- fxbench.domain.models (ValidationFailure, ValidationSuccess, ErrorKind, Severity)
- unittest.mock (patch for the internal error path)
- pytest (testing framework)
"""
import math  # NaN and infinity inputs
from decimal import Decimal  # Non-float numeric input
from fractions import Fraction  # Non-float numeric input
from unittest.mock import patch  # Force an unexpected internal error

import pytest  # Testing framework for writing and running tests

from fxbench.domain.models import ErrorKind, Severity, ValidationFailure, ValidationSuccess  # Outcome types
from fxbench.shared.validators import (
    MAX_SAFE_INTEGER,  # Upper bound on amounts
    InputValidator,  # Validator under test
    detect_security_threat,  # Injection pattern scan
    validate_bot_token,  # Bot token format check
)


@pytest.fixture
def validator():
    return InputValidator()


class TestValidInput:
    def test_valid_triple(self, validator):
        outcome = validator.validate(100, "USD", "EUR")

        assert isinstance(outcome, ValidationSuccess)
        assert outcome.valid is True
        assert outcome.sanitized_amount == 100.0
        assert outcome.normalized_from_currency == "USD"
        assert outcome.normalized_to_currency == "EUR"

    def test_numeric_string_is_parsed(self, validator):
        outcome = validator.validate(" 12.5 ", "GBP", "JPY")
        assert outcome.valid
        assert outcome.sanitized_amount == 12.5

    def test_decimal_and_fraction_amounts(self, validator):
        assert validator.validate(Decimal("2.5"), "USD", "EUR").sanitized_amount == 2.5
        assert validator.validate(Fraction(1, 4), "USD", "EUR").sanitized_amount == 0.25

    def test_largest_safe_integer_is_accepted(self, validator):
        assert validator.validate(MAX_SAFE_INTEGER, "USD", "EUR").valid

    def test_tiny_amount_is_accepted_by_default(self, validator):
        assert validator.validate(1e-300, "USD", "EUR").valid

    def test_to_dict(self, validator):
        data = validator.validate(1, "USD", "EUR").to_dict()
        assert data == {
            "valid": True,
            "sanitized_amount": 1.0,
            "normalized_from_currency": "USD",
            "normalized_to_currency": "EUR",
        }


class TestAmountType:
    def test_missing_amount(self, validator):
        outcome = validator.validate()
        assert isinstance(outcome, ValidationFailure)
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.severity == Severity.HIGH
        assert outcome.message == "Amount is required"

    def test_null_amount(self, validator):
        outcome = validator.validate(None, "USD", "EUR")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.severity == Severity.HIGH
        assert outcome.message == "Amount cannot be null"

    def test_unparseable_string(self, validator):
        outcome = validator.validate("abc", "USD", "EUR")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.severity == Severity.MEDIUM
        assert outcome.details == 'Cannot convert string "abc" to number'

    def test_digit_grouping_rejected(self, validator):
        outcome = validator.validate("1_000", "USD", "EUR")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.severity == Severity.MEDIUM
        assert outcome.details == 'Cannot convert string "1_000" to number'

    def test_nan_string_is_a_type_error(self, validator):
        assert validator.validate("nan", "USD", "EUR").kind == ErrorKind.TYPE

    def test_boolean_rejected(self, validator):
        outcome = validator.validate(True, "USD", "EUR")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.message == "Amount cannot be a boolean value"

    def test_function_rejected(self, validator):
        outcome = validator.validate(lambda: 1, "USD", "EUR")
        assert outcome.message == "Amount cannot be a function"

    def test_object_rejected(self, validator):
        outcome = validator.validate([1], "USD", "EUR")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.details == "Object type list is not supported"


class TestAmountRange:
    @pytest.mark.parametrize("amount, detail", [
        (math.nan, "Amount is NaN (Not a Number)"),
        (math.inf, "Amount is positive infinity"),
        (-math.inf, "Amount is negative infinity"),
        ("inf", "Amount is positive infinity"),
    ])
    def test_non_finite(self, validator, amount, detail):
        outcome = validator.validate(amount, "USD", "EUR")
        assert outcome.kind == ErrorKind.RANGE
        assert outcome.severity == Severity.HIGH
        assert outcome.message == "Amount must be a finite number"
        assert outcome.details == detail

    @pytest.mark.parametrize("amount", [0, 0.0, -5, "-1"])
    def test_not_positive(self, validator, amount):
        outcome = validator.validate(amount, "USD", "EUR")
        assert outcome.kind == ErrorKind.RANGE
        assert outcome.severity == Severity.MEDIUM
        assert outcome.message == "Amount must be greater than 0"

    def test_too_large(self, validator):
        outcome = validator.validate(MAX_SAFE_INTEGER + 1, "USD", "EUR")
        assert outcome.kind == ErrorKind.RANGE
        assert outcome.severity == Severity.HIGH
        assert outcome.message == "Amount is too large to process accurately"

    def test_fraction_too_large_for_float(self, validator):
        outcome = validator.validate(Fraction(10**400), "USD", "EUR")
        assert outcome.kind == ErrorKind.RANGE
        assert outcome.severity == Severity.HIGH
        assert outcome.message == "Amount is too large to process accurately"

        outcome = validator.validate(Fraction(-10**400), "USD", "EUR")
        assert outcome.kind == ErrorKind.RANGE
        assert outcome.severity == Severity.MEDIUM

    def test_configured_minimum(self):
        validator = InputValidator(min_amount=0.000001)
        outcome = validator.validate(0.0000001, "USD", "EUR")
        assert outcome.kind == ErrorKind.RANGE
        assert outcome.message == "Amount is too small to process accurately"
        assert validator.validate(0.000001, "USD", "EUR").valid

    def test_range_checked_before_currencies(self, validator):
        assert validator.validate(-1, "bad", None).kind == ErrorKind.RANGE


class TestCurrencyCodes:
    def test_non_string_from(self, validator):
        outcome = validator.validate(1, 123, "EUR")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.details == "From currency is int, expected string"

    def test_missing_to(self, validator):
        outcome = validator.validate(1, "USD")
        assert outcome.kind == ErrorKind.TYPE
        assert outcome.details == "To currency is missing, expected string"

    def test_wrong_length(self, validator):
        outcome = validator.validate(1, "US", "EUR")
        assert outcome.kind == ErrorKind.FORMAT
        assert outcome.severity == Severity.MEDIUM
        assert outcome.message == "Currency code must be exactly 3 characters"

    def test_lowercase_is_low_severity(self, validator):
        outcome = validator.validate(1, "usd", "EUR")
        assert outcome.kind == ErrorKind.FORMAT
        assert outcome.severity == Severity.LOW
        assert outcome.message == "Currency code must be uppercase"

    def test_non_letters(self, validator):
        outcome = validator.validate(1, "U$D", "EUR")
        assert outcome.kind == ErrorKind.FORMAT
        assert outcome.message == "Invalid currency code format"

    def test_unknown_code(self, validator):
        outcome = validator.validate(1, "USD", "XYZ")
        assert outcome.kind == ErrorKind.FORMAT
        assert outcome.message == "Invalid currency code: XYZ"

    def test_custom_allow_list(self):
        validator = InputValidator(allowed_currencies={"USD", "EUR"})
        assert validator.validate(1, "USD", "EUR").valid
        assert validator.validate(1, "USD", "GBP").message == "Invalid currency code: GBP"

    def test_same_currency_is_valid(self, validator):
        assert validator.validate(1, "EUR", "EUR").valid


class TestSecurityScan:
    @pytest.mark.parametrize("code, threat", [
        ("<script>", "HTML/XML tags"),
        ("US;", "SQL injection characters"),
        ("US'", "SQL injection characters"),
        ("a|b", "Command injection characters"),
        ("../", "Path traversal"),
        ("${x}", "Template injection"),
        ("javascript:alert", "JavaScript protocol"),
        ("DATA:x", "Data protocol"),
        ("vbscript:x", "VBScript protocol"),
    ])
    def test_patterns(self, validator, code, threat):
        outcome = validator.validate(1, code, "EUR")
        assert outcome.kind == ErrorKind.SECURITY
        assert outcome.severity == Severity.CRITICAL
        assert outcome.details == f"Detected {threat} in currency code"

    @pytest.mark.parametrize("code, threat", [
        ("<b>", "HTML/XML tags"),
        ("EU'", "SQL injection characters"),
        ("a&b", "Command injection characters"),
        ("{{x}}", "Template injection"),
        ("data:", "Data protocol"),
    ])
    def test_patterns_in_target_currency(self, validator, code, threat):
        outcome = validator.validate(1, "USD", code)
        assert outcome.kind == ErrorKind.SECURITY
        assert outcome.severity == Severity.CRITICAL
        assert outcome.details == f"Detected {threat} in currency code"

    def test_scan_runs_before_length_check(self, validator):
        assert validator.validate(1, "USD", "<>").kind == ErrorKind.SECURITY

    def test_detect_security_threat_clean(self):
        assert detect_security_threat("USD", "EUR") is None


class TestSystemError:
    def test_unexpected_error_becomes_system_failure(self, validator):
        with patch("fxbench.shared.validators._coerce_amount", side_effect=RuntimeError("boom")):
            outcome = validator.validate(1, "USD", "EUR")

        assert outcome.kind == ErrorKind.SYSTEM
        assert outcome.severity == Severity.CRITICAL
        assert outcome.message == "Validation system error"
        assert outcome.details == "boom"


class TestBotTokenValidation:
    def test_valid_token(self):
        assert validate_bot_token("123456789:" + "A" * 35)

    def test_invalid_tokens(self):
        assert not validate_bot_token("")
        assert not validate_bot_token("123:short")
        assert not validate_bot_token("abcdefghi:" + "A" * 35)

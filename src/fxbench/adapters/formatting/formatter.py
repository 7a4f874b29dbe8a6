# src/fxbench/adapters/formatting/formatter.py
"""
Message Formatter - Plain-Text Replies for the Bot

This module turns validation outcomes, conversion outcomes, load-test
results and health reports into the plain-text messages sent by the
Telegram handlers. Amounts use the currency symbol and a fixed number of
decimals; there is no locale-aware formatting.

Files that USE this module:
- fxbench.adapters.telegram.handlers (all replies)
- tests.test_formatter (unit tests)

Files that this module USES:
- fxbench.domain.models (outcome and result types)
- fxbench.domain.currencies (symbols and zero-decimal set)
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fxbench.domain.currencies import ZERO_DECIMAL_CURRENCIES, currency_name, currency_symbol
from fxbench.domain.models import (
    ConversionOutcome,
    LoadTestResult,
    ValidationFailure,
    ValidationOutcome,
)


def format_amount(amount: float, code: str, decimals: Optional[int] = None) -> str:
    """
    Format an amount with its currency symbol.

    Args:
        amount: Value to format
        code: Currency code
        decimals: Fixed decimals; None picks 0 for zero-decimal currencies,
                  8 for tiny amounts and 2 otherwise

    Returns:
        Formatted string, e.g. "$1,234.50" or "¥110"
    """
    if decimals is None:
        if code in ZERO_DECIMAL_CURRENCIES:
            decimals = 0
        elif 0 < amount < 0.01:
            decimals = 8
        else:
            decimals = 2
    return f"{currency_symbol(code)}{amount:,.{decimals}f}"


def _fmt_ms(ms: float) -> str:
    """Format milliseconds as "850ms" or "1.25s"."""
    if ms < 1000:
        return f"{ms:.0f}ms"
    return f"{ms / 1000:.2f}s"


def format_failure(error: str, error_type: Optional[str], severity: Optional[str],
                   details: Optional[str] = None) -> str:
    lines = [f"❌ {error}", f"Type: {error_type or 'unknown'} | Severity: {severity or 'unknown'}"]
    if details:
        lines.append(f"Details: {details}")
    return "\n".join(lines)


def format_validation(outcome: ValidationOutcome) -> str:
    """Render a validation outcome."""
    if isinstance(outcome, ValidationFailure):
        return format_failure(outcome.message, outcome.kind.value, outcome.severity.value,
                              outcome.details)
    return (
        "✅ Input is valid\n"
        f"Amount: {outcome.sanitized_amount}\n"
        f"From: {outcome.normalized_from_currency} ({currency_name(outcome.normalized_from_currency)})\n"
        f"To: {outcome.normalized_to_currency} ({currency_name(outcome.normalized_to_currency)})"
    )


def format_conversion(outcome: ConversionOutcome, amount: Optional[float] = None) -> str:
    """
    Render a conversion outcome.

    Args:
        outcome: Outcome returned by the engine
        amount: Original amount, shown on the left-hand side when given

    Returns:
        Multi-line message
    """
    if not outcome.success or outcome.metadata is None:
        return format_failure(
            outcome.error or "Conversion failed",
            outcome.error_type.value if outcome.error_type else None,
            outcome.severity.value if outcome.severity else None,
        )

    meta = outcome.metadata
    target = format_amount(outcome.result, meta.to_currency, decimals=meta.precision)
    head = f"{format_amount(amount, meta.from_currency)} = {target}" if amount is not None \
        else f"{meta.from_currency} -> {target}"
    lines = [
        f"💱 {head}",
        f"Rate: 1 {meta.from_currency} = {meta.rate} {meta.to_currency}",
        f"Precision: {meta.precision} decimals | Time: {_fmt_ms(outcome.response_time)}",
    ]
    if not meta.rate_found:
        lines.append("⚠️ No rate for this pair, fallback rate 1 was used")
    return "\n".join(lines)


def format_load_test(result: LoadTestResult) -> str:
    """Render load-test statistics."""
    lines = [
        "📊 Load test finished",
        f"Requests: {result.total_requests} "
        f"(✅ {result.successful_requests} / ❌ {result.failed_requests})",
        f"Error rate: {result.error_rate:.2f}%",
        f"Throughput: {result.throughput:.2f} req/s over {_fmt_ms(result.duration)} "
        f"in {result.batches} batches",
        f"Response time: avg {_fmt_ms(result.average_response_time)}, "
        f"min {_fmt_ms(result.min_response_time)}, max {_fmt_ms(result.max_response_time)}",
        f"Percentiles: p95 {_fmt_ms(result.p95_response_time)}, p99 {_fmt_ms(result.p99_response_time)}",
    ]
    if result.errors_by_type:
        breakdown = ", ".join(f"{kind}: {count}" for kind, count in sorted(result.errors_by_type.items()))
        lines.append(f"Errors: {breakdown}")
    return "\n".join(lines)


def format_health_report(report: Dict[str, Any]) -> str:
    """Render the dict returned by HealthChecker.get_overall_health()."""
    if report.get("overall_healthy"):
        header = "✅ System Health Check\n\nAll systems healthy"
    else:
        header = "⚠️ System Health Check\n\nSome issues detected"

    lines = [header, ""]
    for name, check in report.get("checks", {}).items():
        emoji = "✅" if check.get("healthy") else "❌"
        lines.append(f"{emoji} {name.replace('_', ' ').title()}: {check.get('message', '')}")
    lines.append("")
    lines.append(f"🕐 Checked at: {report.get('timestamp', 'unknown')}")
    return "\n".join(lines)

# src/fxbench/application/rates.py
"""
Rates - Static Rate Table and Precision Rules

This module contains the pure lookup and arithmetic used by a conversion:
- RateTable: immutable nested mapping source code -> target code -> rate
- resolve_precision: magnitude- and currency-aware decimal places
- round_to_precision / convert_amount: round-half-up at a given precision

A missing pair is not an error: rate() answers 1.0 so the pipeline keeps
going, and lookup()/has_pair() let callers tell that fallback apart from a
real parity rate.

Files that USE this module:
- fxbench.application.conversion_service (rate lookup, precision, rounding)
- fxbench.application.health (rate table check)
- tests.test_rates (unit tests)

Files that this module USES:
- fxbench.domain.currencies (ZERO_DECIMAL_CURRENCIES)
- fxbench.domain.errors (InvalidRateError)
"""
from __future__ import annotations

import json
import logging
import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from pathlib import Path
from types import MappingProxyType
from typing import Collection, Dict, Iterator, Mapping, Optional, Tuple, Union

from fxbench.domain.currencies import ZERO_DECIMAL_CURRENCIES
from fxbench.domain.errors import InvalidRateError

logger = logging.getLogger(__name__)

# Neutral rate answered for pairs missing from the table
FALLBACK_RATE = 1.0

MAX_PRECISION = 8

DEFAULT_RATES: Dict[str, Dict[str, float]] = {
    "USD": {
        "EUR": 0.85235, "GBP": 0.73456, "JPY": 110.234, "CAD": 1.25678,
        "AUD": 1.34567, "CHF": 0.91234, "CNY": 6.45678, "INR": 74.5678,
        "BRL": 5.23456, "KRW": 1180.234, "MXN": 20.1234, "SGD": 1.35678,
        "HKD": 7.78901, "SEK": 8.56789, "NOK": 8.6789, "DKK": 6.34567,
    },
    "EUR": {
        "USD": 1.17345, "GBP": 0.86234, "JPY": 129.345, "CAD": 1.47456,
        "AUD": 1.5789, "CHF": 1.07123, "CNY": 7.5789, "INR": 87.4567,
        "BRL": 6.14567, "KRW": 1384.567, "MXN": 23.6789, "SGD": 1.59234,
        "HKD": 9.13456, "SEK": 10.0567, "NOK": 10.1789, "DKK": 7.44567,
    },
    "GBP": {
        "USD": 1.36123, "EUR": 1.15987, "JPY": 150.123, "CAD": 1.71234,
        "AUD": 1.83456, "CHF": 1.24567, "CNY": 8.79012, "INR": 101.456,
        "BRL": 7.13456, "KRW": 1607.89, "MXN": 27.4567, "SGD": 1.84567,
        "HKD": 10.6012, "SEK": 11.6789, "NOK": 11.8012, "DKK": 8.64567,
    },
    "JPY": {
        "USD": 0.00907, "EUR": 0.00773, "GBP": 0.00665, "CAD": 0.0114,
        "AUD": 0.01221, "CHF": 0.00828, "CNY": 0.05856, "INR": 0.67612,
        "BRL": 0.04751, "KRW": 10.7123, "MXN": 0.18267, "SGD": 0.01229,
        "HKD": 0.07067, "SEK": 0.07778, "NOK": 0.07856, "DKK": 0.05756,
    },
}


def _to_rate(source: str, target: str, value: object) -> float:
    try:
        rate = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as e:
        raise InvalidRateError(f"Rate {source}->{target} is not a number: {value!r}") from e
    if not math.isfinite(rate) or rate <= 0:
        raise InvalidRateError(f"Rate {source}->{target} must be positive and finite, got {rate}")
    return rate


class RateTable:
    """Read-only exchange rate table, built once and shared by all conversions."""

    def __init__(self, rates: Mapping[str, Mapping[str, object]]):
        """
        Build an immutable table.

        Args:
            rates: Mapping source code -> target code -> positive rate

        Raises:
            InvalidRateError: If any rate is not a positive finite number
        """
        frozen = {}
        for source, targets in rates.items():
            src = source.upper()
            frozen[src] = MappingProxyType(
                {target.upper(): _to_rate(src, target, value) for target, value in targets.items()}
            )
        self._rates: Mapping[str, Mapping[str, float]] = MappingProxyType(frozen)

    @classmethod
    def default(cls) -> RateTable:
        """The built-in USD/EUR/GBP/JPY table."""
        return cls(DEFAULT_RATES)

    def lookup(self, from_currency: str, to_currency: str) -> Optional[float]:
        """Rate for a pair, or None if the table has no entry for it."""
        targets = self._rates.get(from_currency)
        if targets is None:
            return None
        return targets.get(to_currency)

    def has_pair(self, from_currency: str, to_currency: str) -> bool:
        return self.lookup(from_currency, to_currency) is not None

    def rate(self, from_currency: str, to_currency: str) -> float:
        """
        Rate for a pair, falling back to 1.0 when the pair is missing.

        Args:
            from_currency: Normalized source code
            to_currency: Normalized target code

        Returns:
            Units of to_currency per unit of from_currency
        """
        found = self.lookup(from_currency, to_currency)
        return FALLBACK_RATE if found is None else found

    def sources(self) -> Tuple[str, ...]:
        return tuple(self._rates)

    def pairs(self) -> Iterator[Tuple[str, str, float]]:
        for source, targets in self._rates.items():
            for target, rate in targets.items():
                yield source, target, rate

    def as_dict(self) -> Dict[str, Dict[str, float]]:
        return {source: dict(targets) for source, targets in self._rates.items()}

    def __len__(self) -> int:
        return sum(len(targets) for targets in self._rates.values())

    def __repr__(self) -> str:
        return f"RateTable(sources={len(self._rates)}, pairs={len(self)})"


def load_rate_table(path: Union[str, Path]) -> RateTable:
    """
    Load a rate table from a JSON file shaped like {"USD": {"EUR": 0.85}}.

    Args:
        path: Path to the JSON file

    Returns:
        RateTable built from the file

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidRateError: If the file is not a JSON object of objects or holds a bad rate
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidRateError(f"Rate table {path} is not valid JSON: {e}") from e

    if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
        raise InvalidRateError(f"Rate table {path} must map currency codes to objects of rates")

    table = RateTable(data)
    logger.info("Loaded rate table from %s: %d pairs", path, len(table))
    return table


def resolve_precision(amount: float, from_currency: str, to_currency: str,
                      zero_decimal: Collection[str] = ZERO_DECIMAL_CURRENCIES) -> int:
    """
    Decimal places for a conversion result, from the input amount's magnitude.

    Bands: < 0.01 -> 8, < 1 -> 6, < 100 -> 4, otherwise 2. Two places are
    dropped (floored at 0) when either side is a zero-decimal currency.

    Args:
        amount: Validated input amount (before conversion)
        from_currency: Normalized source code
        to_currency: Normalized target code
        zero_decimal: Codes of currencies without a fractional unit

    Returns:
        Precision in [0, 8]
    """
    if amount < 0.01:
        precision = MAX_PRECISION
    elif amount < 1:
        precision = 6
    elif amount < 100:
        precision = 4
    else:
        precision = 2

    if from_currency in zero_decimal or to_currency in zero_decimal:
        precision = max(0, precision - 2)
    return precision


def _decimal(value: float) -> Decimal:
    return Decimal(repr(float(value)))


def round_to_precision(value: float, precision: int) -> float:
    """
    Round half-up to the given number of decimals.

    Works on the shortest decimal form of the float, so 85.235 rounds to 85.24
    regardless of its binary representation. Idempotent on rounded values.
    """
    return convert_amount(value, 1.0, precision)


def convert_amount(amount: float, rate: float, precision: int) -> float:
    """Multiply amount by rate in decimal arithmetic and round half-up."""
    with localcontext() as ctx:
        ctx.prec = 50
        product = _decimal(amount) * _decimal(rate)
        return float(product.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP))

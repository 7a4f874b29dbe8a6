# src/fxbench/domain/currencies.py
"""
Currencies - Recognized Currency Codes and Display Metadata

This module holds the closed allow-list of currency codes accepted by the
input validator, the zero-decimal currencies used by the precision resolver,
and name/symbol metadata used when rendering bot replies.

Files that USE this module:
- fxbench.shared.validators (allow-list check)
- fxbench.application.rates (zero-decimal precision adjustment)
- fxbench.config.settings (validates the stress-test sample pair)
- fxbench.adapters.formatting.formatter (symbols and names)

Files that this module USES:
- None (pure domain data)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Currency:
    """Display metadata for a currency."""
    code: str
    name: str
    symbol: str


SUPPORTED_CURRENCY_CODES: frozenset[str] = frozenset({
    "USD", "EUR", "GBP", "JPY", "CAD", "AUD", "CHF", "CNY", "INR", "BRL",
    "KRW", "MXN", "SGD", "HKD", "SEK", "NOK", "DKK", "PLN", "CZK", "HUF",
    "RUB", "ZAR", "TRY", "ILS", "AED", "SAR", "QAR", "KWD", "BHD", "OMR",
    "JOD", "LBP", "EGP", "MAD", "TND", "DZD", "LYD", "SDG", "ETB", "KES",
    "UGX", "TZS", "RWF", "MWK", "ZMW", "BWP", "SZL", "LSL", "NAD", "MZN",
    "AOA", "XAF", "XOF", "CDF", "GHS", "NGN", "XPF", "FJD", "TOP", "WST",
    "VUV", "SBD", "PGK", "NCL", "TVD", "KID", "NZD",
})

# Currencies without a fractional unit; results touching them lose two digits of precision
ZERO_DECIMAL_CURRENCIES: frozenset[str] = frozenset({"JPY"})

CURRENCIES: dict[str, Currency] = {
    c.code: c
    for c in (
        Currency("USD", "US Dollar", "$"),
        Currency("EUR", "Euro", "€"),
        Currency("GBP", "British Pound", "£"),
        Currency("JPY", "Japanese Yen", "¥"),
        Currency("CAD", "Canadian Dollar", "C$"),
        Currency("AUD", "Australian Dollar", "A$"),
        Currency("CHF", "Swiss Franc", "CHF"),
        Currency("CNY", "Chinese Yuan", "¥"),
        Currency("INR", "Indian Rupee", "₹"),
        Currency("BRL", "Brazilian Real", "R$"),
        Currency("MXN", "Mexican Peso", "$"),
        Currency("KRW", "South Korean Won", "₩"),
        Currency("SGD", "Singapore Dollar", "S$"),
        Currency("HKD", "Hong Kong Dollar", "HK$"),
        Currency("SEK", "Swedish Krona", "kr"),
        Currency("NOK", "Norwegian Krone", "kr"),
        Currency("DKK", "Danish Krone", "kr"),
        Currency("PLN", "Polish Zloty", "zł"),
        Currency("CZK", "Czech Koruna", "Kč"),
        Currency("HUF", "Hungarian Forint", "Ft"),
        Currency("ZAR", "South African Rand", "R"),
        Currency("NZD", "New Zealand Dollar", "NZ$"),
    )
}


def get_currency(code: str) -> Optional[Currency]:
    """Return display metadata for a code, or None if none is registered."""
    return CURRENCIES.get(code)


def currency_symbol(code: str) -> str:
    """Symbol for a currency code, falling back to the code itself."""
    currency = CURRENCIES.get(code)
    return currency.symbol if currency else code


def currency_name(code: str) -> str:
    """Human-readable name for a currency code, falling back to the code itself."""
    currency = CURRENCIES.get(code)
    return currency.name if currency else code

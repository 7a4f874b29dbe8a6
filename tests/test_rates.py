# tests/test_rates.py
"""
Rates Tests - Unit Tests for the Rate Table and Precision Rules

This module contains unit tests for RateTable lookups and the missing-pair
fallback, JSON rate table loading, precision bands and half-up rounding.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- fxbench.application.rates (RateTable, load_rate_table, resolve_precision, rounding)
- fxbench.domain.errors (InvalidRateError)
- pytest (testing framework)
"""
import json  # Write rate table files

import pytest  # Testing framework for writing and running tests

from fxbench.application.rates import (
    FALLBACK_RATE,  # Rate used for missing pairs
    RateTable,  # Rate table under test
    convert_amount,  # Multiply and round
    load_rate_table,  # JSON loader
    resolve_precision,  # Precision bands
    round_to_precision,  # Half-up rounding
)
from fxbench.domain.errors import DomainError, InvalidRateError  # Rate table errors


class TestRateTable:
    def test_default_table(self):
        table = RateTable.default()
        assert table.rate("USD", "EUR") == 0.85235
        assert table.rate("USD", "JPY") == 110.234
        assert set(table.sources()) == {"USD", "EUR", "GBP", "JPY"}

    def test_missing_pair_falls_back(self):
        table = RateTable.default()
        assert table.lookup("USD", "USD") is None
        assert not table.has_pair("USD", "USD")
        assert table.rate("USD", "USD") == FALLBACK_RATE
        assert table.rate("CAD", "EUR") == FALLBACK_RATE

    def test_explicit_parity_is_found(self):
        table = RateTable({"USD": {"USD": 1.0}})
        assert table.lookup("USD", "USD") == 1.0
        assert table.has_pair("USD", "USD")

    def test_codes_are_uppercased(self):
        table = RateTable({"usd": {"eur": 0.9}})
        assert table.rate("USD", "EUR") == 0.9

    def test_len_counts_pairs(self):
        table = RateTable({"USD": {"EUR": 0.9, "GBP": 0.8}, "EUR": {"USD": 1.1}})
        assert len(table) == 3
        assert sorted(table.pairs()) == [("EUR", "USD", 1.1), ("USD", "EUR", 0.9), ("USD", "GBP", 0.8)]

    def test_source_mapping_is_copied(self):
        source = {"USD": {"EUR": 0.9}}
        table = RateTable(source)
        source["USD"]["EUR"] = 2.0
        assert table.rate("USD", "EUR") == 0.9

    def test_table_is_read_only(self):
        table = RateTable.default()
        with pytest.raises(TypeError):
            table._rates["USD"]["EUR"] = 2.0
        exported = table.as_dict()
        exported["USD"]["EUR"] = 2.0
        assert table.rate("USD", "EUR") == 0.85235

    @pytest.mark.parametrize("bad", [0, -1.5, float("nan"), float("inf"), "abc", None])
    def test_invalid_rate_rejected(self, bad):
        with pytest.raises(InvalidRateError):
            RateTable({"USD": {"EUR": bad}})

    def test_invalid_rate_error_is_domain_error(self):
        assert issubclass(InvalidRateError, DomainError)


class TestLoadRateTable:
    def test_load_valid_file(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps({"USD": {"EUR": 0.9, "CHF": 0.88}}), encoding="utf-8")

        table = load_rate_table(path)
        assert table.rate("USD", "CHF") == 0.88
        assert len(table) == 2

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(InvalidRateError):
            load_rate_table(path)

    @pytest.mark.parametrize("payload", [[1, 2], {"USD": 0.9}])
    def test_wrong_shape(self, tmp_path, payload):
        path = tmp_path / "rates.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(InvalidRateError):
            load_rate_table(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_rate_table(tmp_path / "missing.json")


class TestResolvePrecision:
    @pytest.mark.parametrize("amount, expected", [
        (0.0000001, 8),
        (0.0005, 8),
        (0.5, 6),
        (50, 4),
        (100, 2),
        (5_000_000, 2),
    ])
    def test_bands(self, amount, expected):
        assert resolve_precision(amount, "USD", "EUR") == expected

    @pytest.mark.parametrize("amount, expected", [
        (0.0005, 6),
        (0.001, 6),
        (50, 2),
        (100, 0),
    ])
    def test_zero_decimal_currency(self, amount, expected):
        assert resolve_precision(amount, "USD", "JPY") == expected
        assert resolve_precision(amount, "JPY", "USD") == expected


class TestRounding:
    def test_half_up(self):
        assert round_to_precision(85.235, 2) == 85.24
        assert round_to_precision(2.5, 0) == 3.0
        assert round_to_precision(0.125, 2) == 0.13

    def test_idempotent(self):
        for value, precision in [(85.235, 2), (0.110234, 6), (1234.56789, 4)]:
            once = round_to_precision(value, precision)
            assert round_to_precision(once, precision) == once

    def test_convert_amount(self):
        assert convert_amount(100, 0.85235, 2) == 85.24
        assert convert_amount(0.001, 110.234, 6) == 0.110234
        assert convert_amount(1, 129.345, 0) == 129.0

"""Regression tests for decimal money helpers."""

from __future__ import annotations

from decimal import Decimal

import pytest

from tradejournal.domain.money import (
    MONEY_INPUT_LIMIT,
    money_coerce_decimal,
    money_format_compact,
    money_format_usd,
    money_is_valid_input,
    money_quantize,
    money_round_balance,
    money_round_price,
    money_round_quantity,
)


def test_money_coerce_decimal_accepts_numbers_and_rejects_garbage() -> None:
    """Coerce loose numeric inputs and reject non-finite or non-numeric ones.

    Returns:
        None: Assertions validate coercion results.

    Raises:
        AssertionError: Raised when coercion deviates.
    """

    assert money_coerce_decimal(0.1) == Decimal("0.1")
    assert money_coerce_decimal(" 2.5 ") == Decimal("2.5")
    assert money_coerce_decimal(7) == Decimal("7")
    assert money_coerce_decimal(Decimal("1.25")) == Decimal("1.25")
    for rejected in (None, True, "abc", "", float("nan"), float("inf"), "Infinity", [1]):
        assert money_coerce_decimal(rejected) is None


def test_money_rounding_uses_storage_precision() -> None:
    """Round quantities and balances to 6 places and prices to 8 places half-up.

    Returns:
        None: Assertions validate rounding.

    Raises:
        AssertionError: Raised when precision or rounding mode changes.
    """

    assert money_round_quantity(Decimal("1.0000005")) == Decimal("1.000001")
    assert money_round_balance(Decimal("55.7000004")) == Decimal("55.700000")
    assert money_round_price(Decimal("0.666666665")) == Decimal("0.66666667")
    assert money_quantize(Decimal("2.345"), 2) == Decimal("2.35")

    with pytest.raises(ValueError):
        money_quantize(Decimal("1"), -1)


def test_money_formatting_renders_dollars() -> None:
    """Render signed and compact dollar strings.

    Returns:
        None: Assertions validate rendered text.

    Raises:
        AssertionError: Raised when formatting changes.
    """

    assert money_format_usd(Decimal("9.3")) == "$9.30"
    assert money_format_usd(Decimal("-1.25")) == "-$1.25"
    assert money_format_usd(Decimal("6.25"), signed=True) == "+$6.25"
    assert money_format_usd(Decimal("0.75"), 8) == "$0.75000000"
    assert money_format_compact(Decimal("1500")) == "1.50K"
    assert money_format_compact(Decimal("2500000")) == "2.50M"
    assert money_format_compact(Decimal("3000000000")) == "3.00B"
    assert money_format_compact(Decimal("12")) == "12.00"


def test_money_quantize_handles_large_magnitudes() -> None:
    """Quantize values whose digits exceed the default decimal precision.

    Returns:
        None: Assertions validate exact large-magnitude rounding.

    Raises:
        AssertionError: Raised when large values fail to quantize.
    """

    assert money_quantize(Decimal("1e25"), 8) == Decimal("1e25")
    assert money_round_balance(Decimal("10000000000000000000000065.0000005")) == Decimal("10000000000000000000000065.000001")
    assert money_round_price(Decimal("123456789012345678901.123456789")) == Decimal("123456789012345678901.12345679")


def test_money_is_valid_input_bounds() -> None:
    """Accept strictly positive amounts below the input limit only.

    Returns:
        None: Assertions validate the accepted range.

    Raises:
        AssertionError: Raised when the accepted range changes.
    """

    assert money_is_valid_input(Decimal("0.000001"))
    assert money_is_valid_input(Decimal("1e29"))
    assert not money_is_valid_input(MONEY_INPUT_LIMIT)
    assert not money_is_valid_input(Decimal("0"))
    assert not money_is_valid_input(Decimal("-1"))
    assert not money_is_valid_input(None)

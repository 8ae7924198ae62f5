"""Decimal money and quantity helpers shared by ledger and analytics layers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext


QUANTITY_PLACES = 6
BALANCE_PLACES = 6
PRICE_PLACES = 8
DISPLAY_MONEY_PLACES = 2

DEFAULT_TRANSACTION_FEE_USD = Decimal("4.3")
POSITION_DUST_EPSILON = Decimal("0.0000001")
MONEY_INPUT_LIMIT = Decimal("1e30")

_ZERO = Decimal("0")


def money_quantize(value: Decimal, places: int) -> Decimal:
    """Round a decimal value half-up to a fixed number of decimal places.

    Args:
        value: Decimal value to round.
        places: Number of fractional digits to keep.

    Returns:
        Decimal: Rounded value.

    Raises:
        ValueError: Raised when places is negative.
    """

    if places < 0:
        raise ValueError("places must not be negative")
    with localcontext() as context:
        # quantize needs every integer digit plus the requested fraction
        context.prec = max(context.prec, value.adjusted() + places + 2)
        return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def money_round_quantity(value: Decimal) -> Decimal:
    """Round a position or trade quantity to storage precision."""

    return money_quantize(value, QUANTITY_PLACES)


def money_round_balance(value: Decimal) -> Decimal:
    """Round a cash balance or gross trade value to storage precision."""

    return money_quantize(value, BALANCE_PLACES)


def money_round_price(value: Decimal) -> Decimal:
    """Round a price or average cost to storage precision."""

    return money_quantize(value, PRICE_PLACES)


def money_round_display(value: Decimal) -> Decimal:
    """Round a value to cents for reporting."""

    return money_quantize(value, DISPLAY_MONEY_PLACES)


def money_coerce_decimal(value: object) -> Decimal | None:
    """Convert a loosely typed numeric input into a finite decimal.

    Strings, ints, floats and decimals are accepted. Floats are converted
    through their shortest repr so `0.1` becomes `Decimal("0.1")`.

    Args:
        value: Candidate numeric input.

    Returns:
        Decimal | None: Finite decimal value, or None when the input is absent,
        boolean, unparsable, NaN or infinite.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        candidate = value
    elif isinstance(value, (int, float, str)):
        try:
            candidate = Decimal(str(value).strip())
        except InvalidOperation:
            return None
    else:
        return None

    if not candidate.is_finite():
        return None
    return candidate


def money_is_positive(value: Decimal | None) -> bool:
    """Return whether a coerced value is present and strictly positive."""

    return value is not None and value > _ZERO


def money_is_valid_input(value: Decimal | None) -> bool:
    """Return whether a command amount is strictly positive and below `MONEY_INPUT_LIMIT`."""

    return money_is_positive(value) and value < MONEY_INPUT_LIMIT


def money_format_usd(value: Decimal, places: int = DISPLAY_MONEY_PLACES, signed: bool = False) -> str:
    """Render a decimal amount as a dollar string.

    Args:
        value: Amount to render.
        places: Fractional digits to show.
        signed: Prefix non-negative values with `+` when True.

    Returns:
        str: Rendered amount such as `$9.30`, `-$1.25` or `+$6.25`.

    Raises:
        ValueError: Raised when places is negative.
    """

    rounded = money_quantize(value, places)
    magnitude = f"${abs(rounded):.{places}f}"
    if rounded < _ZERO:
        return f"-{magnitude}"
    if signed:
        return f"+{magnitude}"
    return magnitude


def money_format_compact(value: Decimal) -> str:
    """Render a large amount such as a market cap in compact K/M/B notation."""

    magnitude = abs(value)
    for threshold, suffix in (
        (Decimal("1000000000"), "B"),
        (Decimal("1000000"), "M"),
        (Decimal("1000"), "K"),
    ):
        if magnitude >= threshold:
            return f"{money_round_display(value / threshold):.2f}{suffix}"
    return f"{money_round_display(value):,.2f}"


__all__ = [
    "BALANCE_PLACES",
    "DEFAULT_TRANSACTION_FEE_USD",
    "DISPLAY_MONEY_PLACES",
    "MONEY_INPUT_LIMIT",
    "POSITION_DUST_EPSILON",
    "PRICE_PLACES",
    "QUANTITY_PLACES",
    "money_coerce_decimal",
    "money_format_compact",
    "money_format_usd",
    "money_is_positive",
    "money_is_valid_input",
    "money_quantize",
    "money_round_balance",
    "money_round_display",
    "money_round_price",
    "money_round_quantity",
]

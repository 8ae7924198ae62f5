"""Deterministic human-readable text derived from instrument summaries."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from tradejournal.domain.money import PRICE_PLACES, QUANTITY_PLACES, money_format_usd, money_quantize

from .summary import InstrumentSummary


_ZERO = Decimal("0")
_NARRATIVE_QUANTITY_PLACES = 4
_SEPARATOR = " · "


def analytics_format_date_utc(ts_ms: int | None) -> str:
    """Render an epoch-millisecond timestamp as a UTC calendar date."""

    if ts_ms is None:
        return "—"
    return datetime.fromtimestamp(ts_ms // 1000, tz=timezone.utc).date().isoformat()


def analytics_format_datetime_utc(ts_ms: int | None) -> str:
    """Render an epoch-millisecond timestamp as a UTC minute-precision datetime."""

    if ts_ms is None:
        return "—"
    return datetime.fromtimestamp(ts_ms // 1000, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def analytics_build_narrative(summary: InstrumentSummary) -> str:
    """Build the one-line narrative for an instrument summary.

    Example: `Started 2026-01-02 · Holding 15.0000 @ $0.75000000 · Last sell 2026-01-03`.

    Args:
        summary: Instrument replay summary.

    Returns:
        str: Deterministic narrative line.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    parts = [
        f"Started {analytics_format_date_utc(summary.first_ts_ms)}" if summary.total_buys > 0 else "No buys yet",
    ]
    if summary.net_quantity > _ZERO:
        held_quantity = money_quantize(summary.net_quantity, _NARRATIVE_QUANTITY_PLACES)
        average_cost = summary.average_cost if summary.average_cost is not None else _ZERO
        parts.append(f"Holding {held_quantity:.{_NARRATIVE_QUANTITY_PLACES}f} @ {money_format_usd(average_cost, PRICE_PLACES)}")
    else:
        parts.append("No position")
    if summary.last_action is not None:
        parts.append(f"Last {summary.last_action.value} {analytics_format_date_utc(summary.last_ts_ms)}")
    return _SEPARATOR.join(parts)


def analytics_build_journal_entry(summary: InstrumentSummary) -> str:
    """Build the longer first-person journal paragraph for one instrument."""

    verb = "buying" if summary.total_buys > 0 else "watching"
    if summary.net_quantity > _ZERO:
        average_cost = summary.average_cost if summary.average_cost is not None else _ZERO
        holding = (
            f"Currently holding {money_quantize(summary.net_quantity, QUANTITY_PLACES):.{QUANTITY_PLACES}f} "
            f"with an average cost of {money_format_usd(average_cost, PRICE_PLACES)}."
        )
    else:
        holding = "Currently no position."
    return (
        f"I started {verb} {summary.label} on {analytics_format_datetime_utc(summary.first_ts_ms)}. "
        f"{summary.total_buys} buys and {summary.total_sells} sells so far. "
        f"{holding} "
        f"Realized PnL: {money_format_usd(summary.realized_pnl, signed=True)}."
    )


__all__ = [
    "analytics_build_journal_entry",
    "analytics_build_narrative",
    "analytics_format_date_utc",
    "analytics_format_datetime_utc",
]

"""Read-only trade history summaries built by average-cost replay."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from tradejournal.domain import HistoryEvent, TradeSide
from tradejournal.domain.money import money_quantize, money_round_display
from tradejournal.ledger import (
    PositionState,
    position_apply_event,
    position_event_from_history,
    position_sort_chronological,
)


_ZERO = Decimal("0")
WIN_RATE_PLACES = 4


@dataclass(frozen=True)
class InstrumentSummary:
    """Replay summary for one instrument.

    Attributes:
        mint: Instrument identifier.
        label: Display label (symbol, name, or shortened mint).
        total_buys: Number of buy events.
        total_sells: Number of sell events.
        bought_quantity: Sum of bought quantities.
        sold_quantity: Sum of sold quantities.
        net_quantity: Quantity held after replay.
        average_cost: Running average cost, or None when nothing was ever bought.
        realized_pnl: Realized profit and loss rounded to cents.
        first_ts_ms: Timestamp of the first event, if any.
        last_ts_ms: Timestamp of the last event, if any.
        last_action: Side of the last event, if any.
        first_buy_market_cap: Market cap recorded on the first buy that carries one.
        last_sell_market_cap: Market cap recorded on the last sell that carries one.
    """

    mint: str
    label: str
    total_buys: int
    total_sells: int
    bought_quantity: Decimal
    sold_quantity: Decimal
    net_quantity: Decimal
    average_cost: Decimal | None
    realized_pnl: Decimal
    first_ts_ms: int | None
    last_ts_ms: int | None
    last_action: TradeSide | None
    first_buy_market_cap: Decimal | None = None
    last_sell_market_cap: Decimal | None = None


@dataclass(frozen=True)
class WinRateSummary:
    """Win/loss classification over every sell in the history.

    Attributes:
        winning_sells: Sells whose realized PnL was strictly positive.
        total_sells: All sells.
        win_rate: `winning_sells / total_sells`, zero when there are no sells.
    """

    winning_sells: int
    total_sells: int
    win_rate: Decimal


def analytics_instrument_label(mint: str, events: Iterable[HistoryEvent] = ()) -> str:
    """Resolve a display label from event symbol, then name, then shortened mint."""

    materialized_events = list(events)
    for event in materialized_events:
        if event.symbol:
            return event.symbol
    for event in materialized_events:
        if event.name:
            return event.name
    if len(mint) <= 8:
        return mint
    return f"{mint[:4]}…{mint[-4:]}"


def analytics_group_by_mint(history: Iterable[HistoryEvent]) -> dict[str, list[HistoryEvent]]:
    """Group history events by mint, each group in chronological order.

    Args:
        history: Stored history, newest first.

    Returns:
        dict[str, list[HistoryEvent]]: Chronological events keyed by mint, in
        order of first appearance.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    grouped_events: dict[str, list[HistoryEvent]] = {}
    for event in position_sort_chronological(history):
        grouped_events.setdefault(event.mint, []).append(event)
    return grouped_events


def analytics_summarize_instrument(history: Iterable[HistoryEvent], mint: str) -> InstrumentSummary:
    """Replay the history of one mint through average-cost accounting.

    Args:
        history: Stored history, newest first; events of other mints are ignored.
        mint: Instrument identifier.

    Returns:
        InstrumentSummary: Replay summary; an empty summary when the mint has no events.

    Raises:
        ValueError: Raised when mint is blank.
    """

    normalized_mint = mint.strip()
    if not normalized_mint:
        raise ValueError("mint must not be blank")

    events = [event for event in position_sort_chronological(history) if event.mint == normalized_mint]
    return _analytics_summarize_chronological(normalized_mint, events)


def analytics_summarize_all(history: Iterable[HistoryEvent]) -> list[InstrumentSummary]:
    """Summarize every mint present in the history, in order of first trade."""

    return [
        _analytics_summarize_chronological(mint, events)
        for mint, events in analytics_group_by_mint(history).items()
    ]


def analytics_aggregate_realized_pnl(history: Iterable[HistoryEvent]) -> Decimal:
    """Sum per-instrument realized PnL without cross-instrument netting.

    Args:
        history: Stored history, newest first.

    Returns:
        Decimal: Sum of each instrument's cent-rounded realized PnL.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return money_round_display(
        sum((summary.realized_pnl for summary in analytics_summarize_all(history)), _ZERO)
    )


def analytics_compute_win_rate(history: Iterable[HistoryEvent]) -> WinRateSummary:
    """Classify each sell as a win when it realized a strictly positive PnL.

    Each sell is measured against the average cost of its instrument at the
    moment of the sell. Buys are never counted.

    Args:
        history: Stored history, newest first.

    Returns:
        WinRateSummary: Win counts and ratio.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    states: dict[str, PositionState] = {}
    winning_sells = 0
    total_sells = 0
    for event in position_sort_chronological(history):
        prior_state = states.get(event.mint, PositionState())
        next_state = position_apply_event(prior_state, position_event_from_history(event))
        states[event.mint] = next_state
        if event.side is TradeSide.SELL:
            total_sells += 1
            if next_state.realized_pnl - prior_state.realized_pnl > _ZERO:
                winning_sells += 1

    win_rate = _ZERO
    if total_sells:
        win_rate = money_quantize(Decimal(winning_sells) / Decimal(total_sells), WIN_RATE_PLACES)
    return WinRateSummary(winning_sells=winning_sells, total_sells=total_sells, win_rate=win_rate)


def _analytics_summarize_chronological(mint: str, events: list[HistoryEvent]) -> InstrumentSummary:
    state = PositionState()
    total_buys = 0
    total_sells = 0
    bought_quantity = _ZERO
    sold_quantity = _ZERO
    first_buy_market_cap: Decimal | None = None
    last_sell_market_cap: Decimal | None = None

    for event in events:
        state = position_apply_event(state, position_event_from_history(event))
        if event.side is TradeSide.BUY:
            total_buys += 1
            bought_quantity += event.quantity
            if first_buy_market_cap is None and event.market_cap is not None:
                first_buy_market_cap = event.market_cap
        else:
            total_sells += 1
            sold_quantity += event.quantity
            if event.market_cap is not None:
                last_sell_market_cap = event.market_cap

    return InstrumentSummary(
        mint=mint,
        label=analytics_instrument_label(mint, events),
        total_buys=total_buys,
        total_sells=total_sells,
        bought_quantity=bought_quantity,
        sold_quantity=sold_quantity,
        net_quantity=state.quantity,
        average_cost=state.average_cost if total_buys > 0 else None,
        realized_pnl=money_round_display(state.realized_pnl),
        first_ts_ms=events[0].ts_ms if events else None,
        last_ts_ms=events[-1].ts_ms if events else None,
        last_action=events[-1].side if events else None,
        first_buy_market_cap=first_buy_market_cap,
        last_sell_market_cap=last_sell_market_cap,
    )


__all__ = [
    "InstrumentSummary",
    "WIN_RATE_PLACES",
    "WinRateSummary",
    "analytics_aggregate_realized_pnl",
    "analytics_compute_win_rate",
    "analytics_group_by_mint",
    "analytics_instrument_label",
    "analytics_summarize_all",
    "analytics_summarize_instrument",
]

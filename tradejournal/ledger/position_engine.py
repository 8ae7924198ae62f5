"""Weighted-average-cost position accounting primitives."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from tradejournal.domain.models import HistoryEvent, TradeSide
from tradejournal.domain.money import money_round_price, money_round_quantity


_ZERO = Decimal("0")


@dataclass(frozen=True)
class PositionEventInput:
    """Trade input contract for average-cost position accounting.

    Attributes:
        side: Trade side.
        price: Trade price, expected positive.
        quantity: Requested trade quantity, expected positive.
    """

    side: TradeSide
    price: Decimal
    quantity: Decimal


@dataclass(frozen=True)
class PositionState:
    """Running position state for one instrument.

    Attributes:
        quantity: Held quantity, never negative.
        average_cost: Weighted average cost of the held quantity.
        realized_pnl: Cumulative realized profit and loss, unrounded.
    """

    quantity: Decimal = _ZERO
    average_cost: Decimal = _ZERO
    realized_pnl: Decimal = _ZERO


def position_apply_event(state: PositionState, event: PositionEventInput) -> PositionState:
    """Apply one buy or sell to a running average-cost position.

    Buys re-weight the average cost. Sells realize `(price - average_cost)` on
    the sold quantity and never touch the average cost. A sell larger than the
    held quantity is clamped to the held quantity. Quantity and average cost
    are rounded to storage precision after every event, matching what the
    ledger persists after each trade.

    Args:
        state: Position state before the event.
        event: Trade to apply. Inputs are assumed validated upstream.

    Returns:
        PositionState: Position state after the event.

    Raises:
        ValueError: Raised when the trade side is unsupported.
    """

    if event.side is TradeSide.BUY:
        new_quantity = state.quantity + event.quantity
        if new_quantity > _ZERO:
            new_average = (state.average_cost * state.quantity + event.price * event.quantity) / new_quantity
        else:
            new_average = _ZERO
        return PositionState(
            quantity=money_round_quantity(new_quantity),
            average_cost=money_round_price(new_average),
            realized_pnl=state.realized_pnl,
        )

    if event.side is TradeSide.SELL:
        sell_quantity = min(event.quantity, state.quantity)
        realized_pnl = state.realized_pnl + (event.price - state.average_cost) * sell_quantity
        return PositionState(
            quantity=money_round_quantity(max(_ZERO, state.quantity - sell_quantity)),
            average_cost=state.average_cost,
            realized_pnl=realized_pnl,
        )

    raise ValueError(f"unsupported trade side={event.side}")


def position_replay_events(events: Iterable[PositionEventInput]) -> PositionState:
    """Fold an ordered trade sequence from the empty position state.

    Args:
        events: Chronologically ordered trades for one instrument.

    Returns:
        PositionState: Final position state.

    Raises:
        ValueError: Raised when a trade side is unsupported.
    """

    state = PositionState()
    for event in events:
        state = position_apply_event(state, event)
    return state


def position_event_from_history(event: HistoryEvent) -> PositionEventInput:
    """Project a stored history event onto the accounting input contract."""

    return PositionEventInput(side=event.side, price=event.price, quantity=event.quantity)


def position_sort_chronological(history: Iterable[HistoryEvent]) -> list[HistoryEvent]:
    """Return history oldest-first with insertion order kept on timestamp ties.

    History is stored newest-first, so the stored sequence is reversed before
    a stable sort by timestamp.

    Args:
        history: Stored history, newest first.

    Returns:
        list[HistoryEvent]: Chronologically ordered events.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return sorted(reversed(list(history)), key=lambda event: event.ts_ms)


__all__ = [
    "PositionEventInput",
    "PositionState",
    "position_apply_event",
    "position_event_from_history",
    "position_replay_events",
    "position_sort_chronological",
]

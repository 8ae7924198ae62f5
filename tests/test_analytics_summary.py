"""Regression tests for read-only history summaries, narratives and reports."""

from __future__ import annotations

from decimal import Decimal

import pytest

from tradejournal.analytics import (
    TradeAnalyticsService,
    analytics_aggregate_realized_pnl,
    analytics_build_journal_entry,
    analytics_build_narrative,
    analytics_compute_win_rate,
    analytics_instrument_label,
    analytics_summarize_all,
    analytics_summarize_instrument,
)
from tradejournal.domain import (
    Account,
    ChecklistItem,
    DepositEvent,
    HistoryEvent,
    LedgerSnapshot,
    TradeSide,
)


MINT_A = "MintAAAA1111111111111111111111111111111111"
MINT_B = "MintBBBB2222222222222222222222222222222222"

# 2026-01-02T10:00:00Z
DAY_ONE_MS = 1_767_348_000_000
DAY_MS = 86_400_000


def _event(
    event_id: str,
    ts_ms: int,
    side: TradeSide,
    mint: str,
    price: str,
    quantity: str,
    symbol: str | None = None,
    market_cap: str | None = None,
) -> HistoryEvent:
    """Build one history event with derived value and the default fee.

    Returns:
        HistoryEvent: Event for replay tests.

    Raises:
        ValueError: Raised when numeric strings are malformed.
    """

    return HistoryEvent(
        event_id=event_id,
        ts_ms=ts_ms,
        side=side,
        mint=mint,
        price=Decimal(price),
        quantity=Decimal(quantity),
        value=Decimal(price) * Decimal(quantity),
        fee=Decimal("4.3"),
        symbol=symbol,
        market_cap=None if market_cap is None else Decimal(market_cap),
    )


def _history_newest_first() -> tuple[HistoryEvent, ...]:
    """Return a two-mint history stored newest first.

    Returns:
        tuple[HistoryEvent, ...]: Stored history.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    chronological = [
        _event("1", DAY_ONE_MS, TradeSide.BUY, MINT_A, "0.5", "10", symbol="AAA", market_cap="50000"),
        _event("2", DAY_ONE_MS + 60_000, TradeSide.BUY, MINT_A, "1.0", "10", symbol="AAA"),
        _event("3", DAY_ONE_MS + DAY_MS, TradeSide.SELL, MINT_A, "2.0", "5", symbol="AAA", market_cap="90000"),
        _event("4", DAY_ONE_MS + DAY_MS, TradeSide.BUY, MINT_B, "4", "2"),
        _event("5", DAY_ONE_MS + 2 * DAY_MS, TradeSide.SELL, MINT_B, "3", "2"),
    ]
    return tuple(reversed(chronological))


class _StaticStateReader:
    """State reader returning one fixed snapshot."""

    def __init__(self, snapshot: LedgerSnapshot):
        self._snapshot = snapshot

    def ledger_get_state(self) -> LedgerSnapshot:
        """Return the fixed snapshot.

        Returns:
            LedgerSnapshot: Fixed snapshot.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        return self._snapshot


def test_analytics_summary_replays_one_instrument() -> None:
    """Summarize counts, quantities, average cost and realized PnL for one mint.

    Returns:
        None: Assertions validate summary fields.

    Raises:
        AssertionError: Raised when replay output deviates.
    """

    summary = analytics_summarize_instrument(_history_newest_first(), MINT_A)

    assert summary.label == "AAA"
    assert summary.total_buys == 2
    assert summary.total_sells == 1
    assert summary.bought_quantity == Decimal("20")
    assert summary.sold_quantity == Decimal("5")
    assert summary.net_quantity == Decimal("15")
    assert summary.average_cost == Decimal("0.75")
    assert summary.realized_pnl == Decimal("6.25")
    assert summary.first_ts_ms == DAY_ONE_MS
    assert summary.last_ts_ms == DAY_ONE_MS + DAY_MS
    assert summary.last_action is TradeSide.SELL
    assert summary.first_buy_market_cap == Decimal("50000")
    assert summary.last_sell_market_cap == Decimal("90000")


def test_analytics_summary_for_unknown_mint_is_empty() -> None:
    """Return an empty summary for a mint with no events and reject blank mints.

    Returns:
        None: Assertions validate the empty summary.

    Raises:
        AssertionError: Raised when the empty summary has data.
    """

    summary = analytics_summarize_instrument(_history_newest_first(), "UnknownMint")

    assert summary.total_buys == 0
    assert summary.total_sells == 0
    assert summary.net_quantity == Decimal("0")
    assert summary.average_cost is None
    assert summary.realized_pnl == Decimal("0")
    assert summary.first_ts_ms is None
    assert summary.last_action is None
    assert analytics_build_narrative(summary) == "No buys yet · No position"

    with pytest.raises(ValueError):
        analytics_summarize_instrument(_history_newest_first(), "  ")


def test_analytics_aggregate_pnl_sums_instruments() -> None:
    """Sum realized PnL per instrument without netting across mints.

    Returns:
        None: Assertions validate aggregate PnL.

    Raises:
        AssertionError: Raised when aggregation deviates.
    """

    history = _history_newest_first()

    summaries = analytics_summarize_all(history)

    assert [summary.mint for summary in summaries] == [MINT_A, MINT_B]
    assert summaries[1].realized_pnl == Decimal("-2.00")
    assert analytics_aggregate_realized_pnl(history) == Decimal("4.25")
    assert analytics_aggregate_realized_pnl(()) == Decimal("0.00")


def test_analytics_win_rate_counts_every_sell() -> None:
    """Count each sell once and mark it a win only for positive realized PnL.

    Returns:
        None: Assertions validate win counts and ratio.

    Raises:
        AssertionError: Raised when classification deviates.
    """

    win_rate = analytics_compute_win_rate(_history_newest_first())

    assert win_rate.winning_sells == 1
    assert win_rate.total_sells == 2
    assert win_rate.win_rate == Decimal("0.5000")

    assert analytics_compute_win_rate(()).win_rate == Decimal("0")


def test_analytics_breakeven_sell_is_not_a_win() -> None:
    """Treat a sell at exactly the average cost as a non-winning sell.

    Returns:
        None: Assertions validate the breakeven classification.

    Raises:
        AssertionError: Raised when breakeven counts as a win.
    """

    history = (
        _event("2", DAY_ONE_MS + 1, TradeSide.SELL, MINT_A, "1", "1"),
        _event("1", DAY_ONE_MS, TradeSide.BUY, MINT_A, "1", "1"),
    )

    win_rate = analytics_compute_win_rate(history)

    assert win_rate.winning_sells == 0
    assert win_rate.total_sells == 1


def test_analytics_narrative_text_is_deterministic() -> None:
    """Render narrative and journal entry text from a summary.

    Returns:
        None: Assertions validate exact strings.

    Raises:
        AssertionError: Raised when rendered text changes.
    """

    history = _history_newest_first()
    open_summary = analytics_summarize_instrument(history, MINT_A)
    closed_summary = analytics_summarize_instrument(history, MINT_B)

    assert analytics_build_narrative(open_summary) == (
        "Started 2026-01-02 · Holding 15.0000 @ $0.75000000 · Last sell 2026-01-03"
    )
    assert analytics_build_journal_entry(open_summary) == (
        "I started buying AAA on 2026-01-02 10:00 UTC. 2 buys and 1 sells so far. "
        "Currently holding 15.000000 with an average cost of $0.75000000. Realized PnL: +$6.25."
    )
    assert analytics_build_narrative(closed_summary) == "Started 2026-01-03 · No position · Last sell 2026-01-04"
    assert analytics_build_journal_entry(closed_summary) == (
        "I started buying Mint…2222 on 2026-01-03 10:00 UTC. 1 buys and 1 sells so far. "
        "Currently no position. Realized PnL: -$2.00."
    )


def test_analytics_label_falls_back_to_name_then_short_mint() -> None:
    """Resolve labels from symbol, then name, then the shortened mint.

    Returns:
        None: Assertions validate label fallbacks.

    Raises:
        AssertionError: Raised when fallback order changes.
    """

    named_event = HistoryEvent(
        event_id="1",
        ts_ms=DAY_ONE_MS,
        side=TradeSide.BUY,
        mint=MINT_A,
        price=Decimal("1"),
        quantity=Decimal("1"),
        value=Decimal("1"),
        fee=Decimal("4.3"),
        name="Alpha Token",
    )

    assert analytics_instrument_label(MINT_A, [named_event]) == "Alpha Token"
    assert analytics_instrument_label(MINT_A) == "Mint…1111"
    assert analytics_instrument_label("SHORT") == "SHORT"


def test_analytics_report_sorts_instruments_and_totals_account() -> None:
    """Build the report with totals, checklists and both sort orders.

    Returns:
        None: Assertions validate report content and ordering.

    Raises:
        AssertionError: Raised when report content or ordering deviates.
    """

    snapshot = LedgerSnapshot(
        account=Account(name="Trader", balance=Decimal("47.1")),
        history=_history_newest_first(),
        deposits=(DepositEvent(ts_ms=DAY_ONE_MS, amount=Decimal("10")), DepositEvent(ts_ms=DAY_ONE_MS, amount=Decimal("5"))),
        checklists={MINT_B: (ChecklistItem(item_id="1", text="check holders"),)},
    )
    service = TradeAnalyticsService(state_reader=_StaticStateReader(snapshot))

    by_pnl = service.analytics_build_report()
    by_recent = service.analytics_build_report(sort_by="recent")

    assert by_pnl.account_name == "Trader"
    assert by_pnl.aggregate_realized_pnl == Decimal("4.25")
    assert by_pnl.total_buys == 3
    assert by_pnl.deposit_total == Decimal("15")
    assert [instrument.summary.mint for instrument in by_pnl.instruments] == [MINT_A, MINT_B]
    assert [instrument.summary.mint for instrument in by_recent.instruments] == [MINT_B, MINT_A]
    assert by_recent.instruments[0].checklist[0].text == "check holders"
    assert service.analytics_get_aggregate_pnl() == Decimal("4.25")
    assert service.analytics_get_summary(MINT_B).realized_pnl == Decimal("-2.00")

    with pytest.raises(ValueError):
        service.analytics_build_report(sort_by="volume")

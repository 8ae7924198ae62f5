"""Journal report assembly over the current ledger snapshot."""
# pylint: disable=too-few-public-methods

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from tradejournal.domain import ChecklistItem, TradeSide

from .interfaces import LedgerStateReaderPort
from .narrative import analytics_build_journal_entry, analytics_build_narrative
from .summary import (
    InstrumentSummary,
    WinRateSummary,
    analytics_aggregate_realized_pnl,
    analytics_compute_win_rate,
    analytics_summarize_all,
    analytics_summarize_instrument,
)


REPORT_SORT_FIELDS = ("realized_pnl", "recent")


@dataclass(frozen=True)
class InstrumentReport:
    """Summary, narrative text and checklist for one instrument.

    Attributes:
        summary: Replay summary.
        narrative: One-line narrative.
        journal_entry: Longer journal paragraph.
        checklist: Checklist items attached to the mint.
    """

    summary: InstrumentSummary
    narrative: str
    journal_entry: str
    checklist: tuple[ChecklistItem, ...] = ()


@dataclass(frozen=True)
class JournalReport:
    """Account-wide journal report.

    Attributes:
        account_name: Journal owner name.
        balance: Current cash balance.
        aggregate_realized_pnl: Realized PnL summed across instruments.
        win_rate: Sell win/loss classification.
        total_buys: Number of buy events in the history.
        deposit_total: Sum of retained deposit records.
        instruments: Per-instrument reports in the requested order.
    """

    account_name: str
    balance: Decimal
    aggregate_realized_pnl: Decimal
    win_rate: WinRateSummary
    total_buys: int
    deposit_total: Decimal
    instruments: tuple[InstrumentReport, ...]


class TradeAnalyticsService:
    """Derive summaries and reports from the ledger without mutating it."""

    def __init__(self, state_reader: LedgerStateReaderPort):
        """Initialize analytics dependencies.

        Args:
            state_reader: Source of the current ledger snapshot.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when state_reader is None.
        """

        if state_reader is None:
            raise ValueError("state_reader must not be None")
        self._state_reader = state_reader

    def analytics_get_summary(self, mint: str) -> InstrumentSummary:
        """Return the replay summary for one mint (empty when it has no history)."""

        return analytics_summarize_instrument(self._state_reader.ledger_get_state().history, mint)

    def analytics_get_aggregate_pnl(self) -> Decimal:
        """Return realized PnL summed across all instruments."""

        return analytics_aggregate_realized_pnl(self._state_reader.ledger_get_state().history)

    def analytics_get_win_rate(self) -> WinRateSummary:
        """Return the sell win-rate summary."""

        return analytics_compute_win_rate(self._state_reader.ledger_get_state().history)

    def analytics_build_report(self, sort_by: str = "realized_pnl") -> JournalReport:
        """Build the full journal report from one consistent snapshot read.

        Args:
            sort_by: `realized_pnl` (highest first) or `recent` (latest activity first).

        Returns:
            JournalReport: Report payload.

        Raises:
            ValueError: Raised when sort_by is unsupported.
        """

        normalized_sort_by = sort_by.strip().lower()
        if normalized_sort_by not in REPORT_SORT_FIELDS:
            raise ValueError(f"unsupported sort_by={sort_by}")

        snapshot = self._state_reader.ledger_get_state()
        summaries = analytics_summarize_all(snapshot.history)
        if normalized_sort_by == "realized_pnl":
            summaries.sort(key=lambda summary: (-summary.realized_pnl, summary.mint))
        else:
            summaries.sort(key=lambda summary: (-(summary.last_ts_ms or 0), summary.mint))

        return JournalReport(
            account_name=snapshot.account.name,
            balance=snapshot.account.balance,
            aggregate_realized_pnl=analytics_aggregate_realized_pnl(snapshot.history),
            win_rate=analytics_compute_win_rate(snapshot.history),
            total_buys=sum(1 for event in snapshot.history if event.side is TradeSide.BUY),
            deposit_total=sum((deposit.amount for deposit in snapshot.deposits), Decimal("0")),
            instruments=tuple(
                InstrumentReport(
                    summary=summary,
                    narrative=analytics_build_narrative(summary),
                    journal_entry=analytics_build_journal_entry(summary),
                    checklist=snapshot.checklists.get(summary.mint, ()),
                )
                for summary in summaries
            ),
        )


__all__ = ["InstrumentReport", "JournalReport", "REPORT_SORT_FIELDS", "TradeAnalyticsService"]

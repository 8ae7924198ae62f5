"""Analytics layer package for journal summaries and report aggregation."""

from .interfaces import LedgerStateReaderPort
from .narrative import (
    analytics_build_journal_entry,
    analytics_build_narrative,
    analytics_format_date_utc,
    analytics_format_datetime_utc,
)
from .service import REPORT_SORT_FIELDS, InstrumentReport, JournalReport, TradeAnalyticsService
from .summary import (
    InstrumentSummary,
    WinRateSummary,
    analytics_aggregate_realized_pnl,
    analytics_compute_win_rate,
    analytics_group_by_mint,
    analytics_instrument_label,
    analytics_summarize_all,
    analytics_summarize_instrument,
)

__all__ = [
    "LedgerStateReaderPort",
    "InstrumentReport",
    "InstrumentSummary",
    "JournalReport",
    "REPORT_SORT_FIELDS",
    "TradeAnalyticsService",
    "WinRateSummary",
    "analytics_aggregate_realized_pnl",
    "analytics_build_journal_entry",
    "analytics_build_narrative",
    "analytics_compute_win_rate",
    "analytics_format_date_utc",
    "analytics_format_datetime_utc",
    "analytics_group_by_mint",
    "analytics_instrument_label",
    "analytics_summarize_all",
    "analytics_summarize_instrument",
]

"""Analytics API router composition for journal summaries and reports."""

from __future__ import annotations

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from tradejournal.analytics import (
    REPORT_SORT_FIELDS,
    InstrumentReport,
    InstrumentSummary,
    TradeAnalyticsService,
    WinRateSummary,
    analytics_build_journal_entry,
    analytics_build_narrative,
)


def api_create_analytics_router(analytics_service: TradeAnalyticsService) -> APIRouter:
    """Create analytics router exposing summary, PnL and report endpoints.

    Args:
        analytics_service: Read-only analytics service.

    Returns:
        APIRouter: Router exposing `/analytics/*` endpoints.

    Raises:
        ValueError: Raised when analytics_service is invalid.
    """

    if analytics_service is None:
        raise ValueError("analytics_service must not be None")

    router = APIRouter(prefix="/analytics", tags=["analytics"])

    @router.get("/summary/{mint}")
    def api_analytics_summary(mint: str) -> JSONResponse:
        """Return the replay summary and narrative for one mint.

        Args:
            mint: Instrument identifier.

        Returns:
            JSONResponse: Summary payload; empty summary when the mint has no history.

        Raises:
            RuntimeError: Raised when ledger read fails.
        """

        if not mint.strip():
            payload = {"status": "error", "code": "INVALID_PARAMS", "message": "mint must not be blank"}
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        summary = analytics_service.analytics_get_summary(mint)
        payload = {
            "summary": api_serialize_instrument_summary(summary),
            "narrative": analytics_build_narrative(summary),
            "journal_entry": analytics_build_journal_entry(summary),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/pnl")
    def api_analytics_pnl() -> JSONResponse:
        """Return aggregate realized PnL and sell win rate."""

        payload = {
            "aggregate_realized_pnl": str(analytics_service.analytics_get_aggregate_pnl()),
            "win_rate": api_serialize_win_rate(analytics_service.analytics_get_win_rate()),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/report")
    def api_analytics_report(sort_by: str = Query(default="realized_pnl")) -> JSONResponse:
        """Return the full journal report.

        Args:
            sort_by: Instrument ordering, `realized_pnl` or `recent`.

        Returns:
            JSONResponse: Report payload.

        Raises:
            RuntimeError: Raised when ledger read fails.
        """

        normalized_sort_by = sort_by.strip().lower()
        if normalized_sort_by not in REPORT_SORT_FIELDS:
            payload = {
                "status": "error",
                "code": "INVALID_SORT_FIELD",
                "message": f"unsupported sort_by={normalized_sort_by}",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        report = analytics_service.analytics_build_report(sort_by=normalized_sort_by)
        payload = {
            "account": {"name": report.account_name, "balance": str(report.balance)},
            "aggregate_realized_pnl": str(report.aggregate_realized_pnl),
            "win_rate": api_serialize_win_rate(report.win_rate),
            "total_buys": report.total_buys,
            "deposit_total": str(report.deposit_total),
            "instruments": [api_serialize_instrument_report(instrument) for instrument in report.instruments],
            "sort": {"sort_by": normalized_sort_by},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_serialize_instrument_summary(summary: InstrumentSummary) -> dict[str, object]:
    """Serialize one instrument summary to JSON payload.

    Args:
        summary: Replay summary.

    Returns:
        dict[str, object]: JSON-serializable summary payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "mint": summary.mint,
        "label": summary.label,
        "total_buys": summary.total_buys,
        "total_sells": summary.total_sells,
        "bought_qty": str(summary.bought_quantity),
        "sold_qty": str(summary.sold_quantity),
        "net_qty": str(summary.net_quantity),
        "avg_cost": None if summary.average_cost is None else str(summary.average_cost),
        "realized_pnl": str(summary.realized_pnl),
        "first_ts": summary.first_ts_ms,
        "last_ts": summary.last_ts_ms,
        "last_action": None if summary.last_action is None else summary.last_action.value,
        "first_buy_market_cap": None if summary.first_buy_market_cap is None else str(summary.first_buy_market_cap),
        "last_sell_market_cap": None if summary.last_sell_market_cap is None else str(summary.last_sell_market_cap),
    }


def api_serialize_win_rate(win_rate: WinRateSummary) -> dict[str, object]:
    """Serialize the win-rate summary."""

    return {
        "winning_sells": win_rate.winning_sells,
        "total_sells": win_rate.total_sells,
        "win_rate": str(win_rate.win_rate),
    }


def api_serialize_instrument_report(instrument: InstrumentReport) -> dict[str, object]:
    """Serialize one instrument report with narrative text and checklist."""

    return {
        "summary": api_serialize_instrument_summary(instrument.summary),
        "narrative": instrument.narrative,
        "journal_entry": instrument.journal_entry,
        "checklist": [
            {"id": item.item_id, "text": item.text, "done": item.done} for item in instrument.checklist
        ],
    }


__all__ = [
    "api_create_analytics_router",
    "api_serialize_instrument_report",
    "api_serialize_instrument_summary",
    "api_serialize_win_rate",
]

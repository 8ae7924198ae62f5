"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or runs one maintenance command against the configured ledger store.
"""

import argparse
import json
import logging
from pathlib import Path

import uvicorn

from tradejournal.analytics import REPORT_SORT_FIELDS, JournalReport, TradeAnalyticsService
from tradejournal.bootstrap import bootstrap_create_application, bootstrap_create_ledger_service
from tradejournal.config import config_load_settings
from tradejournal.domain import Account, domain_snapshot_from_payload
from tradejournal.domain.money import money_format_compact, money_format_usd


logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised when a maintenance command fails.
    """

    argument_parser = argparse.ArgumentParser(description="Token trade journal runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "reset", "report", "import-json"),
        help="Runtime command: `api` starts server, `reset` restores the seed snapshot, "
        "`report` prints the journal report, `import-json` loads an exported journal document",
        type=str,
    )
    argument_parser.add_argument(
        "--path",
        dest="path",
        type=str,
        help="Journal JSON document path for `import-json`",
    )
    argument_parser.add_argument(
        "--sort-by",
        dest="sort_by",
        default="realized_pnl",
        choices=REPORT_SORT_FIELDS,
        type=str,
        help="Instrument ordering for `report`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if parsed_arguments.command == "reset":
        ledger_service = bootstrap_create_ledger_service(settings=settings)
        snapshot = ledger_service.ledger_reset()
        print(f"Ledger reset for {snapshot.account.name}, balance {money_format_usd(snapshot.account.balance)}")
        return

    if parsed_arguments.command == "report":
        ledger_service = bootstrap_create_ledger_service(settings=settings)
        analytics_service = TradeAnalyticsService(state_reader=ledger_service)
        report = analytics_service.analytics_build_report(sort_by=parsed_arguments.sort_by)
        print(main_render_report(report))
        return

    if parsed_arguments.command == "import-json":
        if not parsed_arguments.path:
            argument_parser.error("--path is required for `import-json`")
        try:
            raw_payload = json.loads(Path(parsed_arguments.path).read_text(encoding="utf-8"))
            snapshot = domain_snapshot_from_payload(
                raw_payload,
                default_account=Account(name=settings.account_name, balance=settings.starting_balance_usd),
            )
        except (OSError, ValueError) as error:
            logger.error("journal import failed path=%s error=%s", parsed_arguments.path, error)
            raise SystemExit(1) from error
        ledger_service = bootstrap_create_ledger_service(settings=settings)
        ledger_service.ledger_import_snapshot(snapshot)
        print(f"Imported {len(snapshot.history)} history events and {len(snapshot.positions)} positions")
        return

    application = bootstrap_create_application()
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


def main_render_report(report: JournalReport) -> str:
    """Render the journal report as plain text lines.

    Args:
        report: Journal report built by the analytics service.

    Returns:
        str: Multi-line report text.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    lines = [
        f"{report.account_name}: balance {money_format_usd(report.balance)}",
        f"Realized PnL {money_format_usd(report.aggregate_realized_pnl, signed=True)}"
        f" · win rate {report.win_rate.winning_sells}/{report.win_rate.total_sells}"
        f" · {report.total_buys} buys · deposits {money_format_usd(report.deposit_total)}",
    ]
    for instrument in report.instruments:
        lines.append("")
        lines.append(f"{instrument.summary.label} ({instrument.summary.mint})")
        lines.append(f"  {instrument.narrative}")
        lines.append(f"  {instrument.journal_entry}")
        summary = instrument.summary
        if summary.first_buy_market_cap is not None or summary.last_sell_market_cap is not None:
            entry_cap = "—" if summary.first_buy_market_cap is None else money_format_compact(summary.first_buy_market_cap)
            exit_cap = "—" if summary.last_sell_market_cap is None else money_format_compact(summary.last_sell_market_cap)
            lines.append(f"  Market cap at entry {entry_cap}, at last exit {exit_cap}")
        for item in instrument.checklist:
            lines.append(f"  [{'x' if item.done else ' '}] {item.text}")
    return "\n".join(lines)


if __name__ == "__main__":
    main()

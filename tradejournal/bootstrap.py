"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI
from sqlalchemy import Engine

from tradejournal.analytics import TradeAnalyticsService
from tradejournal.api import create_api_application
from tradejournal.config import AppSettings, config_load_settings
from tradejournal.db import SQLAlchemyDatabaseHealthService, SQLAlchemyLedgerStore, db_create_engine
from tradejournal.domain import Account
from tradejournal.ledger import LedgerServiceConfig, TradeLedgerService


def bootstrap_create_ledger_service(
    settings: AppSettings | None = None,
    engine: Engine | None = None,
) -> TradeLedgerService:
    """Build the ledger service over the configured snapshot store.

    Args:
        settings: Optional preloaded settings; loaded from environment when omitted.
        engine: Optional shared engine; created from settings.database_url when omitted.

    Returns:
        TradeLedgerService: Fully wired ledger service instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    resolved_engine = engine or db_create_engine(database_url=resolved_settings.database_url)
    store = SQLAlchemyLedgerStore(
        engine=resolved_engine,
        default_account=Account(
            name=resolved_settings.account_name,
            balance=resolved_settings.starting_balance_usd,
        ),
    )
    return TradeLedgerService(
        store=store,
        config=LedgerServiceConfig(
            account_name=resolved_settings.account_name,
            starting_balance=resolved_settings.starting_balance_usd,
            transaction_fee=resolved_settings.transaction_fee_usd,
            deposit_log_limit=resolved_settings.deposit_log_limit,
        ),
    )


def bootstrap_create_application() -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    settings = config_load_settings()
    engine = db_create_engine(database_url=settings.database_url)
    db_health_service = SQLAlchemyDatabaseHealthService(engine=engine)
    ledger_service = bootstrap_create_ledger_service(settings=settings, engine=engine)
    return create_api_application(
        settings=settings,
        db_health_service=db_health_service,
        ledger_service=ledger_service,
        analytics_service=TradeAnalyticsService(state_reader=ledger_service),
    )

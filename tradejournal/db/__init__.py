"""Database layer package for all SQL and persistence boundaries."""

from .health import SQLAlchemyDatabaseHealthService
from .interfaces import DatabaseHealthPort
from .ledger_state import DEFAULT_LEDGER_STATE_ID, SQLAlchemyLedgerStore
from .session import db_create_engine

__all__ = [
	"DatabaseHealthPort",
	"DEFAULT_LEDGER_STATE_ID",
	"SQLAlchemyDatabaseHealthService",
	"SQLAlchemyLedgerStore",
	"db_create_engine",
]

"""Database health check for the ledger snapshot storage."""

import logging

from sqlalchemy import Engine, inspect, text
from sqlalchemy.exc import SQLAlchemyError

from tradejournal.domain import HealthStatus

from .interfaces import DatabaseHealthPort


logger = logging.getLogger(__name__)

LEDGER_STATE_TABLE = "ledger_state"


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Report whether the journal database answers and carries the ledger schema.

    A reachable database without the `ledger_state` table reports status
    `schema_missing`, which the API surfaces as degraded until migrations run.
    """

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Run a round trip and look up the ledger snapshot table.

        Returns:
            HealthStatus: `ok` when the ledger table exists, `schema_missing` otherwise.

        Raises:
            ConnectionError: Raised when the database cannot be reached.
        """

        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                has_ledger_table = inspect(connection).has_table(LEDGER_STATE_TABLE)
        except SQLAlchemyError as error:
            logger.warning("journal database unreachable target=%s", self.db_connection_label())
            raise ConnectionError("journal database is unreachable") from error

        if not has_ledger_table:
            logger.warning("journal database lacks table=%s target=%s", LEDGER_STATE_TABLE, self.db_connection_label())
            return HealthStatus(
                status="schema_missing",
                detail=f"{LEDGER_STATE_TABLE} table not found; run `alembic upgrade head`",
            )
        return HealthStatus(status="ok", detail=f"{LEDGER_STATE_TABLE} table reachable")


__all__ = ["LEDGER_STATE_TABLE", "SQLAlchemyDatabaseHealthService"]

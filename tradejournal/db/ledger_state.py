"""Database service persisting the whole ledger snapshot as one JSON document."""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging

from sqlalchemy import DateTime, Engine, bindparam, text
from sqlalchemy.exc import SQLAlchemyError

from tradejournal.domain import (
    Account,
    LedgerSnapshot,
    domain_snapshot_from_payload,
    domain_snapshot_to_payload,
)


logger = logging.getLogger(__name__)

DEFAULT_LEDGER_STATE_ID = "default"


class SQLAlchemyLedgerStore:
    """SQLAlchemy implementation of the whole-snapshot ledger store.

    One row of `ledger_state` holds the serialized snapshot. Saves replace the
    row with a single upsert inside one transaction, so readers only ever see a
    complete snapshot.
    """

    _LOAD_QUERY = "SELECT payload FROM ledger_state WHERE ledger_state_id = :ledger_state_id"

    _SAVE_QUERY = (
        "INSERT INTO ledger_state (ledger_state_id, payload, updated_at_utc) "
        "VALUES (:ledger_state_id, :payload, :updated_at_utc) "
        "ON CONFLICT (ledger_state_id) DO UPDATE SET "
        "payload = excluded.payload, updated_at_utc = excluded.updated_at_utc"
    )

    def __init__(
        self,
        engine: Engine,
        default_account: Account,
        ledger_state_id: str = DEFAULT_LEDGER_STATE_ID,
    ):
        """Initialize ledger state database service.

        Args:
            engine: SQLAlchemy engine used for persistence and reads.
            default_account: Account used when a stored payload lacks a valid user block.
            ledger_state_id: Row key of the snapshot document.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        if default_account is None:
            raise ValueError("default_account must not be None")
        if not ledger_state_id.strip():
            raise ValueError("ledger_state_id must not be blank")
        self._engine = engine
        self._default_account = default_account
        self._ledger_state_id = ledger_state_id.strip()

    def ledger_load(self) -> LedgerSnapshot | None:
        """Load the stored snapshot document.

        Returns:
            LedgerSnapshot | None: Stored snapshot, or None when no row exists yet.

        Raises:
            RuntimeError: Raised when database read fails.
            ValueError: Raised when the stored payload is malformed.
        """

        try:
            with self._engine.connect() as connection:
                stored_payload = connection.execute(
                    text(self._LOAD_QUERY),
                    {"ledger_state_id": self._ledger_state_id},
                ).scalar_one_or_none()
        except SQLAlchemyError as error:
            raise RuntimeError("ledger state read failed") from error

        if stored_payload is None:
            return None

        try:
            decoded_payload = json.loads(stored_payload)
        except json.JSONDecodeError as error:
            raise ValueError(f"stored ledger state is not valid JSON for ledger_state_id={self._ledger_state_id}") from error
        return domain_snapshot_from_payload(decoded_payload, default_account=self._default_account)

    def ledger_save(self, snapshot: LedgerSnapshot) -> None:
        """Replace the stored snapshot document in one transaction.

        Args:
            snapshot: Complete snapshot to persist.

        Returns:
            None: Snapshot is persisted as a side effect.

        Raises:
            RuntimeError: Raised when database write fails.
        """

        encoded_payload = json.dumps(domain_snapshot_to_payload(snapshot), separators=(",", ":"))
        try:
            with self._engine.begin() as connection:
                connection.execute(
                    text(self._SAVE_QUERY).bindparams(bindparam("updated_at_utc", type_=DateTime(timezone=True))),
                    {
                        "ledger_state_id": self._ledger_state_id,
                        "payload": encoded_payload,
                        "updated_at_utc": datetime.now(timezone.utc),
                    },
                )
        except SQLAlchemyError as error:
            raise RuntimeError("ledger state write failed") from error
        logger.debug(
            "ledger state saved ledger_state_id=%s bytes=%d",
            self._ledger_state_id,
            len(encoded_payload),
        )


__all__ = ["DEFAULT_LEDGER_STATE_ID", "SQLAlchemyLedgerStore"]

"""Typed interfaces for ledger-layer storage boundaries."""

from typing import Protocol

from tradejournal.domain import LedgerSnapshot


class LedgerStorePort(Protocol):
    """Port definition for whole-snapshot ledger persistence."""

    def ledger_load(self) -> LedgerSnapshot | None:
        """Load the current ledger snapshot.

        Returns:
            LedgerSnapshot | None: Stored snapshot, or None when nothing is stored yet.

        Raises:
            RuntimeError: Raised when the storage read fails.
            ValueError: Raised when the stored payload is malformed.
        """

    def ledger_save(self, snapshot: LedgerSnapshot) -> None:
        """Replace the stored snapshot atomically.

        Args:
            snapshot: Complete snapshot to persist.

        Returns:
            None: Snapshot is persisted as a side effect.

        Raises:
            RuntimeError: Raised when the storage write fails.
        """

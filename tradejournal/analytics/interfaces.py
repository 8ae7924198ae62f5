"""Typed interfaces for analytics-layer reads."""

from typing import Protocol

from tradejournal.domain import LedgerSnapshot


class LedgerStateReaderPort(Protocol):
    """Port definition for reading the current ledger snapshot."""

    def ledger_get_state(self) -> LedgerSnapshot:
        """Return the current ledger snapshot.

        Returns:
            LedgerSnapshot: Current snapshot.

        Raises:
            RuntimeError: Raised when the snapshot cannot be read.
        """

"""Project-native typed exceptions for ledger command failures."""

from __future__ import annotations


class LedgerError(Exception):
    """Base exception for rejected ledger commands.

    Attributes:
        error_code: Stable machine-readable error code.
    """

    error_code = "LEDGER_ERROR"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class InvalidAmountError(LedgerError, ValueError):
    """Deposit amount is missing, non-finite or not positive."""

    error_code = "INVALID_AMOUNT"


class InvalidParamsError(LedgerError, ValueError):
    """Trade or profile command parameters are malformed."""

    error_code = "INVALID_PARAMS"


class InsufficientBalanceError(LedgerError):
    """Balance cannot cover a buy including its fee."""

    error_code = "INSUFFICIENT_BALANCE"


class InsufficientBalanceForFeeError(LedgerError):
    """Balance plus sale proceeds cannot cover the sell fee."""

    error_code = "INSUFFICIENT_BALANCE_FOR_FEE"


class NoPositionError(LedgerError):
    """Sell requested for a mint without an open position."""

    error_code = "NO_POSITION"


class LedgerInvariantError(RuntimeError):
    """Computed snapshot violates a ledger invariant and must not be persisted."""


__all__ = [
    "InsufficientBalanceError",
    "InsufficientBalanceForFeeError",
    "InvalidAmountError",
    "InvalidParamsError",
    "LedgerError",
    "LedgerInvariantError",
    "NoPositionError",
]

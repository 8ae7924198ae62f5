"""Typed domain models shared across runtime layers.

Ledger records are immutable. Mutations build new snapshots with
`dataclasses.replace` so a rejected command can never leak partial state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class TradeSide(str, Enum):
    """Direction of one simulated trade."""

    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class HealthStatus:
    """Health response contract used by health-check surfaces.

    Attributes:
        status: Overall status text for service health.
        detail: Additional message suitable for operational diagnostics.
    """

    status: str
    detail: str


@dataclass(frozen=True)
class Account:
    """Virtual cash account.

    Attributes:
        name: Display name of the journal owner.
        balance: Cash balance in USD.
    """

    name: str
    balance: Decimal


@dataclass(frozen=True)
class Position:
    """Open holding for one instrument.

    Attributes:
        quantity: Held quantity, always positive while the position exists.
        average_price: Weighted average cost basis of the held quantity.
        name: Optional token name.
        symbol: Optional token ticker symbol.
    """

    quantity: Decimal
    average_price: Decimal
    name: str | None = None
    symbol: str | None = None


@dataclass(frozen=True)
class HistoryEvent:
    """Immutable trade history record.

    Attributes:
        event_id: Unique event identifier.
        ts_ms: Event time in epoch milliseconds.
        side: Trade side.
        mint: Instrument identifier.
        name: Optional token name.
        symbol: Optional token ticker symbol.
        price: Execution price.
        quantity: Executed quantity (clamped quantity for sells).
        value: Gross trade value before fee.
        fee: Flat fee charged for the trade.
        market_cap: Optional market cap observed at trade time.
    """

    event_id: str
    ts_ms: int
    side: TradeSide
    mint: str
    price: Decimal
    quantity: Decimal
    value: Decimal
    fee: Decimal
    name: str | None = None
    symbol: str | None = None
    market_cap: Decimal | None = None


@dataclass(frozen=True)
class DepositEvent:
    """Cash deposit record."""

    ts_ms: int
    amount: Decimal


@dataclass(frozen=True)
class ChecklistItem:
    """One per-token checklist entry."""

    item_id: str
    text: str
    done: bool = False


@dataclass(frozen=True)
class LedgerSnapshot:
    """Complete point-in-time journal state.

    Attributes:
        account: Cash account.
        positions: Open positions keyed by mint.
        history: Trade events, newest first.
        deposits: Deposit events, newest first.
        last_scanned_mint: Last mint inspected by the client.
        checklists: Per-mint checklist items.
    """

    account: Account
    positions: dict[str, Position] = field(default_factory=dict)
    history: tuple[HistoryEvent, ...] = ()
    deposits: tuple[DepositEvent, ...] = ()
    last_scanned_mint: str = ""
    checklists: dict[str, tuple[ChecklistItem, ...]] = field(default_factory=dict)


def domain_build_seed_snapshot(account_name: str, starting_balance: Decimal) -> LedgerSnapshot:
    """Build the seed snapshot used on first access and on reset.

    Args:
        account_name: Default account display name.
        starting_balance: Default starting cash balance.

    Returns:
        LedgerSnapshot: Fresh snapshot with no positions or history.

    Raises:
        ValueError: Raised when the starting balance is negative.
    """

    if starting_balance < Decimal("0"):
        raise ValueError("starting_balance must not be negative")
    return LedgerSnapshot(account=Account(name=account_name, balance=starting_balance))

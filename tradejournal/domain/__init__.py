"""Domain models used across application layer boundaries."""

from .codec import (
    domain_checklist_item_from_payload,
    domain_history_event_to_payload,
    domain_snapshot_from_payload,
    domain_snapshot_to_payload,
)
from .errors import (
    InsufficientBalanceError,
    InsufficientBalanceForFeeError,
    InvalidAmountError,
    InvalidParamsError,
    LedgerError,
    LedgerInvariantError,
    NoPositionError,
)
from .models import (
    Account,
    ChecklistItem,
    DepositEvent,
    HealthStatus,
    HistoryEvent,
    LedgerSnapshot,
    Position,
    TradeSide,
    domain_build_seed_snapshot,
)

__all__ = [
    "Account",
    "ChecklistItem",
    "DepositEvent",
    "HealthStatus",
    "HistoryEvent",
    "LedgerSnapshot",
    "Position",
    "TradeSide",
    "domain_build_seed_snapshot",
    "domain_checklist_item_from_payload",
    "domain_history_event_to_payload",
    "domain_snapshot_from_payload",
    "domain_snapshot_to_payload",
    "InsufficientBalanceError",
    "InsufficientBalanceForFeeError",
    "InvalidAmountError",
    "InvalidParamsError",
    "LedgerError",
    "LedgerInvariantError",
    "NoPositionError",
]

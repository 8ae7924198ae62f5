"""Ledger layer package for position accounting and journal command boundaries."""

from .interfaces import LedgerStorePort
from .position_engine import (
	PositionEventInput,
	PositionState,
	position_apply_event,
	position_event_from_history,
	position_replay_events,
	position_sort_chronological,
)
from .service import (
	LedgerServiceConfig,
	TradeLedgerService,
	ledger_assert_invariants,
	ledger_new_event_id,
	ledger_now_ms,
)

__all__ = [
	"LedgerStorePort",
	"PositionEventInput",
	"PositionState",
	"position_apply_event",
	"position_event_from_history",
	"position_replay_events",
	"position_sort_chronological",
	"LedgerServiceConfig",
	"TradeLedgerService",
	"ledger_assert_invariants",
	"ledger_new_event_id",
	"ledger_now_ms",
]

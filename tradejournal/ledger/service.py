"""Ledger mutation service applying journal commands to whole snapshots."""
# pylint: disable=too-many-arguments

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
import logging
import threading
import time
from typing import Callable, Iterable
from uuid import uuid4

from tradejournal.domain import (
    Account,
    ChecklistItem,
    DepositEvent,
    HistoryEvent,
    InsufficientBalanceError,
    InsufficientBalanceForFeeError,
    InvalidAmountError,
    InvalidParamsError,
    LedgerError,
    LedgerInvariantError,
    LedgerSnapshot,
    NoPositionError,
    Position,
    TradeSide,
    domain_build_seed_snapshot,
)
from tradejournal.domain.money import (
    DEFAULT_TRANSACTION_FEE_USD,
    POSITION_DUST_EPSILON,
    money_coerce_decimal,
    money_format_usd,
    money_is_positive,
    money_is_valid_input,
    money_round_balance,
    money_round_quantity,
)

from .interfaces import LedgerStorePort
from .position_engine import PositionEventInput, PositionState, position_apply_event


logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class LedgerServiceConfig:
    """Configuration values for ledger command execution.

    Attributes:
        account_name: Account display name used by the seed snapshot.
        starting_balance: Cash balance used by the seed snapshot.
        transaction_fee: Flat USD fee charged once per buy or sell.
        deposit_log_limit: Maximum number of deposit records kept.
    """

    account_name: str = "Trader"
    starting_balance: Decimal = Decimal("65")
    transaction_fee: Decimal = DEFAULT_TRANSACTION_FEE_USD
    deposit_log_limit: int = 200


def ledger_now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


def ledger_new_event_id() -> str:
    """Return a new unique history event identifier."""

    return str(uuid4())


def ledger_assert_invariants(snapshot: LedgerSnapshot) -> None:
    """Verify snapshot invariants before persistence.

    Args:
        snapshot: Candidate snapshot.

    Returns:
        None: Returns when every invariant holds.

    Raises:
        LedgerInvariantError: Raised when the balance is negative or a stored
            position has a non-positive quantity or negative average price.
    """

    if snapshot.account.balance < _ZERO:
        raise LedgerInvariantError(f"balance must not be negative, got {snapshot.account.balance}")
    for mint, position in snapshot.positions.items():
        if position.quantity <= _ZERO:
            raise LedgerInvariantError(f"position quantity must be positive for mint={mint}")
        if position.average_price < _ZERO:
            raise LedgerInvariantError(f"position average price must not be negative for mint={mint}")


class TradeLedgerService:
    """Apply deposit, trade and profile commands under a single-writer lock.

    Every command reads the full snapshot, validates its inputs, builds the next
    snapshot in memory and saves it whole. A rejected command raises before
    anything is saved, so the stored snapshot always stays at its last valid
    state.
    """

    def __init__(
        self,
        store: LedgerStorePort,
        config: LedgerServiceConfig | None = None,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[], str] | None = None,
    ):
        """Initialize ledger service dependencies.

        Args:
            store: Whole-snapshot storage port.
            config: Optional command configuration; defaults apply when omitted.
            clock: Optional epoch-millisecond clock.
            id_factory: Optional history event identifier factory.

        Returns:
            None: Initializer does not return values.

        Raises:
            ValueError: Raised when the store or config values are invalid.
        """

        if store is None:
            raise ValueError("store must not be None")
        resolved_config = config or LedgerServiceConfig()
        if not resolved_config.account_name.strip():
            raise ValueError("config.account_name must not be blank")
        if resolved_config.transaction_fee < _ZERO:
            raise ValueError("config.transaction_fee must not be negative")
        if resolved_config.deposit_log_limit < 1:
            raise ValueError("config.deposit_log_limit must be at least 1")

        self._store = store
        self._config = resolved_config
        self._clock = clock or ledger_now_ms
        self._id_factory = id_factory or ledger_new_event_id
        self._lock = threading.Lock()

    @property
    def transaction_fee(self) -> Decimal:
        """Flat fee charged per trade."""

        return self._config.transaction_fee

    def ledger_seed_snapshot(self) -> LedgerSnapshot:
        """Build the configured seed snapshot."""

        return domain_build_seed_snapshot(
            account_name=self._config.account_name,
            starting_balance=self._config.starting_balance,
        )

    def ledger_get_state(self) -> LedgerSnapshot:
        """Return the current snapshot, seeding storage on first access.

        Returns:
            LedgerSnapshot: Current snapshot.

        Raises:
            RuntimeError: Raised when storage access fails.
        """

        with self._lock:
            return self._ledger_load_or_seed()

    def ledger_deposit(self, amount: object) -> LedgerSnapshot:
        """Credit cash to the account and record the deposit.

        Args:
            amount: Deposit amount, finite, positive and below MONEY_INPUT_LIMIT.

        Returns:
            LedgerSnapshot: Snapshot after the deposit.

        Raises:
            InvalidAmountError: Raised when the amount is missing, non-positive or out of range.
        """

        parsed_amount = money_coerce_decimal(amount)
        if not money_is_valid_input(parsed_amount):
            raise InvalidAmountError("Invalid amount")

        def _apply(current: LedgerSnapshot) -> LedgerSnapshot:
            deposit = DepositEvent(ts_ms=self._clock(), amount=parsed_amount)
            return replace(
                current,
                account=replace(current.account, balance=money_round_balance(current.account.balance + parsed_amount)),
                deposits=((deposit,) + current.deposits)[: self._config.deposit_log_limit],
            )

        return self._ledger_mutate("deposit", _apply)

    def ledger_buy(
        self,
        mint: object,
        price: object,
        quantity: object,
        name: str | None = None,
        symbol: str | None = None,
        market_cap: object = None,
    ) -> LedgerSnapshot:
        """Open or add to a position at the given price.

        Args:
            mint: Instrument identifier.
            price: Execution price, finite and positive.
            quantity: Quantity to buy, finite and positive.
            name: Optional token name, carried forward from the position when omitted.
            symbol: Optional token symbol, carried forward from the position when omitted.
            market_cap: Optional market cap recorded on the history event.

        Returns:
            LedgerSnapshot: Snapshot after the buy.

        Raises:
            InvalidParamsError: Raised when mint, price or quantity are invalid, or the
                quantity rounds to zero at storage precision.
            InsufficientBalanceError: Raised when balance cannot cover cost plus fee.
        """

        normalized_mint = _ledger_normalize_mint(mint)
        parsed_price = money_coerce_decimal(price)
        parsed_quantity = money_coerce_decimal(quantity)
        if (
            normalized_mint is None
            or not money_is_valid_input(parsed_price)
            or not money_is_valid_input(parsed_quantity)
            or money_round_quantity(parsed_quantity) <= _ZERO
        ):
            raise InvalidParamsError("Invalid buy params")

        fee = self._config.transaction_fee
        cost = parsed_price * parsed_quantity
        total = cost + fee

        def _apply(current: LedgerSnapshot) -> LedgerSnapshot:
            if current.account.balance < total:
                raise InsufficientBalanceError(
                    f"Insufficient balance (need {money_format_usd(total)} incl. {money_format_usd(fee)} fee)"
                )

            existing = current.positions.get(normalized_mint)
            prior_state = (
                PositionState(quantity=existing.quantity, average_cost=existing.average_price)
                if existing is not None
                else PositionState()
            )
            next_state = position_apply_event(
                prior_state,
                PositionEventInput(side=TradeSide.BUY, price=parsed_price, quantity=parsed_quantity),
            )
            resolved_name = _ledger_optional_text(name) or (existing.name if existing is not None else None)
            resolved_symbol = _ledger_optional_text(symbol) or (existing.symbol if existing is not None else None)

            positions = dict(current.positions)
            positions[normalized_mint] = Position(
                quantity=next_state.quantity,
                average_price=next_state.average_cost,
                name=resolved_name,
                symbol=resolved_symbol,
            )
            event = HistoryEvent(
                event_id=self._id_factory(),
                ts_ms=self._clock(),
                side=TradeSide.BUY,
                mint=normalized_mint,
                price=parsed_price,
                quantity=parsed_quantity,
                value=money_round_balance(cost),
                fee=fee,
                name=resolved_name,
                symbol=resolved_symbol,
                market_cap=money_coerce_decimal(market_cap),
            )
            return replace(
                current,
                account=replace(current.account, balance=money_round_balance(current.account.balance - total)),
                positions=positions,
                history=(event,) + current.history,
            )

        return self._ledger_mutate("buy", _apply)

    def ledger_sell(
        self,
        mint: object,
        price: object,
        quantity: object = None,
        market_cap: object = None,
    ) -> LedgerSnapshot:
        """Reduce or close a position at the given price.

        A missing or non-positive quantity sells the whole position. A quantity
        above the held amount is clamped to the held amount. The fee may be
        funded from the sale proceeds.

        Args:
            mint: Instrument identifier.
            price: Execution price, finite and positive.
            quantity: Optional quantity to sell.
            market_cap: Optional market cap recorded on the history event.

        Returns:
            LedgerSnapshot: Snapshot after the sell.

        Raises:
            InvalidParamsError: Raised when mint or price are invalid.
            NoPositionError: Raised when the mint has no open position.
            InsufficientBalanceForFeeError: Raised when balance plus proceeds cannot cover the fee.
        """

        normalized_mint = _ledger_normalize_mint(mint)
        parsed_price = money_coerce_decimal(price)
        if normalized_mint is None or not money_is_valid_input(parsed_price):
            raise InvalidParamsError("Invalid sell params")
        requested_quantity = money_coerce_decimal(quantity)
        fee = self._config.transaction_fee

        def _apply(current: LedgerSnapshot) -> LedgerSnapshot:
            existing = current.positions.get(normalized_mint)
            if existing is None or existing.quantity <= _ZERO:
                raise NoPositionError("No position")

            if money_is_positive(requested_quantity):
                sell_quantity = min(requested_quantity, existing.quantity)
            else:
                sell_quantity = existing.quantity
            proceeds = parsed_price * sell_quantity
            if current.account.balance + proceeds < fee:
                raise InsufficientBalanceForFeeError(f"Insufficient balance for {money_format_usd(fee)} fee")

            next_state = position_apply_event(
                PositionState(quantity=existing.quantity, average_cost=existing.average_price),
                PositionEventInput(side=TradeSide.SELL, price=parsed_price, quantity=sell_quantity),
            )
            positions = dict(current.positions)
            if next_state.quantity <= POSITION_DUST_EPSILON:
                del positions[normalized_mint]
            else:
                positions[normalized_mint] = replace(existing, quantity=next_state.quantity)

            event = HistoryEvent(
                event_id=self._id_factory(),
                ts_ms=self._clock(),
                side=TradeSide.SELL,
                mint=normalized_mint,
                price=parsed_price,
                quantity=sell_quantity,
                value=money_round_balance(proceeds),
                fee=fee,
                name=existing.name,
                symbol=existing.symbol,
                market_cap=money_coerce_decimal(market_cap),
            )
            return replace(
                current,
                account=replace(
                    current.account,
                    balance=money_round_balance(current.account.balance + proceeds - fee),
                ),
                positions=positions,
                history=(event,) + current.history,
            )

        return self._ledger_mutate("sell", _apply)

    def ledger_reset(self) -> LedgerSnapshot:
        """Replace the stored snapshot with the seed snapshot.

        Returns:
            LedgerSnapshot: Seed snapshot.

        Raises:
            RuntimeError: Raised when storage write fails.
        """

        seed_snapshot = self.ledger_seed_snapshot()
        with self._lock:
            self._store.ledger_save(seed_snapshot)
        logger.info("ledger reset to seed state balance=%s", seed_snapshot.account.balance)
        return seed_snapshot

    def ledger_import_snapshot(self, snapshot: LedgerSnapshot) -> LedgerSnapshot:
        """Replace the stored snapshot with an externally supplied one.

        Args:
            snapshot: Snapshot decoded from an exported journal document.

        Returns:
            LedgerSnapshot: Imported snapshot, deposit log trimmed to the configured limit.

        Raises:
            LedgerInvariantError: Raised when the snapshot violates ledger invariants.
        """

        ledger_assert_invariants(snapshot)
        snapshot = replace(snapshot, deposits=snapshot.deposits[: self._config.deposit_log_limit])
        with self._lock:
            self._store.ledger_save(snapshot)
        logger.info(
            "ledger snapshot imported positions=%d history=%d deposits=%d",
            len(snapshot.positions),
            len(snapshot.history),
            len(snapshot.deposits),
        )
        return snapshot

    def ledger_update_user_name(self, name: object) -> LedgerSnapshot:
        """Rename the account owner; the stripped name needs at least two characters."""

        if not isinstance(name, str) or len(name.strip()) < 2:
            raise InvalidParamsError("Invalid name")
        stripped_name = name.strip()

        def _apply(current: LedgerSnapshot) -> LedgerSnapshot:
            return replace(current, account=Account(name=stripped_name, balance=current.account.balance))

        return self._ledger_mutate("update_user_name", _apply)

    def ledger_set_last_scanned_mint(self, mint: object) -> LedgerSnapshot:
        """Remember the last mint inspected by the client."""

        normalized_mint = _ledger_normalize_mint(mint)
        if normalized_mint is None:
            raise InvalidParamsError("Invalid mint")

        def _apply(current: LedgerSnapshot) -> LedgerSnapshot:
            return replace(current, last_scanned_mint=normalized_mint)

        return self._ledger_mutate("set_last_scanned_mint", _apply)

    def ledger_set_checklist(self, mint: object, items: Iterable[ChecklistItem] | None) -> LedgerSnapshot:
        """Replace the checklist attached to one mint.

        Args:
            mint: Instrument identifier.
            items: Complete checklist for the mint.

        Returns:
            LedgerSnapshot: Snapshot with the updated checklist.

        Raises:
            InvalidParamsError: Raised when mint is blank or items are missing.
        """

        normalized_mint = _ledger_normalize_mint(mint)
        if normalized_mint is None or items is None:
            raise InvalidParamsError("Invalid todos payload")
        normalized_items = tuple(items)

        def _apply(current: LedgerSnapshot) -> LedgerSnapshot:
            checklists = dict(current.checklists)
            checklists[normalized_mint] = normalized_items
            return replace(current, checklists=checklists)

        return self._ledger_mutate("set_checklist", _apply)

    def _ledger_mutate(
        self,
        command_name: str,
        mutation: Callable[[LedgerSnapshot], LedgerSnapshot],
    ) -> LedgerSnapshot:
        """Run one read-modify-write cycle under the single-writer lock.

        Args:
            command_name: Command label for logging.
            mutation: Pure function building the next snapshot.

        Returns:
            LedgerSnapshot: Persisted next snapshot.

        Raises:
            LedgerError: Raised when the command is rejected.
            LedgerInvariantError: Raised when the next snapshot violates invariants.
        """

        with self._lock:
            current = self._ledger_load_or_seed()
            try:
                next_snapshot = mutation(current)
            except LedgerError as error:
                logger.warning(
                    "ledger command rejected command=%s code=%s message=%s",
                    command_name,
                    error.error_code,
                    error.message,
                )
                raise
            ledger_assert_invariants(next_snapshot)
            self._store.ledger_save(next_snapshot)

        logger.info(
            "ledger command applied command=%s balance=%s positions=%d",
            command_name,
            next_snapshot.account.balance,
            len(next_snapshot.positions),
        )
        return next_snapshot

    def _ledger_load_or_seed(self) -> LedgerSnapshot:
        stored_snapshot = self._store.ledger_load()
        if stored_snapshot is not None:
            return stored_snapshot
        seed_snapshot = self.ledger_seed_snapshot()
        self._store.ledger_save(seed_snapshot)
        logger.info("ledger seeded on first access balance=%s", seed_snapshot.account.balance)
        return seed_snapshot


def _ledger_normalize_mint(mint: object) -> str | None:
    if not isinstance(mint, str) or not mint.strip():
        return None
    return mint.strip()


def _ledger_optional_text(value: str | None) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


__all__ = [
    "LedgerServiceConfig",
    "TradeLedgerService",
    "ledger_assert_invariants",
    "ledger_new_event_id",
    "ledger_now_ms",
]

"""JSON payload codec for ledger snapshots.

The payload layout mirrors the journal's `db.json` document so exported
snapshots from earlier versions can be imported unchanged. Decimals are
written as strings and accepted back as strings or JSON numbers.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from .models import (
    Account,
    ChecklistItem,
    DepositEvent,
    HistoryEvent,
    LedgerSnapshot,
    Position,
    TradeSide,
)
from .money import money_coerce_decimal


def domain_snapshot_to_payload(snapshot: LedgerSnapshot) -> dict[str, Any]:
    """Serialize one snapshot to a JSON-compatible payload.

    Args:
        snapshot: Snapshot to serialize.

    Returns:
        dict[str, Any]: JSON-serializable payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "user": {
            "name": snapshot.account.name,
            "balance": str(snapshot.account.balance),
        },
        "positions": {
            mint: _position_to_payload(position) for mint, position in snapshot.positions.items()
        },
        "history": [domain_history_event_to_payload(event) for event in snapshot.history],
        "deposits": [{"ts": deposit.ts_ms, "amount": str(deposit.amount)} for deposit in snapshot.deposits],
        "lastScannedMint": snapshot.last_scanned_mint,
        "todos": {
            mint: [{"id": item.item_id, "text": item.text, "done": item.done} for item in items]
            for mint, items in snapshot.checklists.items()
        },
    }


def domain_history_event_to_payload(event: HistoryEvent) -> dict[str, Any]:
    """Serialize one history event, omitting absent optional fields."""

    payload: dict[str, Any] = {
        "id": event.event_id,
        "ts": event.ts_ms,
        "side": event.side.value,
        "mint": event.mint,
        "price": str(event.price),
        "qty": str(event.quantity),
        "value": str(event.value),
        "fee": str(event.fee),
    }
    if event.name is not None:
        payload["name"] = event.name
    if event.symbol is not None:
        payload["symbol"] = event.symbol
    if event.market_cap is not None:
        payload["marketCap"] = str(event.market_cap)
    return payload


def domain_snapshot_from_payload(payload: dict[str, Any], default_account: Account) -> LedgerSnapshot:
    """Deserialize a stored payload into a typed snapshot.

    Missing top-level sections fall back to empty values and a missing or
    malformed `user` block falls back to the given default account.

    Args:
        payload: Decoded JSON document.
        default_account: Account used when the payload has no valid user block.

    Returns:
        LedgerSnapshot: Typed snapshot.

    Raises:
        ValueError: Raised when a position, history or deposit record is malformed.
    """

    if not isinstance(payload, dict):
        raise ValueError("snapshot payload must be a JSON object")

    account = _account_from_payload(payload.get("user"), default_account)

    positions: dict[str, Position] = {}
    for mint, raw_position in (payload.get("positions") or {}).items():
        positions[str(mint)] = _position_from_payload(str(mint), raw_position)

    history = tuple(
        _history_event_from_payload(index, raw_event) for index, raw_event in enumerate(payload.get("history") or [])
    )
    deposits = tuple(_deposit_from_payload(raw_deposit) for raw_deposit in payload.get("deposits") or [])

    checklists: dict[str, tuple[ChecklistItem, ...]] = {}
    for mint, raw_items in (payload.get("todos") or {}).items():
        if not isinstance(raw_items, list):
            raise ValueError(f"checklist for mint={mint} must be a list")
        checklists[str(mint)] = tuple(domain_checklist_item_from_payload(raw_item) for raw_item in raw_items)

    last_scanned_mint = payload.get("lastScannedMint")
    return LedgerSnapshot(
        account=account,
        positions=positions,
        history=history,
        deposits=deposits,
        last_scanned_mint=last_scanned_mint if isinstance(last_scanned_mint, str) else "",
        checklists=checklists,
    )


def domain_checklist_item_from_payload(raw_item: Any) -> ChecklistItem:
    """Normalize one checklist item from a loosely typed payload.

    Args:
        raw_item: Mapping with `id`, `text` and `done` keys.

    Returns:
        ChecklistItem: Normalized item with string id/text and boolean flag.

    Raises:
        ValueError: Raised when the item is not a mapping.
    """

    if not isinstance(raw_item, dict):
        raise ValueError("checklist item must be a JSON object")
    return ChecklistItem(
        item_id=str(raw_item.get("id", "")),
        text=str(raw_item.get("text") or ""),
        done=bool(raw_item.get("done")),
    )


def _account_from_payload(raw_user: Any, default_account: Account) -> Account:
    if not isinstance(raw_user, dict):
        return default_account
    balance = money_coerce_decimal(raw_user.get("balance"))
    if balance is None:
        return default_account
    name = raw_user.get("name")
    return Account(name=name if isinstance(name, str) and name else default_account.name, balance=balance)


def _position_to_payload(position: Position) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "qty": str(position.quantity),
        "avgPrice": str(position.average_price),
    }
    if position.name is not None:
        payload["name"] = position.name
    if position.symbol is not None:
        payload["symbol"] = position.symbol
    return payload


def _position_from_payload(mint: str, raw_position: Any) -> Position:
    if not isinstance(raw_position, dict):
        raise ValueError(f"position for mint={mint} must be a JSON object")
    return Position(
        quantity=_required_decimal(raw_position, "qty", f"positions[{mint}]"),
        average_price=_required_decimal(raw_position, "avgPrice", f"positions[{mint}]"),
        name=_optional_text(raw_position.get("name")),
        symbol=_optional_text(raw_position.get("symbol")),
    )


def _history_event_from_payload(index: int, raw_event: Any) -> HistoryEvent:
    location = f"history[{index}]"
    if not isinstance(raw_event, dict):
        raise ValueError(f"{location} must be a JSON object")

    try:
        side = TradeSide(str(raw_event.get("side", "")).strip().lower())
    except ValueError as error:
        raise ValueError(f"{location} has unsupported side={raw_event.get('side')}") from error

    mint = raw_event.get("mint")
    if not isinstance(mint, str) or not mint.strip():
        raise ValueError(f"{location} must have a non-blank mint")

    ts_ms = _required_timestamp(raw_event, location)
    fee = money_coerce_decimal(raw_event.get("fee"))
    price = _required_decimal(raw_event, "price", location)
    quantity = _required_decimal(raw_event, "qty", location)
    value = money_coerce_decimal(raw_event.get("value"))

    return HistoryEvent(
        event_id=str(raw_event.get("id") or f"{ts_ms}-{index}"),
        ts_ms=ts_ms,
        side=side,
        mint=mint,
        price=price,
        quantity=quantity,
        value=value if value is not None else price * quantity,
        fee=fee if fee is not None else Decimal("0"),
        name=_optional_text(raw_event.get("name")),
        symbol=_optional_text(raw_event.get("symbol")),
        market_cap=money_coerce_decimal(raw_event.get("marketCap")),
    )


def _deposit_from_payload(raw_deposit: Any) -> DepositEvent:
    if not isinstance(raw_deposit, dict):
        raise ValueError("deposit record must be a JSON object")
    return DepositEvent(
        ts_ms=_required_timestamp(raw_deposit, "deposit"),
        amount=_required_decimal(raw_deposit, "amount", "deposit"),
    )


def _required_decimal(raw: dict[str, Any], key: str, location: str) -> Decimal:
    value = money_coerce_decimal(raw.get(key))
    if value is None:
        raise ValueError(f"{location}.{key} must be a finite number")
    return value


def _required_timestamp(raw: dict[str, Any], location: str) -> int:
    ts_value = raw.get("ts")
    if isinstance(ts_value, bool) or not isinstance(ts_value, (int, float)):
        raise ValueError(f"{location}.ts must be an epoch-millisecond number")
    return int(ts_value)


def _optional_text(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


__all__ = [
    "domain_checklist_item_from_payload",
    "domain_history_event_to_payload",
    "domain_snapshot_from_payload",
    "domain_snapshot_to_payload",
]

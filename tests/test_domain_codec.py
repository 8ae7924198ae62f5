"""Regression tests for the snapshot JSON codec and legacy document import."""

from __future__ import annotations

from decimal import Decimal

import pytest

from tradejournal.domain import (
    Account,
    ChecklistItem,
    DepositEvent,
    HistoryEvent,
    LedgerSnapshot,
    Position,
    TradeSide,
    domain_checklist_item_from_payload,
    domain_history_event_to_payload,
    domain_snapshot_from_payload,
    domain_snapshot_to_payload,
)


DEFAULT_ACCOUNT = Account(name="Trader", balance=Decimal("65"))


def _legacy_document() -> dict[str, object]:
    """Return a journal document in the legacy `db.json` layout with JSON numbers.

    Returns:
        dict[str, object]: Legacy document.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "user": {"name": "Degen", "balance": 47.1},
        "positions": {
            "MintA": {"qty": 15, "avgPrice": 0.75, "name": "Alpha", "symbol": "ALP"},
        },
        "history": [
            {
                "id": "c2",
                "ts": 1767434400000,
                "side": "sell",
                "mint": "MintA",
                "name": "Alpha",
                "symbol": "ALP",
                "price": 2.0,
                "qty": 5,
                "value": 10,
                "fee": 4.3,
                "marketCap": 90000,
            },
            {"ts": 1767348000000, "side": "BUY", "mint": "MintA", "price": 0.5, "qty": 10},
        ],
        "deposits": [{"ts": 1767340000000, "amount": 100}],
        "activity": [{"ts": 1767340000000, "kind": "login"}],
        "lastScannedMint": "MintA",
        "todos": {"MintA": [{"id": 1, "text": "check liquidity", "done": 1}]},
    }


def test_domain_codec_imports_legacy_document() -> None:
    """Decode numeric legacy fields, default missing ones and ignore unknown keys.

    Returns:
        None: Assertions validate decoded snapshot fields.

    Raises:
        AssertionError: Raised when legacy decoding deviates.
    """

    snapshot = domain_snapshot_from_payload(_legacy_document(), default_account=DEFAULT_ACCOUNT)

    assert snapshot.account == Account(name="Degen", balance=Decimal("47.1"))
    assert snapshot.positions["MintA"] == Position(
        quantity=Decimal("15"), average_price=Decimal("0.75"), name="Alpha", symbol="ALP"
    )
    assert snapshot.history[0].event_id == "c2"
    assert snapshot.history[0].side is TradeSide.SELL
    assert snapshot.history[0].market_cap == Decimal("90000")
    assert snapshot.history[1].event_id == "1767348000000-1"
    assert snapshot.history[1].side is TradeSide.BUY
    assert snapshot.history[1].fee == Decimal("0")
    assert snapshot.history[1].value == Decimal("5.0")
    assert snapshot.deposits == (DepositEvent(ts_ms=1767340000000, amount=Decimal("100")),)
    assert snapshot.last_scanned_mint == "MintA"
    assert snapshot.checklists["MintA"] == (ChecklistItem(item_id="1", text="check liquidity", done=True),)


def test_domain_codec_falls_back_to_default_account() -> None:
    """Use the default account when the user block is missing or malformed.

    Returns:
        None: Assertions validate account fallback.

    Raises:
        AssertionError: Raised when a malformed user block is accepted.
    """

    assert domain_snapshot_from_payload({}, DEFAULT_ACCOUNT).account == DEFAULT_ACCOUNT
    assert domain_snapshot_from_payload({"user": {"name": "X", "balance": "n/a"}}, DEFAULT_ACCOUNT).account == DEFAULT_ACCOUNT
    assert domain_snapshot_from_payload({"user": {"balance": 3}}, DEFAULT_ACCOUNT).account == Account(
        name="Trader", balance=Decimal("3")
    )


def test_domain_codec_rejects_malformed_records() -> None:
    """Raise ValueError for malformed positions, history and deposits.

    Returns:
        None: Assertions validate raised errors.

    Raises:
        AssertionError: Raised when malformed input is accepted.
    """

    malformed_payloads = [
        [],
        {"positions": {"MintA": {"qty": "many", "avgPrice": 1}}},
        {"history": [{"ts": 1, "side": "hold", "mint": "MintA", "price": 1, "qty": 1}]},
        {"history": [{"ts": 1, "side": "buy", "mint": " ", "price": 1, "qty": 1}]},
        {"history": [{"ts": "yesterday", "side": "buy", "mint": "MintA", "price": 1, "qty": 1}]},
        {"deposits": [{"ts": 1}]},
        {"todos": {"MintA": "not a list"}},
    ]

    for payload in malformed_payloads:
        with pytest.raises(ValueError):
            domain_snapshot_from_payload(payload, DEFAULT_ACCOUNT)  # type: ignore[arg-type]

    with pytest.raises(ValueError):
        domain_checklist_item_from_payload("item")


def test_domain_codec_writes_decimal_strings_and_reads_them_back() -> None:
    """Write decimals as strings and decode the written document to the same snapshot.

    Returns:
        None: Assertions validate encoded layout and decoded equality.

    Raises:
        AssertionError: Raised when the stored layout changes.
    """

    event = HistoryEvent(
        event_id="evt-1",
        ts_ms=1767348000000,
        side=TradeSide.BUY,
        mint="MintA",
        price=Decimal("0.1"),
        quantity=Decimal("3"),
        value=Decimal("0.300000"),
        fee=Decimal("4.3"),
    )
    snapshot = LedgerSnapshot(
        account=Account(name="Trader", balance=Decimal("60.400000")),
        positions={"MintA": Position(quantity=Decimal("3.000000"), average_price=Decimal("0.10000000"))},
        history=(event,),
    )

    payload = domain_snapshot_to_payload(snapshot)

    assert payload["user"] == {"name": "Trader", "balance": "60.400000"}
    assert payload["positions"] == {"MintA": {"qty": "3.000000", "avgPrice": "0.10000000"}}
    assert domain_history_event_to_payload(event) == {
        "id": "evt-1",
        "ts": 1767348000000,
        "side": "buy",
        "mint": "MintA",
        "price": "0.1",
        "qty": "3",
        "value": "0.300000",
        "fee": "4.3",
    }
    assert domain_snapshot_from_payload(payload, DEFAULT_ACCOUNT) == snapshot

"""Ledger API router composition for journal commands and state reads."""
# pylint: disable=duplicate-code

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from tradejournal.config import AppSettings
from tradejournal.domain import (
    InvalidParamsError,
    LedgerError,
    LedgerSnapshot,
    domain_checklist_item_from_payload,
    domain_history_event_to_payload,
    domain_snapshot_to_payload,
)
from tradejournal.ledger import TradeLedgerService


NumericInput = int | float | str | None


class DepositRequest(BaseModel):
    """Deposit command body."""

    amount: NumericInput = None


class BuyRequest(BaseModel):
    """Buy command body."""

    model_config = ConfigDict(populate_by_name=True)

    mint: str | None = None
    price: NumericInput = None
    qty: NumericInput = None
    name: str | None = None
    symbol: str | None = None
    market_cap: NumericInput = Field(default=None, alias="marketCap")


class SellRequest(BaseModel):
    """Sell command body."""

    model_config = ConfigDict(populate_by_name=True)

    mint: str | None = None
    price: NumericInput = None
    qty: NumericInput = None
    market_cap: NumericInput = Field(default=None, alias="marketCap")


class UserRequest(BaseModel):
    """Account rename command body."""

    name: str | None = None


class LastScannedRequest(BaseModel):
    """Last scanned mint command body."""

    mint: str | None = None


class ChecklistRequest(BaseModel):
    """Checklist replacement command body."""

    mint: str | None = None
    items: list[dict[str, Any]] | None = None


def api_create_ledger_router(settings: AppSettings, ledger_service: TradeLedgerService) -> APIRouter:
    """Create ledger router exposing journal command and state endpoints.

    Args:
        settings: Runtime settings used for pagination defaults.
        ledger_service: Ledger mutation service.

    Returns:
        APIRouter: Router exposing `/ledger/*` endpoints.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if ledger_service is None:
        raise ValueError("ledger_service must not be None")

    router = APIRouter(prefix="/ledger", tags=["ledger"])

    @router.get("/state")
    def api_ledger_state() -> JSONResponse:
        """Return the current ledger snapshot payload."""

        return api_snapshot_response(ledger_service.ledger_get_state())

    @router.get("/history")
    def api_ledger_history_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
        mint: str | None = Query(default=None),
    ) -> JSONResponse:
        """List trade history newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.
            mint: Optional instrument filter.

        Returns:
            JSONResponse: History list envelope payload.

        Raises:
            RuntimeError: Raised when ledger read fails.
        """

        normalized_mint = mint.strip() if mint is not None and mint.strip() else None
        applied_limit = min(limit, settings.api_max_limit)
        history = ledger_service.ledger_get_state().history
        if normalized_mint is not None:
            history = tuple(event for event in history if event.mint == normalized_mint)
        page_events = history[offset : offset + applied_limit]

        payload = {
            "items": [domain_history_event_to_payload(event) for event in page_events],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(page_events),
                "total": len(history),
            },
            "filters": {"mint": normalized_mint},
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/deposit")
    def api_ledger_deposit(request: DepositRequest) -> JSONResponse:
        """Apply one deposit command."""

        try:
            return api_snapshot_response(ledger_service.ledger_deposit(request.amount))
        except LedgerError as error:
            return api_ledger_error_response(error)

    @router.post("/buy")
    def api_ledger_buy(request: BuyRequest) -> JSONResponse:
        """Apply one buy command."""

        try:
            snapshot = ledger_service.ledger_buy(
                mint=request.mint,
                price=request.price,
                quantity=request.qty,
                name=request.name,
                symbol=request.symbol,
                market_cap=request.market_cap,
            )
        except LedgerError as error:
            return api_ledger_error_response(error)
        return api_snapshot_response(snapshot)

    @router.post("/sell")
    def api_ledger_sell(request: SellRequest) -> JSONResponse:
        """Apply one sell command."""

        try:
            snapshot = ledger_service.ledger_sell(
                mint=request.mint,
                price=request.price,
                quantity=request.qty,
                market_cap=request.market_cap,
            )
        except LedgerError as error:
            return api_ledger_error_response(error)
        return api_snapshot_response(snapshot)

    @router.post("/reset")
    def api_ledger_reset() -> JSONResponse:
        """Reset the ledger to its seed snapshot."""

        return api_snapshot_response(ledger_service.ledger_reset())

    @router.post("/user")
    def api_ledger_update_user(request: UserRequest) -> JSONResponse:
        """Rename the journal owner."""

        try:
            return api_snapshot_response(ledger_service.ledger_update_user_name(request.name))
        except LedgerError as error:
            return api_ledger_error_response(error)

    @router.post("/last-scanned")
    def api_ledger_last_scanned(request: LastScannedRequest) -> JSONResponse:
        """Remember the last scanned mint."""

        try:
            return api_snapshot_response(ledger_service.ledger_set_last_scanned_mint(request.mint))
        except LedgerError as error:
            return api_ledger_error_response(error)

    @router.post("/checklists")
    def api_ledger_checklist(request: ChecklistRequest) -> JSONResponse:
        """Replace the checklist of one mint."""

        try:
            items = None
            if request.items is not None:
                items = [domain_checklist_item_from_payload(raw_item) for raw_item in request.items]
            return api_snapshot_response(ledger_service.ledger_set_checklist(request.mint, items))
        except LedgerError as error:
            return api_ledger_error_response(error)
        except ValueError as error:
            return api_ledger_error_response(InvalidParamsError(f"Invalid todos payload: {error}"))

    return router


def api_snapshot_response(snapshot: LedgerSnapshot) -> JSONResponse:
    """Serialize one snapshot into an HTTP 200 response."""

    return JSONResponse(content=domain_snapshot_to_payload(snapshot), status_code=status.HTTP_200_OK)


def api_ledger_error_response(error: LedgerError) -> JSONResponse:
    """Map a rejected ledger command to an HTTP 400 error envelope.

    Args:
        error: Rejected command error.

    Returns:
        JSONResponse: Error envelope with stable code and message.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload = {
        "status": "error",
        "code": error.error_code,
        "message": error.message,
    }
    return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)


__all__ = [
    "BuyRequest",
    "ChecklistRequest",
    "DepositRequest",
    "LastScannedRequest",
    "SellRequest",
    "UserRequest",
    "api_create_ledger_router",
    "api_ledger_error_response",
    "api_snapshot_response",
]

"""Journal health router reporting service and ledger storage readiness."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from tradejournal.db import DatabaseHealthPort


JOURNAL_SERVICE_NAME = "token-trade-journal"


def api_create_health_router(db_health_service: DatabaseHealthPort) -> APIRouter:
    """Create the `/health` router for the journal service.

    The endpoint answers 200 only when the ledger storage is reachable and
    migrated; an unreachable database or a missing ledger table answers 503.

    Args:
        db_health_service: Ledger storage health check.

    Returns:
        APIRouter: Router exposing `/health`.

    Raises:
        ValueError: Raised when db_health_service is None.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_journal_health() -> JSONResponse:
        """Report journal service and ledger storage readiness."""

        target = db_health_service.db_connection_label()
        try:
            storage_health = db_health_service.db_check_health()
        except ConnectionError as error:
            return api_health_response(database_status="down", detail=str(error), target=target)
        return api_health_response(
            database_status=storage_health.status,
            detail=storage_health.detail,
            target=target,
        )

    return router


def api_health_response(database_status: str, detail: str, target: str) -> JSONResponse:
    """Build the health envelope; only a fully ready ledger store is `ok`.

    Args:
        database_status: Storage check status (`ok`, `schema_missing` or `down`).
        detail: Human-readable check detail.
        target: Masked database target label.

    Returns:
        JSONResponse: 200 with status `ok`, or 503 with status `degraded`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    is_ready = database_status == "ok"
    payload = {
        "service": JOURNAL_SERVICE_NAME,
        "status": "ok" if is_ready else "degraded",
        "app": "up",
        "database": database_status,
        "detail": detail,
        "target": target,
    }
    http_status = status.HTTP_200_OK if is_ready else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=payload, status_code=http_status)


__all__ = ["JOURNAL_SERVICE_NAME", "api_create_health_router", "api_health_response"]

"""FastAPI application factory for the trade journal service."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tradejournal.analytics import TradeAnalyticsService
from tradejournal.config import AppSettings
from tradejournal.db import DatabaseHealthPort
from tradejournal.ledger import TradeLedgerService

from .routers import api_create_analytics_router, api_create_health_router, api_create_ledger_router


logger = logging.getLogger(__name__)


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    ledger_service: TradeLedgerService,
    analytics_service: TradeAnalyticsService | None = None,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        ledger_service: Ledger mutation service for journal commands.
        analytics_service: Optional analytics service; built over ledger_service when omitted.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when required dependencies are missing.
    """

    application = FastAPI(title="Token Trade Journal")
    resolved_analytics_service = analytics_service or TradeAnalyticsService(state_reader=ledger_service)

    @application.exception_handler(RequestValidationError)
    async def api_request_validation_handler(request: Request, error: RequestValidationError) -> JSONResponse:
        """Map malformed request bodies to the journal error envelope."""

        logger.warning("request validation failed path=%s errors=%d", request.url.path, len(error.errors()))
        payload = {
            "status": "error",
            "code": "INVALID_REQUEST",
            "message": "request body or query parameters are malformed",
        }
        return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service identification response."""

        return {
            "service": "token-trade-journal",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service))
    application.include_router(api_create_ledger_router(settings=settings, ledger_service=ledger_service))
    application.include_router(api_create_analytics_router(analytics_service=resolved_analytics_service))

    return application

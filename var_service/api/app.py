"""FastAPI app factory for the VaR service."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.settings import Settings
from var_service import __version__
from var_service.api.routes import create_router
from var_service.data.returns import ReturnSeriesProvider
from var_service.errors import (
    InvalidMethod,
    InvalidParameter,
    ProviderError,
    VarServiceError,
)

logger = logging.getLogger(__name__)


def _status_for(exc: VarServiceError) -> int:
    if isinstance(exc, (InvalidParameter, InvalidMethod)):
        return 400
    if isinstance(exc, ProviderError):
        return 502
    return 500


async def _handle_service_error(request: Request, exc: VarServiceError) -> JSONResponse:
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


def create_app(
    settings: Settings | None = None,
    return_provider: ReturnSeriesProvider | None = None,
) -> FastAPI:
    """Create a FastAPI app exposing the VaR and return-series routes."""
    settings = settings or Settings()
    app = FastAPI(title="VaR Estimation API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(VarServiceError, _handle_service_error)
    app.include_router(create_router(settings, return_provider))
    return app

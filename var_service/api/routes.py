"""API routes for VaR computation and return-series retrieval."""

from __future__ import annotations

from fastapi import APIRouter

from config.settings import Settings
from var_service.api.schemas import (
    FetchRequest,
    FetchResponse,
    MethodsResponse,
    PreviewRowResponse,
    VarRequest,
    VarResponse,
)
from var_service.data.returns import ReturnSeriesProvider
from var_service.risk.sampling import NormalSampler
from var_service.risk.var import VarMethod, compute_var


def create_router(
    settings: Settings,
    return_provider: ReturnSeriesProvider | None = None,
) -> APIRouter:
    """Create the API router bound to a settings object."""
    router = APIRouter()

    @router.get("/health")
    def get_health() -> dict:
        return {"status": "ok"}

    @router.get("/api/methods", response_model=MethodsResponse)
    def list_methods() -> MethodsResponse:
        return MethodsResponse(methods=[method.value for method in VarMethod])

    @router.post("/api/compute_var", response_model=VarResponse)
    def post_compute_var(request: VarRequest) -> VarResponse:
        sampler = NormalSampler(seed=settings.var.monte_carlo_seed)
        value = compute_var(
            request.method,
            request.returns,
            request.confidence,
            sampler=sampler,
            simulations=settings.var.monte_carlo_simulations,
        )
        return VarResponse(var=value)

    @router.post("/api/fetch_returns", response_model=FetchResponse)
    def post_fetch_returns(request: FetchRequest) -> FetchResponse:
        provider = return_provider or ReturnSeriesProvider.from_settings(settings)
        result = provider.fetch(request.ticker)
        return FetchResponse(
            ticker=result.ticker,
            source=result.source,
            returns=result.returns,
            preview=[
                PreviewRowResponse(date=row.date.isoformat(), ret=row.ret)
                for row in result.preview
            ],
        )

    return router

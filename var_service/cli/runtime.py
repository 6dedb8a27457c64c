"""VaR service runtime command handlers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from config.settings import Settings
from var_service.cli.registry import command
from var_service.data.returns import ReturnSeriesProvider
from var_service.reporting.var_report import build_var_report, export_var_report
from var_service.risk.sampling import NormalSampler
from var_service.risk.var import VarMethod, compute_var

logger = logging.getLogger(__name__)


def _compute(settings: Settings, method: str, returns: Sequence[float], confidence: float) -> float:
    return compute_var(
        method,
        returns,
        confidence,
        sampler=NormalSampler(seed=settings.var.monte_carlo_seed),
        simulations=settings.var.monte_carlo_simulations,
    )


@command("serve")
def cmd_serve(settings: Settings) -> None:
    """Run the HTTP API with uvicorn."""
    import uvicorn

    from var_service.api.app import create_app

    logger.info("Starting VaR API on http://%s:%s", settings.api.host, settings.api.port)
    uvicorn.run(create_app(settings), host=settings.api.host, port=settings.api.port)


@command("fetch")
def cmd_fetch(settings: Settings, ticker: str, json_output: bool = False) -> dict:
    result = ReturnSeriesProvider.from_settings(settings).fetch(ticker)
    payload = {
        "ticker": result.ticker,
        "source": result.source,
        "returns": result.returns,
        "preview": [row.as_dict() for row in result.preview],
    }
    if json_output:
        print(json.dumps(payload, indent=2))
    else:
        print(f"{result.ticker}: {len(result.returns)} returns from {result.source}")
        for row in result.preview:
            print(f"  {row.date.isoformat()}  {row.ret * 100:+.4f}%")
    return payload


@command("var")
def cmd_var(
    settings: Settings,
    method: str,
    *,
    ticker: Optional[str] = None,
    returns: Optional[List[float]] = None,
    json_output: bool = False,
) -> dict:
    """Compute VaR for explicit returns or for a fetched ticker."""
    if returns is None:
        returns = ReturnSeriesProvider.from_settings(settings).fetch(ticker).returns

    confidence = settings.var.default_confidence
    value = _compute(settings, method, returns, confidence)
    payload = {
        "method": VarMethod.parse(method).value,
        "confidence": confidence,
        "observations": len(returns),
        "var": value,
    }
    if json_output:
        print(json.dumps(payload, indent=2))
    else:
        print(f"{payload['method']} VaR @ {confidence:.2%}: {value:.6f} ({value:.4%})")
    return payload


@command("report")
def cmd_report(
    settings: Settings,
    ticker: str,
    method: str,
    *,
    output: Optional[str] = None,
    portfolio_value: float = 1_000_000.0,
    horizon_days: int = 1,
) -> Path:
    """Fetch returns, compute VaR at each report level and write a CSV report."""
    result = ReturnSeriesProvider.from_settings(settings).fetch(ticker)
    method = VarMethod.parse(method).value
    levels = {
        level: _compute(settings, method, result.returns, level)
        for level in settings.var.report_levels
    }
    rows = build_var_report(
        result.ticker,
        result.preview,
        method,
        settings.var.default_confidence,
        levels,
        portfolio_value=portfolio_value,
        horizon_days=horizon_days,
    )
    path = export_var_report(output or f"reports/{result.ticker}_var_report.csv", rows)
    logger.info("VaR report written: %s", path)
    return path

"""CLI argument parser and mode dispatcher for the VaR service entrypoint."""

from __future__ import annotations

import argparse
from typing import Any, Callable

from config.settings import Settings
from var_service.cli.registry import get_registry
from var_service.risk.var import VarMethod

MODE_CHOICES = ["serve", "fetch", "var", "report"]


def build_argument_parser() -> argparse.ArgumentParser:
    """Build the application CLI parser."""
    parser = argparse.ArgumentParser(description="Value-at-Risk estimation service")
    parser.add_argument("mode", choices=MODE_CHOICES)
    parser.add_argument("--ticker", default=None)
    parser.add_argument("--returns", nargs="+", type=float, default=None)
    parser.add_argument(
        "--method",
        default=VarMethod.HISTORICAL.value,
        help="historical | parametric | montecarlo",
    )
    parser.add_argument("--confidence", type=float, default=None)
    parser.add_argument("--simulations", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument(
        "--sources",
        nargs="+",
        default=None,
        help="Ordered price sources, e.g. yahoo alpha_vantage",
    )
    parser.add_argument("--lookback-days", type=int, default=None)
    parser.add_argument("--portfolio-value", type=float, default=1_000_000.0)
    parser.add_argument("--horizon-days", type=int, default=1)
    parser.add_argument("--output", default=None)
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    return parser


def apply_common_settings(args: argparse.Namespace, settings: Settings) -> None:
    """Apply CLI overrides to settings before dispatch."""
    if args.sources:
        settings.data.sources = [name.strip().lower() for name in args.sources]
    if args.lookback_days is not None:
        settings.data.lookback_days = args.lookback_days
    if args.simulations is not None:
        settings.var.monte_carlo_simulations = args.simulations
    if args.seed is not None:
        settings.var.monte_carlo_seed = args.seed
    if args.confidence is not None:
        settings.var.default_confidence = args.confidence
    if args.host:
        settings.api.host = args.host
    if args.port is not None:
        settings.api.port = args.port


def dispatch(
    args: argparse.Namespace,
    settings: Settings,
    *,
    handlers: dict[str, Callable[..., Any]] | None = None,
) -> Any:
    """Dispatch parsed args to the selected runtime mode.

    `handlers` defaults to the ``@command`` registry populated by
    ``var_service.cli.runtime``.
    """
    handlers = handlers if handlers is not None else get_registry()
    mode = args.mode

    if mode == "serve":
        return handlers["serve"](settings)

    if mode == "fetch":
        if not args.ticker:
            raise SystemExit("--ticker is required for fetch")
        return handlers["fetch"](settings, args.ticker, json_output=args.json)

    if mode == "var":
        if not args.ticker and not args.returns:
            raise SystemExit("--ticker or --returns is required for var")
        return handlers["var"](
            settings,
            args.method,
            ticker=args.ticker,
            returns=args.returns,
            json_output=args.json,
        )

    if mode == "report":
        if not args.ticker:
            raise SystemExit("--ticker is required for report")
        return handlers["report"](
            settings,
            args.ticker,
            args.method,
            output=args.output,
            portfolio_value=args.portfolio_value,
            horizon_days=args.horizon_days,
        )

    raise SystemExit(f"Unknown mode: {mode}")

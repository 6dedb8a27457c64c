"""CSV VaR report: preview rows, run parameters and VaR at each level."""

from __future__ import annotations

import csv
import math
from pathlib import Path
from typing import Dict, List, Sequence

from var_service.data.models import PreviewRow
from var_service.errors import InvalidParameter


def scale_var(var: float, horizon_days: int = 1) -> float:
    """Square-root-of-time scaling of a one-day VaR."""
    if horizon_days < 1:
        raise InvalidParameter(f"horizon_days must be >= 1, got {horizon_days}")
    return var * math.sqrt(horizon_days)


def build_var_report(
    ticker: str,
    preview: Sequence[PreviewRow],
    method: str,
    confidence: float,
    var_levels: Dict[float, float],
    *,
    portfolio_value: float = 1_000_000.0,
    horizon_days: int = 1,
) -> List[List[str]]:
    """
    Build report rows in three blocks separated by blank rows.

    Args:
        ticker:          Symbol the returns were fetched for.
        preview:         Recent (date, return) rows.
        method:          VaR method used.
        confidence:      Headline confidence level of the run.
        var_levels:      One-day VaR keyed by confidence level.
        portfolio_value: Notional used for the VaR amount column.
        horizon_days:    Holding period for square-root-of-time scaling.
    """
    rows: List[List[str]] = [["Date", "Return"]]
    rows.extend([row.date.isoformat(), f"{row.ret * 100:.4f}"] for row in preview)

    rows.append([])
    rows.append(["Parameter", "Value"])
    rows.append(["Ticker", ticker])
    rows.append(["Portfolio Value", f"{portfolio_value:.2f}"])
    rows.append(["Horizon", f"{horizon_days}-day"])
    rows.append(["Confidence", f"{confidence * 100:g}%"])
    rows.append(["Method", method])

    rows.append([])
    rows.append(["VaR Level", "VaR (%)", "VaR Amount"])
    for level in sorted(var_levels):
        scaled = scale_var(var_levels[level], horizon_days)
        rows.append(
            [
                f"{level * 100:g}%",
                f"{scaled * 100:.4f}",
                f"{scaled * portfolio_value:.2f}",
            ]
        )
    return rows


def export_var_report(path: str | Path, rows: Sequence[Sequence[str]]) -> Path:
    """Write report rows to ``path`` as CSV, creating parent directories."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        for row in rows:
            writer.writerow(row)
    return out

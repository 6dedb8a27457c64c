"""Return-series derivation with ordered provider fallback.

Usage:
    from var_service.data.returns import ReturnSeriesProvider

    result = ReturnSeriesProvider.from_settings(Settings()).fetch("aapl")
    result.returns   # chronological simple daily returns
    result.preview   # last five (date, return) rows, oldest first
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Sequence, Tuple

import numpy as np

from config.settings import Settings
from var_service.data.models import PreviewRow, PricePoint, ReturnSeriesResult
from var_service.data.providers import PriceProvider, get_provider
from var_service.errors import InvalidParameter, ProviderError, UpstreamError

logger = logging.getLogger(__name__)

PREVIEW_ROWS = 5


def normalize_prices(prices: Iterable[PricePoint]) -> List[PricePoint]:
    """Sort ascending by date, keeping the last observation for a repeated date."""
    by_date = {}
    for point in prices:
        by_date[point.date] = point
    return [by_date[day] for day in sorted(by_date)]


def derive_returns(
    prices: Sequence[PricePoint],
    preview_rows: int = PREVIEW_ROWS,
) -> Tuple[List[float], List[PreviewRow]]:
    """
    Simple daily returns and a recent-history preview.

    Args:
        prices:       Chronologically sorted price points.
        preview_rows: Maximum number of trailing rows in the preview.

    Returns:
        (returns, preview) where returns[i] = (p[i+1] - p[i]) / p[i] and the
        preview holds the last ``preview_rows`` (date, return) pairs, oldest
        first. Fewer than two prices yields two empty lists.
    """
    if len(prices) < 2:
        return [], []

    values = np.array([point.price for point in prices], dtype=float)
    returns = ((values[1:] - values[:-1]) / values[:-1]).tolist()

    dates = [point.date for point in prices[1:]]
    tail = max(preview_rows, 0)
    preview = [PreviewRow(date=day, ret=ret) for day, ret in zip(dates, returns)]
    preview = preview[-tail:] if tail else []
    return returns, preview


class ReturnSeriesProvider:
    """
    Fetch a trailing price window and convert it to returns.

    Providers are tried in order; the first one to return without a
    ProviderError wins. A ConfigurationError stops the chain immediately.
    """

    def __init__(
        self,
        providers: Sequence[PriceProvider],
        lookback_days: int = 365,
        preview_rows: int = PREVIEW_ROWS,
        clock: Callable[[], datetime] | None = None,
    ):
        if not providers:
            raise InvalidParameter("ReturnSeriesProvider needs at least one price provider")
        self._providers = list(providers)
        self._lookback_days = lookback_days
        self._preview_rows = preview_rows
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReturnSeriesProvider":
        providers = [get_provider(name, settings) for name in settings.data.sources]
        return cls(
            providers,
            lookback_days=settings.data.lookback_days,
            preview_rows=settings.data.preview_rows,
        )

    @property
    def providers(self) -> List[PriceProvider]:
        return list(self._providers)

    def window(self) -> Tuple[datetime, datetime]:
        end = self._clock()
        return end - timedelta(days=self._lookback_days), end

    def fetch(self, ticker: str) -> ReturnSeriesResult:
        symbol = (ticker or "").strip().upper()
        if not symbol:
            raise InvalidParameter("ticker cannot be empty")

        start, end = self.window()
        failures: List[str] = []
        last_error: ProviderError | None = None

        for provider in self._providers:
            logger.info("Fetching %s from %s", symbol, provider.name)
            try:
                prices = provider.fetch_prices(symbol, start, end)
            except ProviderError as exc:
                logger.warning("%s failed for %s: %s", provider.name, symbol, exc)
                failures.append(f"{provider.name}: {exc}")
                last_error = exc
                continue

            prices = normalize_prices(prices)
            returns, preview = derive_returns(prices, self._preview_rows)
            logger.info(
                "Computed %s returns for %s from %s (%s prices)",
                len(returns),
                symbol,
                provider.name,
                len(prices),
            )
            return ReturnSeriesResult(
                ticker=symbol,
                source=provider.name,
                returns=returns,
                preview=preview,
                prices=prices,
            )

        raise UpstreamError(
            f"All price sources failed for {symbol}: " + "; ".join(failures)
        ) from last_error

"""Daily price provider adapters and factory helpers."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, List, Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

import pandas as pd
import yfinance as yf

from config.settings import Settings
from var_service.data.models import PricePoint
from var_service.errors import ConfigurationError, DecodeError, ProviderError, UpstreamError

logger = logging.getLogger(__name__)

_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko)"


class PriceProvider(Protocol):
    """Provider contract for daily closing prices over a date window."""

    name: str

    def fetch_prices(self, symbol: str, start: datetime, end: datetime) -> List[PricePoint]: ...


def _positive_price(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(price) or price <= 0:
        return None
    return price


def _utc_date(value: Any) -> Optional[date]:
    """Epoch seconds to a UTC calendar date; unconvertible values count as missing."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc).date()
    except (TypeError, ValueError, OverflowError, OSError):
        return None


def _read_json(request: "Request | str", timeout: float, label: str) -> dict:
    try:
        with urlopen(request, timeout=timeout) as response:  # noqa: S310
            raw = response.read()
    except HTTPError as exc:
        raise ProviderError(f"{label} request failed ({exc.code})") from exc
    except URLError as exc:
        raise ProviderError(f"{label} network error: {exc.reason}") from exc
    except (TimeoutError, OSError) as exc:
        raise ProviderError(f"{label} network error: {exc}") from exc
    except ValueError as exc:
        # http.client.InvalidURL and malformed request targets
        raise ProviderError(f"{label} invalid request: {exc}") from exc

    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"{label} returned invalid JSON") from exc
    if not isinstance(payload, dict):
        raise DecodeError(f"{label} returned an unexpected JSON document")
    return payload


@dataclass
class YahooChartProvider:
    """Yahoo Finance chart API (daily adjusted closes), no API key required."""

    base_url: str = "https://query2.finance.yahoo.com"
    timeout: float = 20.0
    name: str = "yahoo"

    def _build_url(self, symbol: str, start: datetime, end: datetime) -> str:
        query = urlencode(
            {
                "period1": int(start.timestamp()),
                "period2": int(end.timestamp()),
                "interval": "1d",
                "includePrePost": "false",
                "events": "history",
            }
        )
        return f"{self.base_url}/v8/finance/chart/{quote(symbol, safe='')}?{query}"

    @staticmethod
    def _parse_chart(payload: dict) -> List[PricePoint]:
        chart = payload.get("chart")
        if not isinstance(chart, dict):
            raise DecodeError("Yahoo response missing chart")
        if chart.get("error") is not None:
            error = chart["error"]
            message = error.get("description") if isinstance(error, dict) else error
            raise UpstreamError(f"Yahoo returned an error: {message}")

        results = chart.get("result") or []
        if not isinstance(results, list) or not results or not isinstance(results[0], dict):
            raise DecodeError("Yahoo response missing chart result")
        result = results[0]

        timestamps = result.get("timestamp") or []
        try:
            closes = result["indicators"]["adjclose"][0]["adjclose"] or []
        except (KeyError, IndexError, TypeError):
            closes = []
        if not isinstance(timestamps, list) or not isinstance(closes, list):
            raise DecodeError("Yahoo chart timestamp/adjclose must be arrays")

        points: List[PricePoint] = []
        for ts, raw_price in zip(timestamps, closes):
            price = _positive_price(raw_price)
            day = _utc_date(ts)
            if day is None or price is None:
                continue
            points.append(PricePoint(date=day, price=price))
        return points

    def fetch_prices(self, symbol: str, start: datetime, end: datetime) -> List[PricePoint]:
        url = self._build_url(symbol, start, end)
        logger.info("Requesting Yahoo chart: %s", url)
        request = Request(url, headers={"User-Agent": _USER_AGENT, "Accept": "application/json"})
        payload = _read_json(request, self.timeout, "Yahoo")
        points = self._parse_chart(payload)
        logger.info("Yahoo returned %s points for %s", len(points), symbol)
        return points


@dataclass
class AlphaVantageProvider:
    """Alpha Vantage daily time series provider (free tier)."""

    api_key: str | None = None
    base_url: str = "https://www.alphavantage.co/query"
    outputsize: str = "compact"
    timeout: float = 20.0
    name: str = "alpha_vantage"

    def _resolve_api_key(self) -> str:
        key = (self.api_key or "").strip()
        if not key:
            raise ConfigurationError("ALPHA_VANTAGE_API_KEY is required for AlphaVantageProvider")
        return key

    @staticmethod
    def _normalize_symbol(symbol: str) -> str:
        clean = (symbol or "").strip().upper()
        if not clean:
            raise ProviderError("Alpha Vantage symbol cannot be empty")
        if clean.endswith(".L"):
            clean = clean[:-2] + ".LON"
        return clean

    @staticmethod
    def _parse_time_series(payload: dict) -> List[PricePoint]:
        for marker in ("Note", "Information", "Error Message"):
            if marker in payload:
                raise UpstreamError(f"Alpha Vantage returned {marker.lower()}: {payload[marker]}")

        series = payload.get("Time Series (Daily)")
        if not isinstance(series, dict):
            raise DecodeError("Alpha Vantage response missing time series")
        if not series:
            return []

        frame = pd.DataFrame.from_dict(series, orient="index")
        if "4. close" not in frame.columns:
            raise DecodeError("Alpha Vantage time series missing '4. close'")
        frame.index = pd.to_datetime(frame.index, errors="coerce")
        closes = pd.to_numeric(frame["4. close"], errors="coerce")
        closes = closes[(closes > 0) & closes.index.notna()].sort_index()

        return [PricePoint(date=ts.date(), price=float(price)) for ts, price in closes.items()]

    def fetch_prices(self, symbol: str, start: datetime, end: datetime) -> List[PricePoint]:
        api_key = self._resolve_api_key()
        ticker = self._normalize_symbol(symbol)
        params = {
            "function": "TIME_SERIES_DAILY",
            "symbol": ticker,
            "outputsize": self.outputsize,
            "apikey": api_key,
            "datatype": "json",
        }
        url = f"{self.base_url}?{urlencode(params)}"
        logger.info("Requesting Alpha Vantage daily series: %s", url.replace(api_key, "***"))
        payload = _read_json(url, self.timeout, "Alpha Vantage")
        points = self._parse_time_series(payload)
        logger.info("Alpha Vantage returned %s points for %s", len(points), ticker)
        return points


@dataclass
class YFinanceProvider:
    """Daily adjusted closes via the yfinance library."""

    name: str = "yfinance"

    def fetch_prices(self, symbol: str, start: datetime, end: datetime) -> List[PricePoint]:
        ticker = yf.Ticker(symbol)
        try:
            frame = ticker.history(
                start=start.strftime("%Y-%m-%d"),
                end=end.strftime("%Y-%m-%d"),
                interval="1d",
                auto_adjust=True,
            )
        except Exception as exc:  # pylint: disable=broad-except
            raise ProviderError(f"yfinance request failed for {symbol}: {exc}") from exc

        if frame is None or frame.empty or "Close" not in frame.columns:
            raise UpstreamError(f"yfinance returned no data for {symbol}")

        points: List[PricePoint] = []
        for ts, raw_price in frame["Close"].items():
            price = _positive_price(raw_price)
            if price is None:
                continue
            points.append(PricePoint(date=pd.Timestamp(ts).date(), price=price))
        logger.info("yfinance returned %s points for %s", len(points), symbol)
        return points


def get_provider(name: str, settings: Settings | None = None) -> PriceProvider:
    """Factory for known providers.

    Implemented: yahoo, alpha_vantage, yfinance
    """
    settings = settings or Settings()
    data = settings.data
    normalized = (name or "").strip().lower()
    if normalized in {"yahoo", "yahoo_chart"}:
        return YahooChartProvider(
            base_url=data.yahoo_base_url,
            timeout=data.request_timeout_seconds,
        )
    if normalized in {"alpha_vantage", "alphavantage"}:
        return AlphaVantageProvider(
            api_key=data.alpha_vantage_api_key,
            base_url=data.alpha_vantage_base_url,
            outputsize=data.alpha_vantage_outputsize,
            timeout=data.request_timeout_seconds,
        )
    if normalized in {"yfinance", "yf"}:
        return YFinanceProvider()

    raise ConfigurationError(f"Unknown price source '{name}'")

"""Centralised configuration. All settings flow from here.

Add new parameters here rather than scattering magic numbers through the code.
Override any value via environment variables (or a local .env file) or by
passing a custom Settings object to each component.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _env_csv(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_list(name: str, default: str) -> List[str]:
    return [item.lower() for item in _env_csv(name, default)]


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else None


@dataclass
class DataConfig:
    # Tried in order, first success wins: yahoo | alpha_vantage | yfinance
    sources: List[str] = field(
        default_factory=lambda: _env_list("PRICE_SOURCES", "yahoo,alpha_vantage")
    )
    lookback_days: int = 365
    request_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("REQUEST_TIMEOUT_SECONDS", "20"))
    )
    yahoo_base_url: str = "https://query2.finance.yahoo.com"
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    alpha_vantage_outputsize: str = "compact"  # compact = last 100 bars
    alpha_vantage_api_key: str = field(
        default_factory=lambda: os.getenv("ALPHA_VANTAGE_API_KEY")
        or os.getenv("ALPHA_VANTAGE_KEY", "")
    )
    preview_rows: int = 5


@dataclass
class VarConfig:
    default_confidence: float = 0.95
    monte_carlo_simulations: int = 10_000
    # Unset → fresh entropy per Monte Carlo run
    monte_carlo_seed: Optional[int] = field(
        default_factory=lambda: _env_optional_int("MONTE_CARLO_SEED")
    )
    report_levels: Tuple[float, ...] = (0.95, 0.99)


@dataclass
class ApiConfig:
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
    # Matched verbatim against the request Origin header
    cors_origins: List[str] = field(default_factory=lambda: _env_csv("CORS_ORIGINS", "*"))


@dataclass
class Settings:
    data: DataConfig = field(default_factory=DataConfig)
    var: VarConfig = field(default_factory=VarConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

"""Pytest configuration for the VaR service test suite."""

from datetime import date, datetime, timedelta, timezone

import pytest

from var_service.data.models import PricePoint

FIXED_NOW = datetime(2024, 6, 3, 12, 0, tzinfo=timezone.utc)


class FakePriceProvider:
    """In-memory price provider that records every call."""

    def __init__(self, name, prices=None, error=None):
        self.name = name
        self._prices = list(prices or [])
        self._error = error
        self.calls = []

    def fetch_prices(self, symbol, start, end):
        self.calls.append((symbol, start, end))
        if self._error is not None:
            raise self._error
        return list(self._prices)


def make_prices(values, start=date(2024, 1, 2)):
    return [PricePoint(date=start + timedelta(days=i), price=v) for i, v in enumerate(values)]


@pytest.fixture
def fake_provider():
    """Factory for FakePriceProvider instances."""
    return FakePriceProvider


@pytest.fixture
def prices():
    """Factory for consecutive-day price series."""
    return make_prices


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW

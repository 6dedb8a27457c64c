"""Core data structures for price and return series."""

from dataclasses import dataclass, field
from datetime import date
from typing import List


@dataclass(frozen=True)
class PricePoint:
    """A single daily closing price."""

    date: date
    price: float

    def __post_init__(self) -> None:
        if not self.price > 0:
            raise ValueError("PricePoint.price must be positive")


@dataclass(frozen=True)
class PreviewRow:
    """A (date, return) pair surfaced for display."""

    date: date
    ret: float

    def as_dict(self) -> dict:
        return {"date": self.date.isoformat(), "return": self.ret}


@dataclass
class ReturnSeriesResult:
    """Returns derived from one provider's price history."""

    ticker: str
    source: str
    returns: List[float] = field(default_factory=list)
    preview: List[PreviewRow] = field(default_factory=list)
    prices: List[PricePoint] = field(default_factory=list)

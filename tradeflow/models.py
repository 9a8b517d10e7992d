"""Journal entity tree: Strategy -> Month -> Trade, plus the signed-in identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

Direction = Literal["Long", "Short"]
Result = Literal["Win", "Loss", "BE"]

DIRECTIONS: tuple[str, ...] = ("Long", "Short")
RESULTS: tuple[str, ...] = ("Win", "Loss", "BE")

DEFAULT_PAIR = "EURUSD"

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


@dataclass
class Trade:
    id: str
    date: str  # day-of-month label, not validated against a calendar
    pair: str
    direction: Direction
    rr: float
    result: Result
    pnl_dollar: float
    pnl_percent: float
    max_rr: float | None = None  # highest multiple reached, informational
    screenshot: str | None = None


@dataclass
class Month:
    id: str
    name: str
    trades: list[Trade] = field(default_factory=list)
    note: str | None = None

    def get_trade(self, trade_id: str) -> Trade | None:
        for t in self.trades:
            if t.id == trade_id:
                return t
        return None


@dataclass
class Strategy:
    id: str
    name: str
    months: list[Month] = field(default_factory=list)
    note: str | None = None

    def get_month(self, month_id: str) -> Month | None:
        for m in self.months:
            if m.id == month_id:
                return m
        return None

    @property
    def trade_count(self) -> int:
        return sum(len(m.trades) for m in self.months)


@dataclass(frozen=True)
class Identity:
    """Signed-in user as reported by the session provider."""
    id: str
    name: str
    email: str
    avatar: str | None = None


def new_trade_fields(month: Month) -> dict:
    """Field values for a freshly added trade.

    The pair defaults to the month's first trade.
    """
    pair = month.trades[0].pair if month.trades else DEFAULT_PAIR
    return {
        "date": "1",
        "pair": pair,
        "direction": "Long",
        "rr": 2.0,
        "result": "BE",
        "pnl_dollar": 0.0,
        "pnl_percent": 0.0,
        "max_rr": 0.0,
    }


def month_display_name(month_index: int, year: int) -> str:
    """'January 2025' from a 0-based month index and a year."""
    return f"{MONTH_NAMES[month_index]} {year}"


def year_options(today: date | None = None) -> list[int]:
    """Years offered by the month picker: two back, five ahead."""
    current = (today or date.today()).year
    return list(range(current - 2, current + 6))

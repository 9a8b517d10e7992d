"""Month performance statistics: win rate, net P/L and the equity curve."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

import pandas as pd

from .models import Trade


@dataclass(frozen=True)
class EquityPoint:
    index: int
    equity: float


@dataclass(frozen=True)
class MonthStats:
    win_rate: int
    net_pnl: float
    equity_curve: list[EquityPoint] = field(default_factory=list)

    @property
    def total_trades(self) -> int:
        return len(self.equity_curve) - 1 if self.equity_curve else 0


def _round_half_up(value: float) -> int:
    # round() would give 2 for 2.5; win rates follow the usual half-up rule
    return int(math.floor(value + 0.5))


def _finite_or_zero(value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def win_rate(trades: list[Trade]) -> int:
    """Percentage of winning trades, 0 for an empty month."""
    if not trades:
        return 0
    wins = sum(1 for t in trades if t.result == "Win")
    return _round_half_up(100 * wins / len(trades))


def equity_curve(trades: Iterable[Trade]) -> list[EquityPoint]:
    """Cumulative pnl_percent in display order, starting from a (0, 0) origin."""
    points = [EquityPoint(index=0, equity=0.0)]
    running = 0.0
    for i, t in enumerate(trades, start=1):
        running += _finite_or_zero(t.pnl_percent)
        points.append(EquityPoint(index=i, equity=running))
    return points


def compute_stats(trades: list[Trade]) -> MonthStats:
    """Derive all month statistics from scratch. No caching."""
    curve = equity_curve(trades)
    return MonthStats(
        win_rate=win_rate(trades),
        net_pnl=curve[-1].equity,
        equity_curve=curve,
    )


def equity_frame(stats: MonthStats) -> pd.DataFrame:
    """Equity curve as a DataFrame with `index` and `equity` columns."""
    return pd.DataFrame(
        [{"index": p.index, "equity": p.equity} for p in stats.equity_curve],
        columns=["index", "equity"],
    )

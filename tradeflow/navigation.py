"""View pointer into the journal tree and breadcrumb trail."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .models import Month, Strategy

ViewKind = Literal["dashboard", "strategy", "month"]


@dataclass(frozen=True)
class View:
    kind: ViewKind = "dashboard"
    strategy_id: str | None = None
    month_id: str | None = None


DASHBOARD = View()


def strategy_view(strategy_id: str) -> View:
    return View(kind="strategy", strategy_id=strategy_id)


def month_view(strategy_id: str, month_id: str) -> View:
    return View(kind="month", strategy_id=strategy_id, month_id=month_id)


def resolve(
    view: View,
    strategies: list[Strategy],
) -> tuple[View, Strategy | None, Month | None]:
    """Return the deepest still-valid view with its strategy and month.

    A view whose month or strategy was deleted falls back to its parent.
    """
    if view.kind == "dashboard" or view.strategy_id is None:
        return DASHBOARD, None, None
    strategy = next((s for s in strategies if s.id == view.strategy_id), None)
    if strategy is None:
        return DASHBOARD, None, None
    if view.kind == "month" and view.month_id is not None:
        month = strategy.get_month(view.month_id)
        if month is not None:
            return view, strategy, month
    return strategy_view(strategy.id), strategy, None


def breadcrumbs(view: View, strategies: list[Strategy], home_label: str = "Home") -> list[tuple[str, View]]:
    """(label, target view) pairs from Home down to the current view."""
    view, strategy, month = resolve(view, strategies)
    crumbs = [(home_label, DASHBOARD)]
    if strategy is not None:
        crumbs.append((strategy.name, strategy_view(strategy.id)))
    if month is not None:
        crumbs.append((month.name, view))
    return crumbs

"""DataFrame view of a month's trades for the editable grid, and edit diffing."""

from __future__ import annotations

import math

import pandas as pd
import structlog

from .models import Month
from .trade_updates import (
    SetDate,
    SetDirection,
    SetMaxRR,
    SetPair,
    SetPnlDollar,
    SetResult,
    SetRR,
    TradeUpdate,
)

logger = structlog.get_logger()

COLUMNS = ["id", "date", "pair", "direction", "rr", "result", "pnl_dollar", "pnl_percent", "max_rr"]
DERIVED_COLUMNS = ["id", "pnl_percent"]
DELETE_COLUMN = "delete"


def _finite(value) -> float:
    """Float cell value; a cleared or non-finite cell is rejected."""
    if pd.isna(value):
        raise ValueError("empty cell")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value {number}")
    return number


# Grid column order is also the order edits are applied in, so a dollar
# figure typed alongside a result change is kept as typed.
_EDITABLE = [
    ("date", lambda v: SetDate(str(v).strip())),
    ("pair", lambda v: SetPair(str(v).strip().upper())),
    ("direction", lambda v: SetDirection(str(v))),
    ("rr", lambda v: SetRR(_finite(v))),
    ("result", lambda v: SetResult(str(v))),
    ("pnl_dollar", lambda v: SetPnlDollar(_finite(v))),
    ("max_rr", lambda v: SetMaxRR(None if pd.isna(v) else _finite(v))),
]


def trades_frame(month: Month) -> pd.DataFrame:
    """One row per trade in display order, plus an unchecked delete column."""
    rows = [
        {
            "id": t.id,
            "date": t.date,
            "pair": t.pair,
            "direction": t.direction,
            "rr": float(t.rr),
            "result": t.result,
            "pnl_dollar": float(t.pnl_dollar),
            "pnl_percent": float(t.pnl_percent),
            "max_rr": t.max_rr,
        }
        for t in month.trades
    ]
    df = pd.DataFrame(rows, columns=COLUMNS)
    df[DELETE_COLUMN] = False
    return df


def _changed(old, new) -> bool:
    if pd.isna(old) and pd.isna(new):
        return False
    if pd.isna(old) or pd.isna(new):
        return True
    return old != new


def edits_from_frames(
    before: pd.DataFrame,
    after: pd.DataFrame,
) -> tuple[list[tuple[str, TradeUpdate]], list[str]]:
    """Compare the grid before and after editing.

    Returns (updates, deletions): updates as (trade_id, command) pairs in
    grid order, deletions as trade ids. Rows marked for deletion produce no
    updates. Cells that cannot be converted (text or an empty value in a
    number column) are skipped with a warning.
    """
    old_rows = {row["id"]: row for row in before.to_dict("records")}
    updates: list[tuple[str, TradeUpdate]] = []
    deletions: list[str] = []

    for row in after.to_dict("records"):
        trade_id = row.get("id")
        old = old_rows.get(trade_id)
        if old is None:
            continue
        if bool(row.get(DELETE_COLUMN)):
            deletions.append(trade_id)
            continue
        for column, make in _EDITABLE:
            if not _changed(old.get(column), row.get(column)):
                continue
            try:
                updates.append((trade_id, make(row.get(column))))
            except (TypeError, ValueError) as e:
                logger.warning("trade_cell_invalid", trade_id=trade_id, column=column, error=str(e))

    return updates, deletions

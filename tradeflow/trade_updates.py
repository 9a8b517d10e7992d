"""Typed trade edits and the P/L derivation that runs on result and RR changes.

Each editable field has its own command. Applying a command returns the
edited trade and the changed fields (keyed by Trade attribute name), which
is what gets persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from .models import Direction, Result, Trade


@dataclass(frozen=True)
class SetDate:
    value: str


@dataclass(frozen=True)
class SetPair:
    value: str


@dataclass(frozen=True)
class SetDirection:
    value: Direction


@dataclass(frozen=True)
class SetRR:
    value: float


@dataclass(frozen=True)
class SetResult:
    value: Result


@dataclass(frozen=True)
class SetPnlDollar:
    value: float


@dataclass(frozen=True)
class SetMaxRR:
    value: float | None


TradeUpdate = Union[SetDate, SetPair, SetDirection, SetRR, SetResult, SetPnlDollar, SetMaxRR]

_FIELD_BY_COMMAND: dict[type, str] = {
    SetDate: "date",
    SetPair: "pair",
    SetDirection: "direction",
    SetRR: "rr",
    SetResult: "result",
    SetPnlDollar: "pnl_dollar",
    SetMaxRR: "max_rr",
}


def field_name(update: TradeUpdate) -> str:
    """Trade attribute a command writes to."""
    try:
        return _FIELD_BY_COMMAND[type(update)]
    except KeyError:
        raise TypeError(f"Unknown trade update: {update!r}") from None


def derive_pnl(result: Result, rr: float, pnl_dollar: float) -> tuple[float, float]:
    """Return (pnl_percent, pnl_dollar) for a result/RR pair.

    A win books the RR as percent and makes the dollar figure positive, a loss
    books -1 and makes it negative, and a break-even zeroes both.
    """
    if result == "Win":
        return float(rr), abs(pnl_dollar) if pnl_dollar < 0 else pnl_dollar
    if result == "Loss":
        return -1.0, -abs(pnl_dollar) if pnl_dollar > 0 else pnl_dollar
    return 0.0, 0.0


def apply_update(trade: Trade, update: TradeUpdate) -> tuple[Trade, dict]:
    """Apply one edit. Returns (updated trade, changed fields)."""
    name = field_name(update)
    updated = replace(trade, **{name: update.value})
    changes: dict = {name: update.value}

    if isinstance(update, (SetResult, SetRR)):
        pnl_percent, pnl_dollar = derive_pnl(updated.result, updated.rr, updated.pnl_dollar)
        updated = replace(updated, pnl_percent=pnl_percent, pnl_dollar=pnl_dollar)
        changes["pnl_percent"] = pnl_percent
        changes["pnl_dollar"] = pnl_dollar

    return updated, changes

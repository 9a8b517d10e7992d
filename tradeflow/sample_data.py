"""Bundled guest-mode journal."""

from __future__ import annotations

from pathlib import Path

import yaml

from .models import Month, Strategy, Trade

SAMPLE_PATH = Path(__file__).with_name("sample_data.yaml")


def _trade(raw: dict) -> Trade:
    max_rr = raw.get("max_rr")
    return Trade(
        id=str(raw["id"]),
        date=str(raw.get("date", "1")),
        pair=raw.get("pair", ""),
        direction=raw.get("direction", "Long"),
        rr=float(raw.get("rr", 0)),
        result=raw.get("result", "BE"),
        pnl_dollar=float(raw.get("pnl_dollar", 0)),
        pnl_percent=float(raw.get("pnl_percent", 0)),
        max_rr=float(max_rr) if max_rr is not None else None,
    )


def load_sample_strategies(path: Path | str = SAMPLE_PATH) -> list[Strategy]:
    """Fresh copy of the sample tree; callers may mutate it freely."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    return [
        Strategy(
            id=str(s["id"]),
            name=s["name"],
            note=s.get("note"),
            months=[
                Month(
                    id=str(m["id"]),
                    name=m["name"],
                    note=m.get("note"),
                    trades=[_trade(t) for t in m.get("trades", [])],
                )
                for m in s.get("months", [])
            ],
        )
        for s in data.get("strategies", [])
    ]

"""Supabase-backed journal store.

Rows come back snake_case with numeric columns sometimes serialized as
strings. Each table has a pydantic row model that coerces them before they
become entity dataclasses. Months and trades are fetched as nested
relations of strategies in a single query.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator
import structlog
from supabase import Client

from .models import Month, Strategy, Trade

logger = structlog.get_logger()

NESTED_SELECT = "*, months(*, trades(*))"

# Trade attribute -> trades column
TRADE_COLUMNS = {
    "date": "date",
    "pair": "pair",
    "direction": "direction",
    "rr": "rr",
    "result": "result",
    "pnl_dollar": "pnl_dollar",
    "pnl_percent": "pnl_percent",
    "max_rr": "max_rr",
    "screenshot": "screenshot",
}


class StoreError(RuntimeError):
    """A store call failed; the remote state is unknown or unchanged."""


# --- Row models ---

class _Row(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    created_at: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)


class TradeRow(_Row):
    date: str = "1"
    pair: str = ""
    direction: str = "Long"
    rr: float = 0.0
    result: str = "BE"
    pnl_dollar: float = 0.0
    pnl_percent: float = 0.0
    max_rr: float | None = None
    screenshot: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def stringify_date(cls, v):
        return "1" if v is None else str(v)

    @field_validator("rr", "pnl_dollar", "pnl_percent", mode="before")
    @classmethod
    def null_to_zero(cls, v):
        return 0.0 if v is None or v == "" else v

    def to_trade(self) -> Trade:
        return Trade(
            id=self.id,
            date=self.date,
            pair=self.pair,
            direction=self.direction,
            rr=self.rr,
            result=self.result,
            pnl_dollar=self.pnl_dollar,
            pnl_percent=self.pnl_percent,
            max_rr=self.max_rr,
            screenshot=self.screenshot,
        )


class MonthRow(_Row):
    name: str
    note: str | None = None
    trades: list[TradeRow] = []

    @field_validator("trades", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return v or []

    def to_month(self) -> Month:
        trades = sorted(self.trades, key=lambda t: t.created_at or "")
        return Month(id=self.id, name=self.name, note=self.note, trades=[t.to_trade() for t in trades])


class StrategyRow(_Row):
    name: str
    note: str | None = None
    months: list[MonthRow] = []

    @field_validator("months", mode="before")
    @classmethod
    def null_to_empty(cls, v):
        return v or []

    def to_strategy(self) -> Strategy:
        months = sorted(self.months, key=lambda m: m.created_at or "")
        return Strategy(id=self.id, name=self.name, note=self.note, months=[m.to_month() for m in months])


def trade_columns(fields: dict) -> dict:
    """Translate Trade attribute names to column names, dropping unknown keys."""
    row = {}
    for key, value in fields.items():
        column = TRADE_COLUMNS.get(key)
        if column is None:
            logger.warning("trade_field_not_persisted", field=key)
            continue
        row[column] = value
    return row


class TradeStore:
    """CRUD over the strategies / months / trades tables."""

    def __init__(self, client: Client):
        self._client = client

    def _execute(self, op: str, query) -> list[dict]:
        try:
            resp = query.execute()
        except Exception as e:
            logger.error("store_request_failed", op=op, error=str(e))
            raise StoreError(f"{op} failed: {e}") from e
        return resp.data or []

    def _single(self, op: str, query) -> dict:
        rows = self._execute(op, query)
        if not rows:
            raise StoreError(f"{op} returned no row")
        return rows[0]

    # --- Tree ---

    def fetch_all(self) -> list[Strategy]:
        """Whole journal for the signed-in user, oldest strategy first."""
        rows = self._execute(
            "fetch_all",
            self._client.table("strategies").select(NESTED_SELECT).order("created_at"),
        )
        strategies = [StrategyRow.model_validate(r).to_strategy() for r in rows]
        logger.info("store_fetched", strategies=len(strategies))
        return strategies

    # --- Strategies ---

    def create_strategy(self, owner_id: str, name: str) -> Strategy:
        row = self._single(
            "create_strategy",
            self._client.table("strategies").insert({"user_id": owner_id, "name": name}),
        )
        strategy = StrategyRow.model_validate({**row, "months": []}).to_strategy()
        logger.info("strategy_created", strategy_id=strategy.id, name=name)
        return strategy

    def delete_strategy(self, strategy_id: str) -> None:
        self._execute("delete_strategy", self._client.table("strategies").delete().eq("id", strategy_id))
        logger.info("strategy_deleted", strategy_id=strategy_id)

    def update_strategy_note(self, strategy_id: str, note: str) -> None:
        self._execute(
            "update_strategy_note",
            self._client.table("strategies").update({"note": note}).eq("id", strategy_id),
        )

    # --- Months ---

    def create_month(self, strategy_id: str, name: str) -> Month:
        row = self._single(
            "create_month",
            self._client.table("months").insert({"strategy_id": strategy_id, "name": name}),
        )
        month = MonthRow.model_validate({**row, "trades": []}).to_month()
        logger.info("month_created", month_id=month.id, strategy_id=strategy_id, name=name)
        return month

    def delete_month(self, month_id: str) -> None:
        self._execute("delete_month", self._client.table("months").delete().eq("id", month_id))
        logger.info("month_deleted", month_id=month_id)

    def update_month_note(self, month_id: str, note: str) -> None:
        self._execute(
            "update_month_note",
            self._client.table("months").update({"note": note}).eq("id", month_id),
        )

    # --- Trades ---

    def create_trade(self, month_id: str, draft: dict) -> Trade:
        payload = {"month_id": month_id, **trade_columns(draft)}
        if not payload.get("max_rr"):
            payload["max_rr"] = None
        row = self._single("create_trade", self._client.table("trades").insert(payload))
        trade = TradeRow.model_validate(row).to_trade()
        logger.info("trade_created", trade_id=trade.id, month_id=month_id)
        return trade

    def update_trade(self, trade_id: str, changes: dict) -> None:
        columns = trade_columns(changes)
        if not columns:
            return
        self._execute("update_trade", self._client.table("trades").update(columns).eq("id", trade_id))

    def delete_trade(self, trade_id: str) -> None:
        self._execute("delete_trade", self._client.table("trades").delete().eq("id", trade_id))
        logger.info("trade_deleted", trade_id=trade_id)

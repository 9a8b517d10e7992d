"""Build the coaching prompt for a month of backtested trades."""

from __future__ import annotations

import json

from .models import Month

LANGUAGE_NAMES = {"en": "English", "fa": "Persian (Farsi)"}


def format_trade_log(month: Month) -> str:
    """Compact JSON trade log: pair, direction, RR, result and max potential."""
    return json.dumps(
        [
            {
                "pair": t.pair,
                "dir": t.direction,
                "rr": t.rr,
                "result": t.result,
                "maxPotential": t.max_rr,
            }
            for t in month.trades
        ],
        ensure_ascii=False,
    )


def _format_number(value: float) -> str:
    return f"{value:g}"


def build_coach_messages(
    month: Month,
    win_rate: int,
    net_pnl: float,
    language: str = "fa",
) -> list[dict[str, str]]:
    """Build messages for the monthly coaching review.

    The model answers in `language` ("en" or "fa") using Markdown.
    """
    language_name = LANGUAGE_NAMES.get(language, LANGUAGE_NAMES["en"])

    system_prompt = (
        "Act as a world-class Forex Trading Psychology and Strategy Coach "
        "(like Mark Douglas or Tom Hougaard). You review a trader's backtesting "
        "journal and give concise, honest, actionable feedback."
    )

    note = month.note or "No notes provided"
    user_prompt = (
        f"Analyze the following backtesting data for the month of {month.name}.\n\n"
        "STATS:\n"
        f"- Win Rate: {win_rate}%\n"
        f"- Net Profit/Loss: {_format_number(net_pnl)}%\n"
        f"- Total Trades: {len(month.trades)}\n"
        f'- User Notes: "{note}"\n\n'
        "TRADES LOG (JSON):\n"
        f"{format_trade_log(month)}\n\n"
        f"Please provide a concise but powerful analysis in {language_name}.\n"
        "1. Identify the biggest strength this month.\n"
        "2. Identify the biggest leakage/weakness (e.g. holding losers, not taking full targets).\n"
        "3. Give 3 actionable tips for the next month.\n\n"
        f"Output strictly in {language_name}. Use Markdown formatting."
    )

    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]

"""AI coach: turns a month and its stats into a narrative review."""

from __future__ import annotations

import structlog

from .llm_client import LLMClient
from .models import Month
from .prompt_builder import build_coach_messages

logger = structlog.get_logger()

EMPTY_REPLY = "Could not generate analysis."


class Analyst:
    """Runs the coaching prompt through an LLM.

    With no client (no API key configured) `analyze` returns None without
    making a request.
    """

    def __init__(self, llm: LLMClient | None):
        self.llm = llm

    def analyze(
        self,
        month: Month,
        win_rate: int,
        net_pnl: float,
        language: str = "fa",
    ) -> str | None:
        if self.llm is None:
            logger.error("llm_api_key_missing")
            return None

        messages = build_coach_messages(month, win_rate, net_pnl, language=language)
        text = self.llm.chat(messages=messages)
        logger.info("month_analyzed", month=month.name, trades=len(month.trades), chars=len(text))
        return text.strip() or EMPTY_REPLY

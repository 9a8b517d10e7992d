"""Tests for the AI coach."""

from unittest.mock import MagicMock

import pytest

from tradeflow.analyst import EMPTY_REPLY, Analyst
from tradeflow.models import Month, Trade


@pytest.fixture
def month():
    return Month(
        id="m1",
        name="March 2025",
        trades=[Trade(id="t1", date="5", pair="GBPJPY", direction="Long", rr=1.5, result="Win",
                      pnl_dollar=150.0, pnl_percent=1.5)],
    )


class TestAnalyst:
    def test_without_client_returns_none(self, month):
        assert Analyst(None).analyze(month, 100, 1.5) is None

    def test_sends_coach_prompt(self, month):
        llm = MagicMock()
        llm.chat.return_value = "  ## Strength\nPatience.  "
        text = Analyst(llm).analyze(month, 100, 1.5, language="en")
        assert text == "## Strength\nPatience."
        messages = llm.chat.call_args[1]["messages"]
        assert "March 2025" in messages[1]["content"]
        assert "Output strictly in English" in messages[1]["content"]

    def test_empty_reply(self, month):
        llm = MagicMock()
        llm.chat.return_value = ""
        assert Analyst(llm).analyze(month, 100, 1.5) == EMPTY_REPLY

    def test_provider_errors_propagate(self, month):
        llm = MagicMock()
        llm.chat.side_effect = RuntimeError("LLM chat failed: timeout")
        with pytest.raises(RuntimeError):
            Analyst(llm).analyze(month, 100, 1.5)

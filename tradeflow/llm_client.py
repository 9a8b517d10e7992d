"""OpenAI-compatible LLM client (Gemini's OpenAI endpoint by default)."""

from __future__ import annotations

import os

import httpx
import structlog
from openai import OpenAI

from .config import DEFAULT_MODEL, GEMINI_OPENAI_URL

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 300  # thinking models can take minutes on a long trade log


class LLMClient:
    """Thin wrapper over the OpenAI SDK for a single chat completion.

    No retries: a failed request surfaces to the caller as RuntimeError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        model: str | None = None,
    ):
        self.base_url = (base_url or os.environ.get("LLM_BASE_URL", GEMINI_OPENAI_URL)).rstrip("/")
        self.model = model or os.environ.get("LLM_MODEL", DEFAULT_MODEL)
        self._http = httpx.Client(timeout=DEFAULT_TIMEOUT)
        self._client = OpenAI(
            base_url=self.base_url,
            api_key=api_key or os.environ.get("LLM_API_KEY") or os.environ.get("GEMINI_API_KEY", ""),
            timeout=DEFAULT_TIMEOUT,
            http_client=self._http,
        )

    def list_models(self) -> list[str]:
        """Model ids offered by the endpoint, empty on failure."""
        try:
            models = self._client.models.list()
            return [m.id for m in models.data]
        except Exception as e:
            logger.error("llm_list_models_failed", error=str(e))
            return []

    def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        """Send chat completion request. Returns the assistant message content."""
        model = model or self.model
        try:
            response = self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            logger.warning("llm_chat_failed", model=model, error=str(e))
            raise RuntimeError(f"LLM chat failed: {e}") from e

        msg = response.choices[0].message
        content = msg.content or ""
        # Some thinking models put output in reasoning_content
        if not content and getattr(msg, "reasoning_content", None):
            content = msg.reasoning_content
        logger.info(
            "llm_chat_completed",
            model=model,
            prompt_tokens=getattr(response.usage, "prompt_tokens", None),
            completion_tokens=getattr(response.usage, "completion_tokens", None),
        )
        return content

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

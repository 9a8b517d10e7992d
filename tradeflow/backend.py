"""Supabase client construction shared by the store and session adapters."""

from __future__ import annotations

import structlog
from supabase import Client, create_client
from supabase.client import ClientOptions

from .config import AppConfig

logger = structlog.get_logger()


class VerifierStorage:
    """Process-wide key/value storage for the auth client.

    Sessions are kept in memory per client (persist_session=False), so the
    only thing written here is the PKCE code verifier. It has to outlive the
    browser session that started the OAuth redirect, because the redirect
    comes back as a new Streamlit session with a new client.
    """

    def __init__(self):
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


_VERIFIER_STORAGE = VerifierStorage()


def make_client(config: AppConfig) -> Client:
    """Supabase client for one browser session."""
    if not config.backend_configured:
        raise ValueError("Supabase URL and anon key are required")
    client = create_client(
        config.supabase_url,
        config.supabase_key,
        options=ClientOptions(
            storage=_VERIFIER_STORAGE,
            persist_session=False,
            flow_type="pkce",
        ),
    )
    logger.info("supabase_client_created", url=config.supabase_url)
    return client

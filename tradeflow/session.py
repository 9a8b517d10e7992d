"""Supabase Auth session: Google OAuth (PKCE), logout, identity and auth events."""

from __future__ import annotations

from typing import Callable

import structlog
from supabase import Client

from .models import Identity

logger = structlog.get_logger()

OAUTH_PROVIDER = "google"

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


class SessionError(RuntimeError):
    """The session provider rejected or failed a request."""


def identity_from_user(user) -> Identity | None:
    """Map a Supabase auth user to an Identity.

    Display name falls back from the OAuth full name to the email's local
    part, then to "Trader".
    """
    if user is None:
        return None
    email = getattr(user, "email", None) or ""
    metadata = getattr(user, "user_metadata", None) or {}
    name = metadata.get("full_name") or (email.split("@")[0] if email else "") or "Trader"
    return Identity(
        id=str(user.id),
        name=name,
        email=email,
        avatar=metadata.get("avatar_url") or None,
    )


class SessionAdapter:
    def __init__(self, client: Client):
        self._client = client

    def begin_oauth_login(self, redirect_to: str) -> str:
        """Start the OAuth flow and return the provider URL to send the browser to."""
        try:
            resp = self._client.auth.sign_in_with_oauth(
                {"provider": OAUTH_PROVIDER, "options": {"redirect_to": redirect_to}}
            )
        except Exception as e:
            logger.error("oauth_start_failed", provider=OAUTH_PROVIDER, error=str(e))
            raise SessionError(f"OAuth login failed: {e}") from e
        logger.info("oauth_started", provider=OAUTH_PROVIDER)
        return resp.url

    def complete_oauth_login(self, auth_code: str) -> Identity | None:
        """Exchange the redirect's auth code for a session."""
        try:
            resp = self._client.auth.exchange_code_for_session({"auth_code": auth_code})
        except Exception as e:
            logger.error("oauth_exchange_failed", error=str(e))
            raise SessionError(f"OAuth code exchange failed: {e}") from e
        identity = identity_from_user(getattr(resp, "user", None))
        if identity:
            logger.info("session_started", user_id=identity.id)
        return identity

    def end_session(self) -> None:
        try:
            self._client.auth.sign_out()
        except Exception as e:
            logger.error("sign_out_failed", error=str(e))
            raise SessionError(f"Sign out failed: {e}") from e
        logger.info("session_ended")

    def current_identity(self) -> Identity | None:
        try:
            session = self._client.auth.get_session()
        except Exception as e:
            logger.error("session_lookup_failed", error=str(e))
            raise SessionError(f"Session lookup failed: {e}") from e
        if not session or not getattr(session, "user", None):
            return None
        return identity_from_user(session.user)

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        """Forward SIGNED_IN / SIGNED_OUT events to `callback`.

        Returns a function that cancels the subscription.
        """
        def _on_change(event, session) -> None:
            if event in (SIGNED_IN, SIGNED_OUT):
                callback(event)

        subscription = self._client.auth.on_auth_state_change(_on_change)
        return subscription.unsubscribe

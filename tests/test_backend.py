"""Tests for Supabase client construction."""

from unittest.mock import patch

import pytest

from tradeflow.backend import VerifierStorage, make_client
from tradeflow.config import AppConfig


class TestMakeClient:
    def test_requires_backend_config(self):
        with pytest.raises(ValueError):
            make_client(AppConfig())

    def test_pkce_client_without_persisted_session(self):
        config = AppConfig(supabase_url="https://x.supabase.co", supabase_key="anon")
        with patch("tradeflow.backend.create_client") as create:
            make_client(config)
        url, key = create.call_args[0]
        options = create.call_args[1]["options"]
        assert (url, key) == ("https://x.supabase.co", "anon")
        assert options.flow_type == "pkce"
        assert options.persist_session is False
        assert isinstance(options.storage, VerifierStorage)

    def test_clients_share_verifier_storage(self):
        config = AppConfig(supabase_url="https://x.supabase.co", supabase_key="anon")
        with patch("tradeflow.backend.create_client") as create:
            make_client(config)
            make_client(config)
        first, second = (c[1]["options"].storage for c in create.call_args_list)
        assert first is second


class TestVerifierStorage:
    def test_items(self):
        storage = VerifierStorage()
        storage.set_item("code-verifier", "abc")
        assert storage.get_item("code-verifier") == "abc"
        storage.remove_item("code-verifier")
        storage.remove_item("code-verifier")
        assert storage.get_item("code-verifier") is None

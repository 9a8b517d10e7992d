"""Tests for runtime config loading and environment overrides."""

from tradeflow.config import DEFAULT_MODEL, GEMINI_OPENAI_URL, app_config, load_config, save_config


class TestLoadConfig:
    def test_missing_file_uses_bundled_default(self, tmp_path):
        raw = load_config(tmp_path / "missing.yaml")
        assert raw["llm"]["model"] == DEFAULT_MODEL
        assert raw["backend"]["supabase_url"] == ""

    def test_roundtrip(self, tmp_path):
        path = tmp_path / "data" / "config.yaml"
        save_config({"backend": {"supabase_url": "https://x.supabase.co"}}, path)
        assert load_config(path) == {"backend": {"supabase_url": "https://x.supabase.co"}}


class TestAppConfig:
    def test_empty_config_is_guest_only(self):
        config = app_config(raw={}, env={})
        assert not config.backend_configured
        assert not config.llm_configured
        assert config.llm_base_url == GEMINI_OPENAI_URL
        assert config.llm_model == DEFAULT_MODEL

    def test_yaml_values(self):
        raw = {
            "backend": {"supabase_url": "https://x.supabase.co", "supabase_anon_key": "anon"},
            "llm": {"api_key": "k", "model": "gemini-2.5-pro"},
            "app": {"url": "https://journal.example.com"},
        }
        config = app_config(raw=raw, env={})
        assert config.backend_configured
        assert config.llm_configured
        assert config.llm_model == "gemini-2.5-pro"
        assert config.app_url == "https://journal.example.com"

    def test_environment_overrides_file(self):
        raw = {"backend": {"supabase_url": "https://file.supabase.co", "supabase_anon_key": "file"}}
        env = {"SUPABASE_URL": "https://env.supabase.co", "GEMINI_API_KEY": "gk"}
        config = app_config(raw=raw, env=env)
        assert config.supabase_url == "https://env.supabase.co"
        assert config.supabase_key == "file"
        assert config.llm_api_key == "gk"

    def test_whitespace_backend_not_configured(self):
        config = app_config(raw={}, env={"SUPABASE_URL": "  ", "SUPABASE_ANON_KEY": "anon"})
        assert not config.backend_configured

    def test_null_sections(self):
        config = app_config(raw={"backend": None, "llm": None, "app": None}, env={})
        assert config.preferences_dir == "data/preferences"

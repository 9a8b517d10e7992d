"""Runtime config: data/config.yaml with environment overrides, plus logging setup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import structlog
import yaml

CONFIG_PATH = Path("data/config.yaml")
_BAKED_DEFAULT = Path(__file__).with_name("default_config.yaml")

GEMINI_OPENAI_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-2.5-flash"


def load_config(path: Path | str = CONFIG_PATH, fallback: dict | None = None) -> dict:
    """Load runtime config, falling back to the bundled default if missing."""
    for p in [Path(path), _BAKED_DEFAULT]:
        try:
            with open(p) as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except (OSError, FileNotFoundError):
            continue
    return fallback if fallback is not None else {}


def save_config(config: dict, path: Path | str = CONFIG_PATH) -> None:
    """Write config, creating data/ directory if needed."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


@dataclass
class AppConfig:
    supabase_url: str = ""
    supabase_key: str = ""
    llm_base_url: str = GEMINI_OPENAI_URL
    llm_api_key: str = ""
    llm_model: str = DEFAULT_MODEL
    app_url: str = "http://localhost:8501"
    preferences_dir: str = "data/preferences"

    @property
    def backend_configured(self) -> bool:
        return bool(self.supabase_url.strip()) and bool(self.supabase_key.strip())

    @property
    def llm_configured(self) -> bool:
        return bool(self.llm_api_key.strip())


def app_config(raw: dict | None = None, env: dict | None = None) -> AppConfig:
    """Merge the YAML `backend`/`llm`/`app` sections with environment variables.

    Environment variables take precedence over the file.
    """
    raw = load_config() if raw is None else raw
    env = os.environ if env is None else env
    backend = raw.get("backend", {}) or {}
    llm = raw.get("llm", {}) or {}
    app = raw.get("app", {}) or {}

    return AppConfig(
        supabase_url=env.get("SUPABASE_URL") or backend.get("supabase_url", "") or "",
        supabase_key=env.get("SUPABASE_ANON_KEY") or backend.get("supabase_anon_key", "") or "",
        llm_base_url=env.get("LLM_BASE_URL") or llm.get("base_url") or GEMINI_OPENAI_URL,
        llm_api_key=env.get("LLM_API_KEY") or env.get("GEMINI_API_KEY") or llm.get("api_key", "") or "",
        llm_model=env.get("LLM_MODEL") or llm.get("model") or DEFAULT_MODEL,
        app_url=env.get("APP_URL") or app.get("url") or "http://localhost:8501",
        preferences_dir=app.get("preferences_dir") or "data/preferences",
    )


def configure_logging(level: str | None = None) -> None:
    """Console structlog output, filtered by LOG_LEVEL (default INFO)."""
    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )

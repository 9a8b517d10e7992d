"""Per-browser-session controller wiring shared by all dashboard pages."""

import streamlit as st
import structlog

from tradeflow.analyst import Analyst
from tradeflow.backend import make_client
from tradeflow.config import AppConfig, app_config
from tradeflow.controller import AppController
from tradeflow.llm_client import LLMClient
from tradeflow.session import SessionAdapter
from tradeflow.store import TradeStore

logger = structlog.get_logger()

_CONTROLLER_KEY = "controller"
_CONFIG_KEY = "app_config"


def build_controller(config: AppConfig) -> AppController:
    """Wire adapters from config. A missing or broken backend means guest mode."""
    store = session = None
    if config.backend_configured:
        try:
            client = make_client(config)
            store = TradeStore(client)
            session = SessionAdapter(client)
        except Exception as e:
            logger.error("backend_init_failed", error=str(e))

    llm = None
    if config.llm_configured:
        llm = LLMClient(base_url=config.llm_base_url, api_key=config.llm_api_key, model=config.llm_model)

    controller = AppController(
        store=store,
        session=session,
        analyst=Analyst(llm),
        preferences_dir=config.preferences_dir,
    )
    controller.boot()
    return controller


def get_config() -> AppConfig:
    if _CONFIG_KEY not in st.session_state:
        st.session_state[_CONFIG_KEY] = app_config()
    return st.session_state[_CONFIG_KEY]


def get_controller() -> AppController:
    if _CONTROLLER_KEY not in st.session_state:
        with st.spinner("Loading your journal..."):
            st.session_state[_CONTROLLER_KEY] = build_controller(get_config())
    return st.session_state[_CONTROLLER_KEY]


def handle_oauth_redirect(controller: AppController) -> None:
    """Finish sign-in when the provider redirects back with ?code=..."""
    params = st.query_params
    code = params.get("code")
    error = params.get("error_description") or params.get("error")
    if not code and not error:
        return
    if code:
        controller.complete_login(code)
    else:
        logger.warning("oauth_redirect_error", error=error)
        controller.state.notice = str(error)
    st.query_params.clear()

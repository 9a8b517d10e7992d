"""Streamlit dashboard entry point - TradeFlow trading journal."""

from pathlib import Path
import sys

import streamlit as st

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from tradeflow.config import configure_logging

configure_logging()

from dashboard.components.gate import render_login, render_onboarding
from dashboard.state import get_controller, handle_oauth_redirect

st.set_page_config(
    page_title="TradeFlow",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded",
)

controller = get_controller()
handle_oauth_redirect(controller)

phase = controller.state.phase
if phase == "onboarding":
    render_onboarding(controller)
    st.stop()
if phase == "login":
    render_login(controller)
    st.stop()

journal = st.Page("pages/journal.py", title="Journal", icon="📒", default=True)
settings = st.Page("pages/settings.py", title="Settings", icon="🔧")

pg = st.navigation([journal, settings])
pg.run()

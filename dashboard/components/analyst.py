"""AI coach panel for the month view."""

import streamlit as st

from tradeflow.controller import AppController
from tradeflow.i18n import t
from tradeflow.models import Month, Strategy


def render_coach(controller: AppController, strategy: Strategy, month: Month) -> None:
    state = controller.state
    lang = state.preferences.language

    st.divider()
    st.subheader(f"🧠 {t(lang, 'ai_coach')}")
    st.caption(f"Analysis by {controller.analyst.llm.model}" if controller.analyst and controller.analyst.llm else "")

    if st.button(t(lang, "analyze"), key=f"analyze_{month.id}", type="primary", disabled=not month.trades):
        with st.spinner(t(lang, "analyzing")):
            controller.analyze_month(strategy.id, month.id)

    if state.analysis and state.analysis_month_id == month.id:
        with st.container(border=True):
            st.markdown(state.analysis)

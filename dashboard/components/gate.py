"""Onboarding and login screens shown before the journal."""

import streamlit as st

from tradeflow.controller import AppController
from tradeflow.i18n import t

from dashboard.state import get_config


def render_onboarding(controller: AppController) -> None:
    lang = controller.state.preferences.language
    step = st.session_state.get("onboarding_step", 0)

    if step == 0:
        st.title("TradeFlow")
        st.subheader(t(lang, "welcome"))
        if st.button(t(lang, "next"), type="primary"):
            st.session_state["onboarding_step"] = 1
            st.rerun()
    else:
        st.title("📈")
        st.subheader(t(lang, "welcome_sub"))
        if st.button(t(lang, "get_started"), type="primary"):
            controller.complete_onboarding()
            st.session_state.pop("onboarding_step", None)
            st.rerun()

    st.progress((step + 1) / 2)


def render_login(controller: AppController) -> None:
    lang = controller.state.preferences.language
    st.title(t(lang, "login_title"))
    st.caption(t(lang, "login_sub"))

    notice = controller.pop_notice()
    if notice:
        st.error(notice)

    login_url = st.session_state.get("login_url")
    if login_url:
        st.link_button(t(lang, "login_google"), login_url, type="primary")
    elif st.button(t(lang, "login_google"), type="primary", disabled=controller.state.logging_in):
        url = controller.begin_login(get_config().app_url)
        if url:
            st.session_state["login_url"] = url
        st.rerun()

    if st.button(t(lang, "continue_guest")):
        if not controller.continue_as_guest():
            st.warning("Reload the app to continue as a guest.")
        else:
            st.rerun()

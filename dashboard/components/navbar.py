"""Breadcrumbs and the sidebar user menu."""

import streamlit as st

from tradeflow.controller import AppController
from tradeflow.i18n import t
from tradeflow.navigation import breadcrumbs

from dashboard.state import get_config


def render_breadcrumbs(controller: AppController) -> None:
    state = controller.state
    crumbs = breadcrumbs(state.view, state.strategies, home_label=t(state.preferences.language, "home"))
    cols = st.columns(len(crumbs) + 2)
    for i, (label, target) in enumerate(crumbs):
        is_last = i == len(crumbs) - 1
        if cols[i].button(label, key=f"crumb_{i}", disabled=is_last, use_container_width=True):
            controller.navigate(target)
            st.rerun()


def render_user_menu(controller: AppController) -> None:
    state = controller.state
    lang = state.preferences.language
    user = state.user

    with st.sidebar:
        if user and user.avatar:
            st.image(user.avatar, width=48)
        st.write(f"**{user.name if user else t(lang, 'guest')}**")
        st.caption(user.email if user else t(lang, "no_account"))

        st.subheader(t(lang, "settings"))
        theme_label = "Dark" if state.preferences.theme == "dark" else "Light"
        if st.button(f"{t(lang, 'theme')}: {theme_label}", use_container_width=True):
            controller.toggle_theme()
            st.rerun()
        if st.button(f"{t(lang, 'language')}: {lang.upper()}", use_container_width=True):
            controller.toggle_language()
            st.rerun()

        st.divider()
        if user:
            if st.button(t(lang, "logout"), use_container_width=True):
                controller.logout()
                st.session_state.pop("login_url", None)
                st.rerun()
        elif controller.backend_available:
            login_url = st.session_state.get("login_url")
            if login_url:
                st.link_button(t(lang, "sign_in"), login_url, use_container_width=True)
            elif st.button(t(lang, "sign_in"), use_container_width=True):
                url = controller.begin_login(get_config().app_url)
                if url:
                    st.session_state["login_url"] = url
                st.rerun()


def apply_layout_direction(language: str) -> None:
    """Right-to-left layout for Persian."""
    if language == "fa":
        st.markdown(
            "<style>.main .block-container, section[data-testid='stSidebar'] "
            "{direction: rtl; text-align: right;}</style>",
            unsafe_allow_html=True,
        )

"""Journal views: strategy grid, strategy detail, month detail."""

from __future__ import annotations

from datetime import date

import streamlit as st

from tradeflow.controller import AppController
from tradeflow.i18n import t
from tradeflow.models import MONTH_NAMES, Month, Strategy, month_display_name, year_options
from tradeflow.navigation import month_view, strategy_view
from tradeflow.stats import compute_stats
from tradeflow.trade_table import DELETE_COLUMN, DERIVED_COLUMNS, edits_from_frames, trades_frame

from dashboard.components.analyst import render_coach
from dashboard.components.charts import render_equity_curve


def _confirm_delete(key: str, label: str) -> bool:
    """Two-click delete: the first click arms, the second confirms."""
    armed = st.session_state.get("pending_delete")
    if armed == key:
        c1, c2 = st.columns(2)
        if c1.button("Confirm", key=f"confirm_{key}", type="primary"):
            st.session_state.pop("pending_delete", None)
            return True
        if c2.button("Cancel", key=f"cancel_{key}"):
            st.session_state.pop("pending_delete", None)
            st.rerun()
        return False
    if st.button(label, key=f"del_{key}"):
        st.session_state["pending_delete"] = key
        st.rerun()
    return False


def _render_note(lang: str, key: str, note: str | None, on_save) -> None:
    with st.expander(t(lang, "note"), expanded=bool(note)):
        text = st.text_area(t(lang, "note"), value=note or "", key=f"note_{key}", label_visibility="collapsed")
        if st.button(t(lang, "save_note"), key=f"save_note_{key}"):
            on_save(text)
            st.rerun()


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def render_dashboard(controller: AppController) -> None:
    lang = controller.state.preferences.language
    st.title(t(lang, "strategies"))

    with st.form("new_strategy", clear_on_submit=True):
        name = st.text_input(t(lang, "strategy_name"), placeholder="e.g., ICT Silver Bullet")
        if st.form_submit_button(t(lang, "add_strategy")) and name.strip():
            controller.add_strategy(name)
            st.rerun()

    strategies = controller.state.strategies
    if not strategies:
        st.info(t(lang, "no_strategies"))
        return

    cols = st.columns(3)
    for i, strategy in enumerate(strategies):
        with cols[i % 3].container(border=True):
            st.subheader(strategy.name)
            st.caption(f"{len(strategy.months)} {t(lang, 'months')} · {strategy.trade_count} {t(lang, 'trades')}")
            if st.button(t(lang, "open"), key=f"open_{strategy.id}", type="primary"):
                controller.navigate(strategy_view(strategy.id))
                st.rerun()
            if _confirm_delete(f"strategy_{strategy.id}", t(lang, "delete")):
                controller.delete_strategy(strategy.id)
                st.rerun()


# ---------------------------------------------------------------------------
# Strategy detail
# ---------------------------------------------------------------------------

def render_strategy(controller: AppController, strategy: Strategy) -> None:
    lang = controller.state.preferences.language
    st.title(strategy.name)

    _render_note(
        lang,
        f"strategy_{strategy.id}",
        strategy.note,
        lambda text: controller.update_strategy_note(strategy.id, text),
    )

    with st.form(f"new_month_{strategy.id}", clear_on_submit=True):
        today = date.today()
        years = year_options(today)
        c1, c2 = st.columns(2)
        month_index = c1.selectbox(
            t(lang, "month"),
            options=range(12),
            index=today.month - 1,
            format_func=lambda i: MONTH_NAMES[i],
        )
        year = c2.selectbox(t(lang, "year"), options=years, index=years.index(today.year))
        if st.form_submit_button(t(lang, "add_month")):
            controller.add_month(strategy.id, month_display_name(month_index, year))
            st.rerun()

    if not strategy.months:
        st.info(t(lang, "no_months"))
        return

    for month in strategy.months:
        stats = compute_stats(month.trades)
        with st.container(border=True):
            c1, c2, c3, c4 = st.columns([3, 1, 1, 1])
            c1.subheader(month.name)
            c2.metric(t(lang, "win_rate"), f"{stats.win_rate}%")
            c3.metric(t(lang, "net_pnl"), f"{stats.net_pnl:+g}%")
            c4.metric(t(lang, "trades"), len(month.trades))
            if st.button(t(lang, "open"), key=f"open_{month.id}", type="primary"):
                controller.navigate(month_view(strategy.id, month.id))
                st.rerun()
            if _confirm_delete(f"month_{month.id}", t(lang, "delete")):
                controller.delete_month(strategy.id, month.id)
                st.rerun()


# ---------------------------------------------------------------------------
# Month detail
# ---------------------------------------------------------------------------

def _render_trade_editor(controller: AppController, strategy: Strategy, month: Month) -> None:
    lang = controller.state.preferences.language
    revision = st.session_state.setdefault("trade_table_rev", 0)
    before = trades_frame(month)

    edited = st.data_editor(
        before,
        key=f"trades_{month.id}_{revision}",
        hide_index=True,
        use_container_width=True,
        num_rows="fixed",
        disabled=DERIVED_COLUMNS,
        column_config={
            "id": st.column_config.TextColumn("#"),
            "date": st.column_config.TextColumn("Day"),
            "pair": st.column_config.TextColumn("Pair"),
            "direction": st.column_config.SelectboxColumn("Direction", options=["Long", "Short"], required=True),
            "rr": st.column_config.NumberColumn("RR", step=0.1, format="%.2f"),
            "result": st.column_config.SelectboxColumn("Result", options=["Win", "Loss", "BE"], required=True),
            "pnl_dollar": st.column_config.NumberColumn("P/L $", step=1.0, format="%.2f"),
            "pnl_percent": st.column_config.NumberColumn("P/L %", format="%.2f"),
            "max_rr": st.column_config.NumberColumn("Max RR", step=0.1, format="%.2f"),
            DELETE_COLUMN: st.column_config.CheckboxColumn("🗑"),
        },
    )

    c1, c2 = st.columns(2)
    if c1.button(t(lang, "add_trade"), use_container_width=True):
        controller.add_trade(strategy.id, month.id)
        st.session_state["trade_table_rev"] = revision + 1
        st.rerun()
    if c2.button(t(lang, "apply_edits"), type="primary", use_container_width=True):
        updates, deletions = edits_from_frames(before, edited)
        for trade_id in deletions:
            controller.delete_trade(strategy.id, month.id, trade_id)
        for trade_id, update in updates:
            controller.update_trade(strategy.id, month.id, trade_id, update)
        st.session_state["trade_table_rev"] = revision + 1
        st.rerun()


def render_month(controller: AppController, strategy: Strategy, month: Month) -> None:
    lang = controller.state.preferences.language
    st.title(month.name)
    st.caption(strategy.name)

    stats = controller.month_stats(strategy.id, month.id)
    m1, m2, m3 = st.columns(3)
    m1.metric(t(lang, "win_rate"), f"{stats.win_rate}%")
    m2.metric(t(lang, "net_pnl"), f"{stats.net_pnl:+g}%")
    m3.metric(t(lang, "total_trades"), len(month.trades))

    render_equity_curve(stats, theme=controller.state.preferences.theme, title=t(lang, "equity_curve"))

    st.subheader(t(lang, "trades"))
    if not month.trades:
        st.info(t(lang, "no_trades"))
    _render_trade_editor(controller, strategy, month)

    _render_note(
        lang,
        f"month_{month.id}",
        month.note,
        lambda text: controller.update_month_note(strategy.id, month.id, text),
    )

    render_coach(controller, strategy, month)

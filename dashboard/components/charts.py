"""Equity curve chart."""

from __future__ import annotations

import plotly.graph_objects as go
import streamlit as st

from tradeflow.stats import MonthStats, equity_frame


def render_equity_curve(stats: MonthStats, theme: str = "dark", title: str = "Equity Curve") -> None:
    """Cumulative P/L % per trade, starting from the zero origin."""
    df = equity_frame(stats)
    final = df["equity"].iloc[-1] if not df.empty else 0.0
    color = "#10b981" if final >= 0 else "#ef4444"

    fig = go.Figure(go.Scatter(
        x=df["index"],
        y=df["equity"],
        mode="lines+markers",
        fill="tozeroy",
        line=dict(color=color, width=2),
        hovertemplate="Trade %{x}<br>%{y:+.2f}%<extra></extra>",
    ))
    fig.add_hline(y=0, line_dash="dash", line_color="gray")
    fig.update_layout(
        title=title,
        xaxis_title="Trade #",
        yaxis_title="Cumulative P/L (%)",
        template="plotly_dark" if theme == "dark" else "plotly_white",
        height=320,
        margin=dict(l=10, r=10, t=40, b=10),
    )
    st.plotly_chart(fig, use_container_width=True)

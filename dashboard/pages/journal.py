"""Journal page: strategies, months and trades, driven by the view pointer."""

import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from tradeflow.navigation import resolve
from dashboard.components.navbar import apply_layout_direction, render_breadcrumbs, render_user_menu
from dashboard.components.views import render_dashboard, render_month, render_strategy
from dashboard.state import get_controller

controller = get_controller()
state = controller.state

apply_layout_direction(state.preferences.language)
render_user_menu(controller)
render_breadcrumbs(controller)

notice = controller.pop_notice()
if notice:
    st.error(notice)

view, strategy, month = resolve(state.view, state.strategies)

if month is not None:
    render_month(controller, strategy, month)
elif strategy is not None:
    render_strategy(controller, strategy)
else:
    render_dashboard(controller)

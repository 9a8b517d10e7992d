"""Settings page: backend and AI connection config editor."""

import streamlit as st
import yaml
import os
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from tradeflow.config import CONFIG_PATH, DEFAULT_MODEL, GEMINI_OPENAI_URL, load_config, save_config
from tradeflow.llm_client import LLMClient
from dashboard.components.navbar import render_user_menu
from dashboard.state import get_config, get_controller

controller = get_controller()
render_user_menu(controller)

st.title("Settings")

config = load_config()
backend = config.get("backend", {}) or {}
llm = config.get("llm", {}) or {}
app = config.get("app", {}) or {}

st.subheader("Backend (Supabase)")
col1, col2 = st.columns(2)
with col1:
    supabase_url = st.text_input("Project URL", value=backend.get("supabase_url", ""))
with col2:
    supabase_key = st.text_input("Anon key", value=backend.get("supabase_anon_key", ""), type="password")
st.caption("Leave empty to run in guest mode with sample data.")

app_url = st.text_input("App URL (OAuth redirect)", value=app.get("url", "http://localhost:8501"))

st.divider()

st.subheader("AI Coach")
col1, col2 = st.columns(2)
with col1:
    llm_url = st.text_input("LLM Base URL", value=llm.get("base_url", GEMINI_OPENAI_URL))
    st.caption("Any OpenAI-compatible endpoint")
with col2:
    llm_key = st.text_input("API key", value=llm.get("api_key", ""), type="password")

available_models = [DEFAULT_MODEL]
if llm_key or os.environ.get("LLM_API_KEY") or os.environ.get("GEMINI_API_KEY"):
    with LLMClient(base_url=llm_url, api_key=llm_key or None) as client:
        available_models = client.list_models() or available_models
current_model = llm.get("model", DEFAULT_MODEL)
if current_model not in available_models:
    available_models.insert(0, current_model)
model = st.selectbox("Model", options=available_models, index=available_models.index(current_model))

if st.button("Save Settings"):
    config["backend"] = {"supabase_url": supabase_url.strip(), "supabase_anon_key": supabase_key.strip()}
    config["llm"] = {"base_url": llm_url.strip(), "api_key": llm_key.strip(), "model": model}
    config["app"] = {**app, "url": app_url.strip()}
    save_config(config)
    st.success("Settings saved! Reload the app to reconnect.")

st.divider()

# Raw config viewer
st.subheader("Raw Configuration")
with st.expander(f"View {CONFIG_PATH}"):
    redacted = yaml.safe_load(yaml.dump(config)) or {}
    for section, key in [("backend", "supabase_anon_key"), ("llm", "api_key")]:
        if redacted.get(section, {}).get(key):
            redacted[section][key] = "***"
    st.code(yaml.dump(redacted, default_flow_style=False, sort_keys=False), language="yaml")

# Environment variables
st.subheader("Environment Variables")
env_vars = {
    "SUPABASE_URL": os.environ.get("SUPABASE_URL", "Not set"),
    "SUPABASE_ANON_KEY": "***" if os.environ.get("SUPABASE_ANON_KEY") else "Not set",
    "LLM_BASE_URL": os.environ.get("LLM_BASE_URL", "Not set"),
    "LLM_API_KEY": "***" if os.environ.get("LLM_API_KEY") or os.environ.get("GEMINI_API_KEY") else "Not set",
    "LOG_LEVEL": os.environ.get("LOG_LEVEL", "Not set"),
}
for k, v in env_vars.items():
    st.write(f"`{k}` = {v}")

mode = "guest" if controller.state.is_guest else ("connected" if get_config().backend_configured else "offline")
st.caption(f"Current session: {mode}")

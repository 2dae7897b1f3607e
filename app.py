# app.py
import streamlit as st
import os
from dotenv import load_dotenv
import google.generativeai as genai

from env_setup import load_environment_variables

# utilsモジュールのインポート
from utils.config_loader import get_config_value

# uiモジュールのインポート
from ui.wizard_ui import render_wizard

# --- 初期設定 ---
load_dotenv()

# --- Streamlit UI設定 ---
st.set_page_config(page_title=get_config_value("app.page_title", "やりたいことを見つけよう"), layout="centered")

if not load_environment_variables():
    st.stop()

API_KEY = os.getenv("GEMINI_API_KEY")
try:
    genai.configure(api_key=API_KEY)
except Exception as e:
    st.error(f"❌ Gemini APIの設定に失敗しました: {e}")
    st.stop()

if "app_initialized" not in st.session_state:
    st.session_state.app_initialized = True
    print("[App] Self-analysis wizard session initialized.")

render_wizard()

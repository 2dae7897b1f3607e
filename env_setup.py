# env_setup.py
# 起動時の環境変数チェック

import os
import streamlit as st

from utils import config_loader

REQUIRED_ENV_VARS = ("GEMINI_API_KEY",)


def _missing(names):
    return [name for name in names if not os.getenv(name)]


def load_environment_variables() -> bool:
    """必須の環境変数を確認し、任意の環境変数が無い場合は警告を出す。
    必須の環境変数が無い場合は False を返す (呼び出し元で st.stop())。
    """
    missing_required = _missing(REQUIRED_ENV_VARS)
    if missing_required:
        st.error(f"⚠️ {', '.join(missing_required)} が設定されていません。")
        st.info(".env ファイル、または実行環境の環境変数で設定してください。")
        return False

    if not os.getenv("OPENAI_API_KEY"):
        print("[EnvSetup] Warning: OPENAI_API_KEY is not set. Vision image generation will be skipped.")

    if config_loader.is_drive_enabled():
        has_inline_key = not _missing(("GOOGLE_SERVICE_ACCOUNT_EMAIL", "GOOGLE_PRIVATE_KEY"))
        if not has_inline_key and not os.getenv("GOOGLE_APPLICATION_CREDENTIALS"):
            print("[EnvSetup] Warning: No service account credentials found. Falling back to application default credentials.")
        if not config_loader.get_drive_parent_folder_id():
            st.warning("保存先のGoogle DriveフォルダID (DRIVE_PARENT_FOLDER_ID) が設定されていません。結果の保存は失敗します。")

    if config_loader.is_email_enabled():
        missing_mail = _missing(("MAIL_SENDER_ADDRESS", "MAIL_SENDER_PASSWORD"))
        if missing_mail:
            st.warning(f"メール送信用の {', '.join(missing_mail)} が設定されていません。先生への通知は失敗します。")

    return True

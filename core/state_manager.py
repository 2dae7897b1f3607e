# core/state_manager.py
import streamlit as st
from typing import Any, Dict, Sequence, Tuple

from utils import config_loader
from . import transitions
from .question_catalog import question_ids_for_step
from .type_definitions import (
    SessionState,
    STEP_INTRO,
    STEP_VALUES,
    STEP_TALENTS,
    STEP_PASSION,
    STEP_ANALYSIS,
    STEP_RESULT,
    STEP_FIRST_ACTION,
    STEP_COMPLETE,
    STEP_CHOICE,
)

# セッション状態のキー
SESSION_KEY = "wizard_session"      # SessionState 本体 (遷移ごとに丸ごと置き換える)
PROCESSING_KEY = "processing"       # LLM呼び出しなど時間のかかる処理が実行中かを示すフラグ
ANSWER_INPUT_PREFIX = "answer_input_"  # 質問ごとの入力欄 (st.text_area の key)

# セッション状態のデフォルト値
# SessionState 以外の、UI制御のためのキーとその初期値を定義
DEFAULT_SESSION_VALUES: Dict[str, Any] = {
    PROCESSING_KEY: False,
    "first_action_input": "",
}


def initialize_session_state():
    """セッション状態のキーを初期化する。
    デフォルト値が未設定のキーのみ初期値を設定する。
    """
    if SESSION_KEY not in st.session_state:
        st.session_state[SESSION_KEY] = transitions.new_session()
    for key, value in DEFAULT_SESSION_VALUES.items():
        if key not in st.session_state:
            st.session_state[key] = value


def get_session() -> SessionState:
    """現在の SessionState を取得する。未初期化の場合は新しいセッションを返す。"""
    session = st.session_state.get(SESSION_KEY)
    if session is None:
        session = transitions.new_session()
        st.session_state[SESSION_KEY] = session
    return session


def commit_session(new_state: SessionState):
    """遷移後の SessionState でセッションを置き換える。"""
    st.session_state[SESSION_KEY] = new_state


def get_current_step() -> str:
    """現在のアプリケーションステップを取得する。"""
    return get_session().get("current_step", STEP_INTRO)


def get_step_order() -> Tuple[str, ...]:
    """config.yaml の質問ステップと終了バリアントからステップ順を返す。"""
    step_names = [step["name"] for step in config_loader.get_question_steps()]
    return transitions.build_step_order(step_names, config_loader.get_closing_variant())


def set_processing_status(is_processing: bool):
    """LLM呼び出しなどの処理中フラグをセッション状態に設定する。"""
    st.session_state[PROCESSING_KEY] = is_processing


def is_processing() -> bool:
    return bool(st.session_state.get(PROCESSING_KEY, False))


def answer_input_key(question_id: str) -> str:
    return f"{ANSWER_INPUT_PREFIX}{question_id}"


def clear_answer_inputs(question_ids: Sequence[str]):
    """分析成功後、そのステップの入力欄をクリアする。"""
    for question_id in question_ids:
        key = answer_input_key(question_id)
        if key in st.session_state:
            del st.session_state[key]


def dismiss_error():
    commit_session(transitions.clear_error(get_session()))


def recover_interrupted_analysis():
    """analysis のまま残ったセッションを質問ステップへ戻し、処理中フラグを解除する。"""
    step_names = [step["name"] for step in config_loader.get_question_steps()]
    commit_session(transitions.resume_interrupted_analysis(get_session(), step_names))
    set_processing_status(False)


def reset_for_new_session():
    """新しいセッションのために、セッション状態の主要な値をデフォルト値にリセットする。"""
    for step in config_loader.get_question_steps():
        clear_answer_inputs(question_ids_for_step(step["name"]))
    for key, value in DEFAULT_SESSION_VALUES.items():
        st.session_state[key] = value
    commit_session(transitions.new_session())
    # processingフラグは明示的にFalseに
    st.session_state[PROCESSING_KEY] = False

# ui/display_helpers.py
import streamlit as st
from typing import Dict, List, Optional

from core.type_definitions import SessionState, FINAL_ANALYSIS_KEY
from services.report_builder import main_final_analysis


def display_step_progress(step_name: str, question_steps: List[Dict[str, str]]):
    """質問ステップの進捗 (STEP n / 総数) をプログレスバーで表示する。"""
    names = [step["name"] for step in question_steps]
    if step_name not in names:
        return
    position = names.index(step_name) + 1
    st.progress(position / len(names), text=f"STEP {position} / {len(names)}")


def display_analysis_text(title: str, text: Optional[str]):
    """ステップごとの分析テキストを枠付きで表示する。"""
    with st.container(border=True):
        st.subheader(title)
        if text:
            # LLMの出力は改行区切りのプレーンテキスト
            st.text(text)
        else:
            st.caption("未実施")


def display_result_analyses(state: SessionState, question_steps: List[Dict[str, str]]):
    """結果画面: 各ステップの分析と、画像プロンプトを除いた総合分析を表示する。"""
    step_analysis = state["step_analysis"]
    for step in question_steps:
        label = step.get("title") or step["name"]
        display_analysis_text(f"{label} の分析", step_analysis.get(step["name"]))
    display_analysis_text("総合分析：やりたいこと", main_final_analysis(step_analysis.get(FINAL_ANALYSIS_KEY)))


def display_vision_image(image_url: Optional[str]):
    if not image_url:
        return
    st.subheader("あなたの未来のイメージ")
    st.image(image_url, use_container_width=True)


def display_debug_sidebar(state: SessionState, is_processing: bool):
    """デバッグ情報 (現在のステップ、回答数、処理中フラグ、分析の有無) をサイドバーに表示する。"""
    with st.sidebar:
        st.header("🔍 デバッグ情報")
        with st.expander("📊 セッション状態", expanded=False):
            st.write(f"**現在のステップ:** {state['current_step']}")
            st.write(f"**生徒名:** {state['student_name'] or '未入力'}")
            st.write(f"**回答数:** {len(state['answers'])}")
            st.write(f"**処理中:** {'はい' if is_processing else 'いいえ'}")
            st.write(f"**分析済み:** {', '.join(state['step_analysis'].keys()) or 'なし'}")
            st.write(f"**画像:** {'生成済み' if state['generated_image'] else '未生成'}")
            st.write(f"**通知済み:** {'はい' if state['notification_sent'] else 'いいえ'}")

# ui/wizard_ui.py
import streamlit as st
from typing import Dict

from core import state_manager, wizard_logic
from core.question_catalog import questions_for_step, question_ids_for_step
from core.type_definitions import (
    SupportChoice,
    STEP_INTRO,
    STEP_ANALYSIS,
    STEP_RESULT,
    STEP_FIRST_ACTION,
    STEP_COMPLETE,
    STEP_CHOICE,
)
from utils import config_loader

from .display_helpers import (
    display_step_progress,
    display_result_analyses,
    display_vision_image,
    display_debug_sidebar,
)

LOADING_TITLE = "AIが分析中"
LOADING_CAPTION = "あなたの回答を読み解いています"

SUPPORT_CAPTIONS = {
    SupportChoice.WITH_TEACHER: "先生と一緒に取り組む",
    SupportChoice.ON_MY_OWN: "一人で進める（困ったら声かけてね）",
}
SUPPORT_ACKNOWLEDGEMENTS = {
    SupportChoice.WITH_TEACHER: "先生にサポートを依頼しました。授業で一緒に取り組んでいきましょう。",
    SupportChoice.ON_MY_OWN: "了解です。自分のペースで進めてください。困ったらいつでも声をかけてね。",
}


def _render_messages():
    """エラーバナー (閉じるボタン付き) と成功メッセージを表示する。"""
    session = state_manager.get_session()
    if session.get("error_message"):
        col_msg, col_btn = st.columns([5, 1])
        with col_msg:
            st.error(session["error_message"])
        with col_btn:
            if st.button("閉じる", key="dismiss_error_btn"):
                state_manager.dismiss_error()
                st.rerun()
    if session.get("notice_message"):
        st.success(session["notice_message"])


def _render_intro():
    estimated_minutes = config_loader.get_config_value("app.estimated_minutes", 30)
    st.title("やりたいことを見つけよう")
    st.info("注意：これは成績には一切関係ありません\n\n正直に、思ったことをそのまま書いてください。")
    st.markdown(
        "「やりたいこと」は、次の3つをかけ合わせると見えてきます。\n\n"
        "- **V（Value）価値観**：どうありたいか\n"
        "- **T（Talent）才能**：自然にできてしまうこと\n"
        "- **P（Passion）情熱**：理屈抜きに惹かれること"
    )
    st.caption(f"所要時間：約{estimated_minutes}分")

    with st.form("intro_form", clear_on_submit=False):
        student_name = st.text_input("あなたの名前", placeholder="例：山田太郎", key="student_name_input")
        submitted = st.form_submit_button("はじめる", type="primary")
    if submitted:
        new_state = wizard_logic.submit_intro_logic(
            state_manager.get_session(), student_name, state_manager.get_step_order()
        )
        state_manager.commit_session(new_state)
        st.rerun()


def _render_question_step(step_descriptor: Dict[str, str], question_steps):
    step_name = step_descriptor["name"]
    display_step_progress(step_name, question_steps)
    st.header(step_descriptor.get("title") or step_name)
    if step_descriptor.get("description"):
        st.markdown(step_descriptor["description"])

    is_processing = state_manager.is_processing()
    with st.form(f"step_form_{step_name}", clear_on_submit=False):
        for question in questions_for_step(step_name):
            st.markdown(f"**{question.question}**")
            for sub_question in question.sub_questions:
                st.caption(f"・{sub_question}")
            st.text_area(
                question.question,
                placeholder=question.placeholder or "",
                key=state_manager.answer_input_key(question.id),
                label_visibility="collapsed",
                height=100,
            )
        submitted = st.form_submit_button("回答を送信して分析する", type="primary", disabled=is_processing)

    if submitted and not is_processing:
        inputs = {
            qid: st.session_state.get(state_manager.answer_input_key(qid), "")
            for qid in question_ids_for_step(step_name)
        }
        # 分析中オーバーレイは spinner で表示し、セッションには最終結果だけを保存する
        state_manager.set_processing_status(True)
        try:
            with st.spinner(f"{LOADING_TITLE}… {LOADING_CAPTION}"):
                new_state = wizard_logic.submit_step_logic(
                    state_manager.get_session(),
                    step_name,
                    inputs,
                    state_manager.get_step_order(),
                )
        finally:
            state_manager.set_processing_status(False)
        state_manager.commit_session(new_state)
        if new_state["current_step"] != step_name:
            state_manager.clear_answer_inputs(question_ids_for_step(step_name))
        st.rerun()


def _render_analysis_overlay():
    """分析中の状態のままセッションが残った場合の復帰画面。"""
    st.header("分析が中断されました")
    st.info("分析が途中で止まりました。回答は保存されています。下のボタンから質問画面に戻って、もう一度送信してください。")
    if st.button("質問画面に戻る", key="resume_analysis_btn", type="primary"):
        state_manager.recover_interrupted_analysis()
        st.rerun()


def _render_result(question_steps):
    session = state_manager.get_session()
    st.title(f"{session['student_name']} さんの分析結果")
    display_result_analyses(session, question_steps)
    display_vision_image(session["generated_image"])

    button_label = "結果を保存して次へ" if config_loader.is_drive_enabled() else "次へ進む"
    is_processing = state_manager.is_processing()
    if st.button(button_label, type="primary", disabled=is_processing, key="save_results_btn"):
        state_manager.set_processing_status(True)
        try:
            with st.spinner("結果を保存しています..."):
                new_state = wizard_logic.save_results_logic(session, state_manager.get_step_order())
        finally:
            state_manager.set_processing_status(False)
        state_manager.commit_session(new_state)
        st.rerun()


def _render_first_action():
    st.header("今日のファーストアクション")
    st.markdown("分析結果を見て、今日からできる小さな一歩を決めましょう。")
    with st.form("first_action_form", clear_on_submit=False):
        first_action = st.text_input(
            "今日のファーストアクション",
            placeholder="例：気になる仕事について10分調べてみる",
            key="first_action_input",
        )
        submitted = st.form_submit_button("完了する", type="primary", disabled=state_manager.is_processing())
    if submitted:
        state_manager.set_processing_status(True)
        try:
            with st.spinner("先生に結果を送信しています..."):
                new_state = wizard_logic.submit_first_action_logic(
                    state_manager.get_session(), first_action, state_manager.get_step_order()
                )
        finally:
            state_manager.set_processing_status(False)
        state_manager.commit_session(new_state)
        st.rerun()


def _render_restart_button():
    if st.button("最初からやり直す", key="restart_btn"):
        state_manager.reset_for_new_session()
        print("Wizard UI: Session reset by user.")
        st.rerun()


def _render_complete():
    session = state_manager.get_session()
    st.header("おつかれさまでした！")
    st.markdown(f"**{session['student_name']}** さんの自己分析ワークは完了です。")
    if session["first_action"]:
        st.info(f"今日のファーストアクション：{session['first_action']}")
    _render_restart_button()


def _send_support_choice(choice: SupportChoice):
    state_manager.set_processing_status(True)
    try:
        with st.spinner("先生に結果を送信しています..."):
            new_state = wizard_logic.record_support_choice_logic(state_manager.get_session(), choice)
    finally:
        state_manager.set_processing_status(False)
    state_manager.commit_session(new_state)
    st.rerun()


def _render_choice():
    session = state_manager.get_session()
    st.header("この結果をもとに、授業でやってみる？")

    chosen = None if session["wants_support"] is None else SupportChoice.from_wants_support(session["wants_support"])
    locked = session["notification_sent"] or state_manager.is_processing()

    cols = st.columns(2)
    for col, choice in zip(cols, (SupportChoice.WITH_TEACHER, SupportChoice.ON_MY_OWN)):
        with col:
            if st.button(str(choice), key=f"support_choice_{choice.name}", use_container_width=True,
                         type="primary" if chosen is choice else "secondary", disabled=locked):
                _send_support_choice(choice)
            st.caption(SUPPORT_CAPTIONS[choice])

    if chosen is not None:
        st.info(SUPPORT_ACKNOWLEDGEMENTS[chosen])
        if config_loader.is_email_enabled() and not session["notification_sent"]:
            if st.button("先生にもう一度送信する", key="resend_notification_btn", disabled=state_manager.is_processing()):
                _send_support_choice(chosen)
        _render_restart_button()


def render_wizard():
    """自己分析ワークのUIとロジックをレンダリングします。"""
    state_manager.initialize_session_state()
    session = state_manager.get_session()
    question_steps = config_loader.get_question_steps()

    if config_loader.get_config_value("ui.show_debug_sidebar", False):
        display_debug_sidebar(session, state_manager.is_processing())

    _render_messages()

    current_step = session["current_step"]
    step_descriptors = {step["name"]: step for step in question_steps}

    if current_step == STEP_INTRO:
        _render_intro()
    elif current_step in step_descriptors:
        _render_question_step(step_descriptors[current_step], question_steps)
    elif current_step == STEP_ANALYSIS:
        _render_analysis_overlay()
    elif current_step == STEP_RESULT:
        _render_result(question_steps)
    elif current_step == STEP_FIRST_ACTION:
        _render_first_action()
    elif current_step == STEP_COMPLETE:
        _render_complete()
    elif current_step == STEP_CHOICE:
        _render_choice()
    else:
        print(f"Wizard UI: Unknown step '{current_step}'. Resetting session.")
        st.warning("不明な状態になったため、最初からやり直します。")
        _render_restart_button()

# core/wizard_logic.py
from typing import List, Optional, Sequence

from services import gemini_service, image_service, drive_service, mail_service
from utils import config_loader
from . import transitions
from .analysis_text import extract_image_prompt
from .question_catalog import get_question, question_ids_for_step
from .type_definitions import (
    AnalysisBundle,
    Answer,
    AnswerInputs,
    AnswerWithQuestion,
    SessionState,
    SupportChoice,
    FINAL_ANALYSIS_KEY,
    STEP_ANALYSIS,
    STEP_RESULT,
)

ANALYSIS_FAILED_MESSAGE = "分析に失敗しました。もう一度お試しください。"
SAVE_FAILED_MESSAGE = "保存に失敗しました"


def _answers_with_questions(answers: Sequence[Answer], question_ids: Optional[Sequence[str]] = None) -> List[AnswerWithQuestion]:
    """
    回答に質問文を付ける。question_ids を指定した場合はそのIDの回答だけを、提出順のまま返す。
    """
    wanted = set(question_ids) if question_ids is not None else None
    result: List[AnswerWithQuestion] = []
    for answer in answers:
        if wanted is not None and answer.question_id not in wanted:
            continue
        question = get_question(answer.question_id)
        result.append({
            "question_id": answer.question_id,
            "question": question.question if question else answer.question_id,
            "answer": answer.answer,
        })
    return result


def build_analysis_bundle(state: SessionState) -> AnalysisBundle:
    """保存・メール送信に渡す分析結果一式。未実施のステップはキーを含めない。"""
    bundle: AnalysisBundle = {}
    for key in ("values", "talents", "passion", FINAL_ANALYSIS_KEY):
        text = state["step_analysis"].get(key)
        if text:
            bundle[key] = text  # type: ignore[literal-required]
    return bundle


def submit_intro_logic(state: SessionState, student_name: str, step_order: Sequence[str]) -> SessionState:
    """名前を確定して最初の質問ステップへ進む。名前が空なら遷移しない。"""
    new_state = transitions.submit_name(state, student_name, step_order)
    if new_state["current_step"] != state["current_step"]:
        print(f"Wizard Logic: Session started for '{new_state['student_name']}'.")
    return new_state


def submit_step_logic(
        state: SessionState,
        step: str,
        inputs: Optional[AnswerInputs],
        step_order: Sequence[str]
    ) -> SessionState:
    """
    質問ステップの回答を提出し、そのステップの分析を行う。

    - 成功: 分析を記録して次のステップへ進む。最後の質問ステップの場合は続けて総合分析を行う。
    - 失敗: エラーメッセージを設定して同じステップに戻る (回答は保持する)。

    途中の analysis 状態は戻り値にだけ現れる中間状態で、呼び出し側は最終結果だけを保存する。
    """
    question_ids = question_ids_for_step(step)
    state = transitions.append_step_answers(state, question_ids, inputs)
    state = transitions.enter_analysis(state)

    step_answers = _answers_with_questions(state["answers"], question_ids)
    print(f"Wizard Logic: Analyzing step '{step}' ({len(step_answers)} answer(s)).")
    result = gemini_service.analyze_step_llm(step, step_answers, previous_analysis=state["step_analysis"])

    analysis_text = (result.get("analysis") or "").strip() if isinstance(result, dict) else ""
    if not analysis_text:
        error_message = result.get("error") if isinstance(result, dict) else None
        print(f"Wizard Logic: Analysis for step '{step}' failed: {error_message}")
        return transitions.fail_step(state, step, error_message or ANALYSIS_FAILED_MESSAGE)

    following_step = transitions.next_step(step_order, step)
    if following_step != STEP_RESULT:
        return transitions.record_step_analysis(state, step, analysis_text, following_step)

    # 最後の質問ステップ: 分析中オーバーレイのまま総合分析へ
    state = transitions.record_step_analysis(state, step, analysis_text, STEP_ANALYSIS)
    return run_final_synthesis_logic(state, return_to=step)


def run_final_synthesis_logic(state: SessionState, return_to: str) -> SessionState:
    """
    全回答と各ステップの分析から総合分析を行い、画像プロンプトがあればビジョン画像を生成する。
    画像生成の失敗はログのみで、結果画面への遷移は妨げない。
    """
    all_answers = _answers_with_questions(state["answers"])
    print(f"Wizard Logic: Running final synthesis with {len(all_answers)} answer(s).")
    result = gemini_service.analyze_step_llm(FINAL_ANALYSIS_KEY, all_answers, previous_analysis=state["step_analysis"])

    final_text = (result.get("analysis") or "").strip() if isinstance(result, dict) else ""
    if not final_text:
        error_message = result.get("error") if isinstance(result, dict) else None
        print(f"Wizard Logic: Final synthesis failed: {error_message}")
        return transitions.fail_step(state, return_to, error_message or ANALYSIS_FAILED_MESSAGE)

    state = transitions.record_step_analysis(state, FINAL_ANALYSIS_KEY, final_text, STEP_ANALYSIS)

    image_prompt = extract_image_prompt(final_text, config_loader.get_image_prompt_delimiter())
    if image_prompt:
        image_result = image_service.generate_vision_image(image_prompt)
        if image_result.get("image_url"):
            state = transitions.record_image(state, image_result["image_url"])
        else:
            print(f"Wizard Logic: Image generation skipped after error: {image_result.get('error')}")
    else:
        print("Wizard Logic: No image prompt found in final synthesis. Skipping image generation.")

    return transitions.show_result(state)


def save_results_logic(state: SessionState, step_order: Sequence[str]) -> SessionState:
    """結果画面の保存操作。Drive保存が無効な場合は呼び出しを行わずに次へ進む。"""
    if not config_loader.is_drive_enabled():
        return transitions.advance_after_save(state, step_order)

    result = drive_service.save_analysis_to_student_folder(
        state["student_name"],
        build_analysis_bundle(state),
        image_url=state["generated_image"],
    )
    if not result.get("success"):
        details = result.get("details") or result.get("error") or ""
        print(f"Wizard Logic: Save failed: {details}")
        return transitions.set_error(state, f"{SAVE_FAILED_MESSAGE}: {details}" if details else SAVE_FAILED_MESSAGE)
    return transitions.advance_after_save(state, step_order, result.get("message"))


def submit_first_action_logic(state: SessionState, first_action: str, step_order: Sequence[str]) -> SessionState:
    """今日のファーストアクションを記録し、先生へ通知して完了する。通知に失敗した場合は留まる。"""
    recorded = transitions.record_first_action(state, first_action)
    if recorded["error_message"]:
        return recorded

    if not config_loader.is_email_enabled():
        return transitions.complete_session(recorded, step_order)

    result = mail_service.send_result_email(
        recorded["student_name"],
        build_analysis_bundle(recorded),
        image_url=recorded["generated_image"],
        first_action=recorded["first_action"],
    )
    if not result.get("success"):
        return transitions.set_error(recorded, result.get("error") or mail_service.MAIL_FAILED_PREFIX)
    return transitions.complete_session(recorded, step_order, result.get("message"))


def record_support_choice_logic(state: SessionState, choice: SupportChoice) -> SessionState:
    """
    授業での関わり方の選択を記録し、先生へ通知する。
    通知に失敗しても選択は記録したままにし、再送信できるようにする。
    """
    state = transitions.record_support_choice(state, choice.wants_support)
    print(f"Wizard Logic: Support preference recorded: {choice}")

    if not config_loader.is_email_enabled():
        return state

    result = mail_service.send_result_email(
        state["student_name"],
        build_analysis_bundle(state),
        image_url=state["generated_image"],
        first_action=state["first_action"],
        support_preference_label=str(choice),
    )
    if not result.get("success"):
        return transitions.set_error(state, result.get("error") or mail_service.MAIL_FAILED_PREFIX)
    return transitions.mark_notified(state, result.get("message"))

# core/transitions.py
"""
セッション状態の遷移関数。

すべての関数は (旧状態, イベント) を受け取り、新しい SessionState を返す純粋関数。
引数の状態は変更しない。Streamlit への書き込みは state_manager.commit_session が行う。
"""
from typing import Iterable, Optional, Sequence, Tuple

from .type_definitions import (
    Answer,
    AnswerInputs,
    SessionState,
    STEP_INTRO,
    STEP_ANALYSIS,
    STEP_RESULT,
    STEP_FIRST_ACTION,
    STEP_COMPLETE,
    STEP_CHOICE,
)

NAME_REQUIRED_MESSAGE = "名前を入力してください。"
FIRST_ACTION_REQUIRED_MESSAGE = "今日のファーストアクションを入力してください。"
ANALYSIS_INTERRUPTED_MESSAGE = "分析が中断されました。もう一度送信してください。"


def build_step_order(question_steps: Iterable[str], closing_variant: str) -> Tuple[str, ...]:
    """
    質問ステップ名と終了バリアントから、ウィザードのステップ順を組み立てる。
    分析中オーバーレイ (analysis) は滞留しないため順序には含めない。
    """
    closing = (STEP_FIRST_ACTION, STEP_COMPLETE) if closing_variant == STEP_FIRST_ACTION else (STEP_CHOICE,)
    return (STEP_INTRO, *question_steps, STEP_RESULT, *closing)


def next_step(step_order: Sequence[str], step: str) -> str:
    """step の次のステップを返す。末尾 (終端) の場合は step 自身を返す。"""
    if step not in step_order:
        raise ValueError(f"Unknown step '{step}' for order {tuple(step_order)}")
    index = step_order.index(step)
    return step_order[min(index + 1, len(step_order) - 1)]


def new_session(student_name: str = "") -> SessionState:
    return {
        "student_name": student_name,
        "current_step": STEP_INTRO,
        "answers": (),
        "step_analysis": {},
        "generated_image": None,
        "first_action": None,
        "wants_support": None,
        "notification_sent": False,
        "error_message": None,
        "notice_message": None,
    }


def _replace(state: SessionState, **changes) -> SessionState:
    new_state = dict(state)
    new_state.update(changes)
    return new_state  # type: ignore[return-value]


def set_error(state: SessionState, message: str) -> SessionState:
    return _replace(state, error_message=message)


def clear_error(state: SessionState) -> SessionState:
    return _replace(state, error_message=None)


def submit_name(state: SessionState, name: str, step_order: Sequence[str]) -> SessionState:
    """名前が空 (空白のみを含む) の場合は遷移せず、エラーだけを設定する。"""
    trimmed = (name or "").strip()
    if not trimmed:
        return set_error(state, NAME_REQUIRED_MESSAGE)
    return _replace(
        state,
        student_name=trimmed,
        current_step=next_step(step_order, STEP_INTRO),
        error_message=None,
    )


def append_step_answers(
    state: SessionState,
    question_ids: Sequence[str],
    inputs: Optional[AnswerInputs],
) -> SessionState:
    """
    ステップの質問ごとに Answer を1つずつ作り、回答リストの末尾に追加する。
    入力の無い質問は空文字として扱う。
    同じステップを再提出した場合は、そのステップの以前の回答を置き換える。
    """
    inputs = inputs or {}
    step_ids = set(question_ids)
    kept = tuple(a for a in state["answers"] if a.question_id not in step_ids)
    new_answers = tuple(Answer(qid, inputs.get(qid, "") or "") for qid in question_ids)
    return _replace(state, answers=kept + new_answers)


def enter_analysis(state: SessionState) -> SessionState:
    return _replace(state, current_step=STEP_ANALYSIS, error_message=None, notice_message=None)


def record_step_analysis(state: SessionState, analysis_key: str, text: str, advance_to: str) -> SessionState:
    step_analysis = dict(state["step_analysis"])
    step_analysis[analysis_key] = text
    return _replace(state, step_analysis=step_analysis, current_step=advance_to, error_message=None)


def show_result(state: SessionState) -> SessionState:
    """分析中オーバーレイを抜けて結果画面へ進む。"""
    return _replace(state, current_step=STEP_RESULT)


def fail_step(state: SessionState, return_to: str, message: str) -> SessionState:
    """外部呼び出しの失敗時、呼び出し元のステップへ戻してエラーを設定する。回答は保持する。"""
    return _replace(state, current_step=return_to, error_message=message)


def resume_interrupted_analysis(state: SessionState, question_steps: Sequence[str]) -> SessionState:
    """
    analysis のまま処理が途切れたセッションを、分析が未完了の最初の質問ステップへ戻す。
    すべて分析済みの場合 (総合分析の途中) は最後の質問ステップへ戻す。回答と分析は保持する。
    """
    if state["current_step"] != STEP_ANALYSIS or not question_steps:
        return state
    pending = [step for step in question_steps if step not in state["step_analysis"]]
    return_to = pending[0] if pending else question_steps[-1]
    return fail_step(state, return_to, ANALYSIS_INTERRUPTED_MESSAGE)


def record_image(state: SessionState, image_url: Optional[str]) -> SessionState:
    return _replace(state, generated_image=image_url or None)


def advance_after_save(state: SessionState, step_order: Sequence[str], message: Optional[str] = None) -> SessionState:
    return _replace(
        state,
        current_step=next_step(step_order, STEP_RESULT),
        error_message=None,
        notice_message=message,
    )


def record_first_action(state: SessionState, text: str) -> SessionState:
    trimmed = (text or "").strip()
    if not trimmed:
        return set_error(state, FIRST_ACTION_REQUIRED_MESSAGE)
    return _replace(state, first_action=trimmed, error_message=None)


def complete_session(state: SessionState, step_order: Sequence[str], message: Optional[str] = None) -> SessionState:
    return _replace(
        state,
        current_step=next_step(step_order, STEP_FIRST_ACTION),
        notification_sent=message is not None,
        error_message=None,
        notice_message=message,
    )


def record_support_choice(state: SessionState, wants_support: bool) -> SessionState:
    return _replace(state, wants_support=bool(wants_support), error_message=None)


def mark_notified(state: SessionState, message: str) -> SessionState:
    return _replace(state, notification_sent=True, error_message=None, notice_message=message)

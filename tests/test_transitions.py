"""Tests for the pure session-state transition functions."""
import pytest

from core import transitions
from core.question_catalog import question_ids_for_step
from core.type_definitions import Answer


class TestStepOrder:

    def test_choice_variant(self, choice_order):
        assert choice_order == ("intro", "values", "talents", "passion", "result", "choice")

    def test_first_action_variant(self, first_action_order):
        assert first_action_order == (
            "intro", "values", "talents", "passion", "result", "first_action", "complete",
        )

    def test_next_step_moves_one_position(self, choice_order):
        assert transitions.next_step(choice_order, "values") == "talents"
        assert transitions.next_step(choice_order, "passion") == "result"

    def test_terminal_step_stays_put(self, choice_order):
        assert transitions.next_step(choice_order, "choice") == "choice"

    def test_unknown_step_raises(self, choice_order):
        with pytest.raises(ValueError):
            transitions.next_step(choice_order, "complete")


class TestSubmitName:

    def test_valid_name_advances_to_first_question_step(self, choice_order):
        state = transitions.submit_name(transitions.new_session(), "  山田太郎 ", choice_order)
        assert state["current_step"] == "values"
        assert state["student_name"] == "山田太郎"
        assert state["error_message"] is None

    @pytest.mark.parametrize("name", ["", "   ", "\n\t"])
    def test_blank_name_blocks_transition(self, choice_order, name):
        start = transitions.new_session()
        state = transitions.submit_name(start, name, choice_order)
        assert state["current_step"] == "intro"
        assert state["error_message"] == transitions.NAME_REQUIRED_MESSAGE

    def test_original_state_is_not_mutated(self, choice_order):
        start = transitions.new_session()
        transitions.submit_name(start, "山田太郎", choice_order)
        assert start["current_step"] == "intro"
        assert start["student_name"] == ""


class TestAppendStepAnswers:

    def test_one_answer_per_question_with_blank_defaults(self, named_session):
        ids = question_ids_for_step("values")
        state = transitions.append_step_answers(named_session, ids, {"v1": "自由"})
        assert [a.question_id for a in state["answers"]] == list(ids)
        assert state["answers"][0] == Answer("v1", "自由")
        assert all(a.answer == "" for a in state["answers"][1:])

    def test_answers_accumulate_in_submission_order(self, named_session):
        state = named_session
        for step in ("values", "talents", "passion"):
            state = transitions.append_step_answers(state, question_ids_for_step(step), {})
        expected = [qid for step in ("values", "talents", "passion") for qid in question_ids_for_step(step)]
        assert [a.question_id for a in state["answers"]] == expected

    def test_resubmitting_a_step_replaces_its_answers(self, named_session):
        ids = question_ids_for_step("values")
        first = transitions.append_step_answers(named_session, ids, {"v1": "最初"})
        second = transitions.append_step_answers(first, ids, {"v1": "二回目"})
        assert len(second["answers"]) == len(ids)
        assert second["answers"][0] == Answer("v1", "二回目")

    def test_input_state_keeps_previous_answers(self, named_session):
        ids = question_ids_for_step("values")
        state = transitions.append_step_answers(named_session, ids, {"v1": "自由"})
        assert named_session["answers"] == ()
        assert len(state["answers"]) == len(ids)


class TestAnalysisTransitions:

    def test_enter_analysis_clears_messages(self, named_session):
        state = transitions.set_error(named_session, "前のエラー")
        state = transitions.enter_analysis(state)
        assert state["current_step"] == "analysis"
        assert state["error_message"] is None

    def test_record_step_analysis(self, named_session):
        state = transitions.record_step_analysis(named_session, "values", "分析結果", "talents")
        assert state["step_analysis"] == {"values": "分析結果"}
        assert state["current_step"] == "talents"
        assert named_session["step_analysis"] == {}

    def test_fail_step_returns_to_caller_and_keeps_answers(self, named_session):
        ids = question_ids_for_step("values")
        state = transitions.append_step_answers(named_session, ids, {"v1": "自由"})
        state = transitions.enter_analysis(state)
        state = transitions.fail_step(state, "values", "分析に失敗しました")
        assert state["current_step"] == "values"
        assert state["error_message"] == "分析に失敗しました"
        assert len(state["answers"]) == len(ids)

    def test_record_image_and_show_result(self, named_session):
        state = transitions.record_image(named_session, "https://example.com/a.png")
        state = transitions.show_result(state)
        assert state["generated_image"] == "https://example.com/a.png"
        assert state["current_step"] == "result"


class TestClosingTransitions:

    def test_advance_after_save(self, named_session, choice_order):
        state = transitions.advance_after_save(named_session, choice_order, "保存しました")
        assert state["current_step"] == "choice"
        assert state["notice_message"] == "保存しました"

    def test_blank_first_action_is_rejected(self, named_session):
        state = transitions.record_first_action(named_session, "   ")
        assert state["first_action"] is None
        assert state["error_message"] == transitions.FIRST_ACTION_REQUIRED_MESSAGE

    def test_complete_session(self, named_session, first_action_order):
        state = transitions.record_first_action(named_session, "本屋に行く")
        state = transitions.complete_session(state, first_action_order, "送信しました")
        assert state["current_step"] == "complete"
        assert state["first_action"] == "本屋に行く"
        assert state["notification_sent"] is True

    def test_support_choice_and_notification(self, named_session):
        state = transitions.record_support_choice(named_session, True)
        assert state["wants_support"] is True
        assert state["notification_sent"] is False
        state = transitions.mark_notified(state, "送信しました")
        assert state["notification_sent"] is True
        assert state["notice_message"] == "送信しました"


class TestResumeInterruptedAnalysis:

    def test_returns_to_first_step_without_analysis(self, named_session):
        state = transitions.record_step_analysis(named_session, "values", "分析結果", "talents")
        state = transitions.append_step_answers(state, question_ids_for_step("talents"), {"t1": "文化祭"})
        state = transitions.enter_analysis(state)

        resumed = transitions.resume_interrupted_analysis(state, ("values", "talents", "passion"))
        assert resumed["current_step"] == "talents"
        assert resumed["error_message"] == transitions.ANALYSIS_INTERRUPTED_MESSAGE
        assert resumed["step_analysis"] == {"values": "分析結果"}
        assert len(resumed["answers"]) == len(question_ids_for_step("talents"))

    def test_returns_to_last_step_when_final_was_interrupted(self, named_session):
        state = named_session
        for step in ("values", "talents", "passion"):
            state = transitions.record_step_analysis(state, step, f"{step}分析", "analysis")
        resumed = transitions.resume_interrupted_analysis(state, ("values", "talents", "passion"))
        assert resumed["current_step"] == "passion"

    def test_other_steps_are_left_alone(self, named_session):
        assert transitions.resume_interrupted_analysis(named_session, ("values",)) is named_session

# core/__init__.py
from .type_definitions import (
    SupportChoice,
    FINAL_ANALYSIS_KEY,
    # ステップ定数
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
from .question_catalog import questions_for_step, question_ids_for_step, get_question
from .analysis_text import extract_image_prompt, strip_image_prompt
from .state_manager import (
    initialize_session_state,
    get_session,
    commit_session,
    get_current_step,
    get_step_order,
    set_processing_status,
    is_processing,
    clear_answer_inputs,
    dismiss_error,
    recover_interrupted_analysis,
    reset_for_new_session,
)
from .wizard_logic import (
    submit_intro_logic,
    submit_step_logic,
    run_final_synthesis_logic,
    save_results_logic,
    submit_first_action_logic,
    record_support_choice_logic,
    build_analysis_bundle,
)

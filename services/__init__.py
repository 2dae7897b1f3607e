# services/__init__.py
from .gemini_service import (
    analyze_step_llm,
    call_gemini_api,
    format_answers_for_prompt,
    load_prompt_template,
)
from .image_service import generate_vision_image
from .drive_service import save_analysis_to_student_folder
from .mail_service import send_result_email

__all__ = [
    "analyze_step_llm",
    "call_gemini_api",
    "format_answers_for_prompt",
    "load_prompt_template",
    "generate_vision_image",
    "save_analysis_to_student_folder",
    "send_result_email",
]

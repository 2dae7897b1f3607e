# utils/__init__.py
from .config_loader import (
    get_config,
    get_config_value,
    get_text_model_name,
    get_image_model_name,
    get_prompt_template_name,
    get_question_steps,
    get_closing_variant,
)
from .image_utils import download_image_bytes, detect_image_format

__all__ = [
    "get_config",
    "get_config_value",
    "get_text_model_name",
    "get_image_model_name",
    "get_prompt_template_name",
    "get_question_steps",
    "get_closing_variant",
    "download_image_bytes",
    "detect_image_format",
]

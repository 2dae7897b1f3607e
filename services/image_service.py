# services/image_service.py
import os
from typing import Dict, Optional

from openai import OpenAI, OpenAIError

from utils import config_loader
from . import gemini_service

IMAGE_FAILED_MESSAGE = "Image generation failed"

_client: Optional[OpenAI] = None


def get_openai_client() -> OpenAI:
    """OPENAI_API_KEY からクライアントを作り、以後は使い回す。"""
    global _client
    if _client is None:
        _client = OpenAI(api_key=os.getenv("OPENAI_API_KEY"))
    return _client


def build_image_prompt(image_prompt: str) -> str:
    """総合分析から取り出した英語プロンプトを、画像生成用のテンプレートに埋め込む。"""
    template = gemini_service.load_prompt_template(config_loader.PROMPT_KEY_VISION_IMAGE)
    if template is None:
        return image_prompt
    try:
        return template.strip().format(image_prompt=image_prompt)
    except (KeyError, IndexError) as e:
        print(f"KeyError during prompt formatting for {config_loader.PROMPT_KEY_VISION_IMAGE}: Missing key {e}")
        return image_prompt


def generate_vision_image(prompt: str) -> Dict[str, str]:
    """
    生徒の未来像を表す画像を生成する。

    Returns:
        Dict[str, str]: 成功時は {"image_url": ...}、失敗時は {"error": ...}
    """
    if not prompt or not prompt.strip():
        return {"error": "画像プロンプトが空です。"}

    model = config_loader.get_image_model_name()
    try:
        client = get_openai_client()
        response = client.images.generate(
            model=model,
            prompt=build_image_prompt(prompt.strip()),
            n=1,
            size=config_loader.get_config_value("image_generation.size", "1024x1024"),
            quality=config_loader.get_config_value("image_generation.quality", "standard"),
        )
        image_url = response.data[0].url if response.data else None
    except (OpenAIError, IndexError, AttributeError) as e:
        print(f"Image Service: Image generation error (model: {model}): {e}")
        return {"error": IMAGE_FAILED_MESSAGE}

    if not image_url:
        print("Image Service: Image generation error: No image generated")
        return {"error": IMAGE_FAILED_MESSAGE}
    return {"image_url": image_url}

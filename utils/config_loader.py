import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, List
import streamlit as st  # エラー表示用

# Prompt Template Keys (gemini_service.py / image_service.py から参照)
PROMPT_KEY_SYSTEM: str = "system_prompt"
PROMPT_KEY_ANALYZE_VALUES: str = "analyze_values"
PROMPT_KEY_ANALYZE_TALENTS: str = "analyze_talents"
PROMPT_KEY_ANALYZE_PASSION: str = "analyze_passion"
PROMPT_KEY_ANALYZE_FINAL: str = "analyze_final"
PROMPT_KEY_VISION_IMAGE: str = "vision_image"

CONFIG_PATH = Path(__file__).parent.parent / "config.yaml"

# ステップ定義が config.yaml にない場合のデフォルト
DEFAULT_QUESTION_STEPS: List[Dict[str, str]] = [
    {"name": "values", "title": "STEP 1: 価値観を知る", "description": "", "prompt_template": PROMPT_KEY_ANALYZE_VALUES},
    {"name": "talents", "title": "STEP 2: 才能を知る", "description": "", "prompt_template": PROMPT_KEY_ANALYZE_TALENTS},
    {"name": "passion", "title": "STEP 3: 情熱を知る", "description": "", "prompt_template": PROMPT_KEY_ANALYZE_PASSION},
]

_config_cache: Optional[Dict[str, Any]] = None

def get_config() -> Dict[str, Any]:
    """
    設定ファイルを読み込み、キャッシュする。
    エラー時はstreamlitで表示し、空辞書を返す。
    """
    global _config_cache
    if _config_cache is None:
        try:
            if not CONFIG_PATH.is_file():
                print(f"CRITICAL ERROR: config.yaml not found at {CONFIG_PATH}")
                st.error(f"システム設定エラー: config.yamlが見つかりません ({CONFIG_PATH})。")
                _config_cache = {}
                return _config_cache

            with open(CONFIG_PATH, "r", encoding="utf-8") as f:
                _config_cache = yaml.safe_load(f)

            if not isinstance(_config_cache, dict):
                print("CRITICAL ERROR: config.yaml is not a valid YAML dictionary.")
                st.error("システム設定エラー: config.yamlの形式が正しくありません。")
                _config_cache = {}
        except yaml.YAMLError as e:
            print(f"CRITICAL ERROR: Error parsing config.yaml: {e}")
            st.error(f"システム設定エラー: config.yamlの解析に失敗しました: {e}")
            _config_cache = {}
        except OSError as e:
            print(f"CRITICAL ERROR: An unexpected error occurred while loading config.yaml: {e}")
            st.error(f"システム設定エラー: config.yamlの読み込み中に予期せぬエラーが発生しました: {e}")
            _config_cache = {}
    return _config_cache if _config_cache is not None else {}

def reset_config_cache():
    """キャッシュを破棄する。次回 get_config() で再読み込みされる。"""
    global _config_cache
    _config_cache = None

def get_config_value(key_path: str, default: Any = None) -> Any:
    """
    ネストされたキーパス (例: "llm_models.text_model_name") を使って設定値を取得する。
    キーが存在しない場合はデフォルト値を返す。
    """
    value: Any = get_config()
    for key in key_path.split('.'):
        if not isinstance(value, dict) or key not in value:
            return default
        value = value[key]
    return value

# --- 特定の設定値を取得するためのヘルパー関数 ---
def get_text_model_name(default_value: str = "gemini-2.5-flash") -> str:
    return get_config_value("llm_models.text_model_name", default_value)

def get_image_model_name(default_value: str = "dall-e-3") -> str:
    return get_config_value("image_generation.model", default_value)

def get_prompt_template_name(template_key: str) -> Optional[str]:
    # 未設定の場合は None を返し、呼び出し元でエラーハンドリングする
    return get_config_value(f"prompt_templates.{template_key}")

def get_image_prompt_delimiter(default_value: str = "===画像プロンプト===") -> str:
    return get_config_value("analysis.image_prompt_delimiter", default_value)

def get_analysis_marker(default_value: str = "===分析===") -> str:
    return get_config_value("analysis.analysis_marker", default_value)

def get_question_steps() -> List[Dict[str, str]]:
    """質問ステップの記述子リスト (name, title, description, prompt_template) を返す。"""
    steps = get_config_value("wizard.question_steps")
    if not isinstance(steps, list) or not steps:
        return DEFAULT_QUESTION_STEPS
    return [step for step in steps if isinstance(step, dict) and step.get("name")]

def get_closing_variant(default_value: str = "choice") -> str:
    variant = get_config_value("wizard.closing_variant", default_value)
    if variant not in ("first_action", "choice"):
        print(f"Warning: Unknown wizard.closing_variant '{variant}'. Falling back to '{default_value}'.")
        return default_value
    return variant

def get_drive_parent_folder_id() -> str:
    # 環境変数が設定されていれば config.yaml より優先する
    return os.getenv("DRIVE_PARENT_FOLDER_ID") or get_config_value("drive.parent_folder_id", "") or ""

def is_drive_enabled() -> bool:
    return bool(get_config_value("delivery.save_to_drive", True))

def is_email_enabled() -> bool:
    return bool(get_config_value("delivery.send_email", True))


if __name__ == '__main__':
    print("--- Testing get_config ---")
    loaded_config = get_config()
    print("Config loaded successfully." if loaded_config else "Config loading failed or returned empty.")

    print("\n--- Testing specific getters ---")
    print(f"Text Model: {get_text_model_name()}")
    print(f"Image Model: {get_image_model_name()}")
    print(f"Closing variant: {get_closing_variant()}")
    print(f"Question steps: {[s['name'] for s in get_question_steps()]}")
    final_prompt_name = get_prompt_template_name(PROMPT_KEY_ANALYZE_FINAL)
    if final_prompt_name:
        print(f"Final Analysis Prompt File: {final_prompt_name}.md")
    else:
        print(f"Final Analysis Prompt File: Not configured (template_key: {PROMPT_KEY_ANALYZE_FINAL})")

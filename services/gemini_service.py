# services/gemini_service.py
import google.generativeai as genai
from typing import List, Dict, Any, Optional, Union
from pathlib import Path
from utils import config_loader
# core から型定義をインポート (循環依存に注意しつつ、型定義と定数のみなので許容範囲とする)
from core.type_definitions import AnswerWithQuestion, StepAnalysis, FINAL_ANALYSIS_KEY

# --- モデル名をconfigから取得 ---
TEXT_MODEL_NAME = config_loader.get_text_model_name()

# このファイル(gemini_service.py)の親ディレクトリ(services)の親ディレクトリ(プロジェクトルート)の下のprompts
PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

ANALYSIS_FAILED_MESSAGE = "分析に失敗しました。もう一度お試しください。"
UNANSWERED_TEXT = "（未回答）"
NOT_ANALYZED_TEXT = "（分析なし）"


def load_prompt_template(template_key: str) -> Optional[str]:
    """指定されたキーに対応するプロンプトテンプレートファイルを読み込む。
    config_loaderを通じてファイル名を取得し、PROMPTS_DIRからファイルを読み取る。
    ファイルが見つからない、または読み込みエラーの場合はNoneを返す。
    """
    template_filename = config_loader.get_prompt_template_name(template_key)
    if template_filename is None:
        print(f"Critical Error: Prompt template key '{template_key}' not found in config.yaml.")
        return None

    prompt_file_path = PROMPTS_DIR / f"{template_filename}.md"
    if not prompt_file_path.exists():
        print(f"Critical Error: Prompt template file does not exist at {prompt_file_path.resolve()}")
        return None
    try:
        with open(prompt_file_path, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        print(f"Critical Error: Error reading prompt template file {prompt_file_path.resolve()}: {e}")
        return None


# --- システムプロンプトの読み込み ---
SYSTEM_PROMPT_CONTENT = load_prompt_template(config_loader.PROMPT_KEY_SYSTEM)
if SYSTEM_PROMPT_CONTENT is None:
    # 起動時に警告を出すが、処理は続行させる
    print("WARNING: Failed to load system prompt. API calls may lack the counselor persona and output rules.")


def call_gemini_api(
    prompt_or_contents: Union[str, List[Any]],
    model_name: Optional[str] = None,
    generation_config: Optional[Dict[str, Any]] = None,
    safety_settings: Optional[List[Dict[str, Any]]] = None,
) -> Optional[str]:
    """Google Generative AI API (Gemini) を呼び出す共通関数。

    Args:
        prompt_or_contents: LLMに渡すプロンプト文字列、またはcontentsリスト。
        model_name: 使用するモデル名。Noneの場合はTEXT_MODEL_NAMEが使用される。
        generation_config: 生成時の設定 (temperature, top_pなど)。
        safety_settings: 安全性設定。

    Returns:
        Optional[str]: LLMからのレスポンステキスト。エラー時はNone。
    """
    final_model_name = model_name if model_name else TEXT_MODEL_NAME

    current_system_instruction = SYSTEM_PROMPT_CONTENT if SYSTEM_PROMPT_CONTENT else None
    if current_system_instruction is None:
        print(f"Warning: System prompt content is not loaded. Calling API for model {final_model_name} without system instruction.")

    try:
        model = genai.GenerativeModel(
            final_model_name,
            system_instruction=current_system_instruction
        )

        # APIに渡す形式をcontentsリストに統一
        final_contents = [prompt_or_contents] if isinstance(prompt_or_contents, str) else prompt_or_contents

        response = model.generate_content(
            final_contents,
            generation_config=generation_config,
            safety_settings=safety_settings
        )
        return response.text
    except Exception as e:
        # API呼び出し中の予期せぬエラー (認証エラー、クォータ超過、ネットワーク問題など)
        print(f"Error calling Gemini API (model: {final_model_name}): {e}")
        return None


def format_answers_for_prompt(answers: Optional[List[AnswerWithQuestion]]) -> str:
    """質問と回答のペアを、LLMプロンプト用の単一文字列に整形する。"""
    if not answers:
        return UNANSWERED_TEXT
    blocks = []
    for item in answers:
        answer_text = (item.get("answer") or "").strip()
        blocks.append(f"【質問】{item.get('question', '')}\n【回答】{answer_text or UNANSWERED_TEXT}")
    return "\n\n".join(blocks)


def _template_key_for_step(step: str) -> Optional[str]:
    if step == FINAL_ANALYSIS_KEY:
        return config_loader.PROMPT_KEY_ANALYZE_FINAL
    for descriptor in config_loader.get_question_steps():
        if descriptor.get("name") == step:
            return descriptor.get("prompt_template")
    return None


def build_analysis_prompt(
        step: str,
        answers: List[AnswerWithQuestion],
        previous_analysis: Optional[StepAnalysis] = None
    ) -> Dict[str, str]:
    """
    ステップ名に対応するテンプレートを読み込み、プロンプトを組み立てる。

    Returns:
        Dict[str, str]: 成功時は {"prompt": ...}、失敗時は {"error": "システムエラー: ..."}
    """
    template_key = _template_key_for_step(step)
    if template_key is None:
        print(f"Error: No prompt template configured for step '{step}'.")
        return {"error": f"システムエラー: ステップ '{step}' の分析プロンプトが設定されていません。"}

    prompt_template = load_prompt_template(template_key)
    if prompt_template is None:
        return {"error": f"システムエラー: 分析プロンプト '{template_key}' を読み込めませんでした。"}

    previous_analysis = previous_analysis or {}
    try:
        prompt = prompt_template.format(
            answers=format_answers_for_prompt(answers),
            values_analysis=previous_analysis.get("values") or NOT_ANALYZED_TEXT,
            talents_analysis=previous_analysis.get("talents") or NOT_ANALYZED_TEXT,
            passion_analysis=previous_analysis.get("passion") or NOT_ANALYZED_TEXT,
            image_prompt_delimiter=config_loader.get_image_prompt_delimiter(),
        )
    except (KeyError, IndexError) as e:
        error_message = f"システムエラー: プロンプト '{template_key}' のフォーマットに失敗しました。プレースホルダ {e} が不足しています。"
        print(f"KeyError during prompt formatting for {template_key}: Missing key {e}")
        return {"error": error_message}
    return {"prompt": prompt}


def analyze_step_llm(
        step: str,
        answers: List[AnswerWithQuestion],
        previous_analysis: Optional[StepAnalysis] = None
    ) -> Dict[str, str]:
    """ステップの回答 (総合分析では全回答と3つの分析) をLLMに送り、分析テキストを得る。
    プロンプト: wizard.question_steps[*].prompt_template / "analyze_final"
    期待するプレースホルダ: {answers}, {values_analysis}, {talents_analysis}, {passion_analysis}, {image_prompt_delimiter}

    Returns:
        Dict[str, str]: 成功時は {"analysis": ...}、失敗時は {"error": ...}
    """
    built = build_analysis_prompt(step, answers, previous_analysis)
    if "error" in built:
        return {"error": built["error"]}

    print(f"Gemini Service: Requesting '{step}' analysis with {len(answers)} answer(s).")
    response_text = call_gemini_api(built["prompt"], model_name=TEXT_MODEL_NAME)

    if response_text is None or not response_text.strip():
        print(f"Warning: analyze_step_llm received no usable text for step '{step}': {response_text!r}")
        return {"error": ANALYSIS_FAILED_MESSAGE}

    return {"analysis": response_text.strip()}

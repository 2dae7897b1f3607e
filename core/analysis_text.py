# core/analysis_text.py
"""
総合分析テキストの書式。

総合分析の応答は、人が読む分析本文と、画像生成用の英語プロンプトを
区切り行 (既定: "===画像プロンプト===") で分けて返す。

    ～3つの要素をかけ合わせると～
    ...
    ===画像プロンプト===
    A student painting by the sea ...

- 画像プロンプトは最初の区切り行より後ろすべてを前後の空白を除いて取り出したもの。
- 区切り行が無い場合、画像プロンプトは空文字で、画像生成は行わない。
- 分析本文は区切り行より前の部分から、先頭の "===分析===" を除いて前後の空白を除いたもの。
"""

DEFAULT_IMAGE_PROMPT_DELIMITER = "===画像プロンプト==="
DEFAULT_ANALYSIS_MARKER = "===分析==="


def extract_image_prompt(text: str, delimiter: str = DEFAULT_IMAGE_PROMPT_DELIMITER) -> str:
    if not text or not delimiter or delimiter not in text:
        return ""
    return text.split(delimiter, 1)[1].strip()


def strip_image_prompt(
    text: str,
    delimiter: str = DEFAULT_IMAGE_PROMPT_DELIMITER,
    analysis_marker: str = DEFAULT_ANALYSIS_MARKER,
) -> str:
    if not text:
        return ""
    main_part = text.split(delimiter, 1)[0] if delimiter else text
    main_part = main_part.strip()
    if analysis_marker and main_part.startswith(analysis_marker):
        main_part = main_part[len(analysis_marker):]
    return main_part.strip()

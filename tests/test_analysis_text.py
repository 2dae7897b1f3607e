"""Tests for the final-analysis text format (image prompt delimiter)."""
from core.analysis_text import extract_image_prompt, strip_image_prompt

DELIMITER = "===画像プロンプト==="


class TestExtractImagePrompt:

    def test_prompt_after_delimiter_is_trimmed(self):
        text = f"...{DELIMITER}\n A bright future"
        assert extract_image_prompt(text) == "A bright future"

    def test_missing_delimiter_yields_empty_prompt(self):
        assert extract_image_prompt("～3つの要素をかけ合わせると～\n本文のみ") == ""

    def test_empty_text(self):
        assert extract_image_prompt("") == ""

    def test_everything_after_first_delimiter_is_kept(self):
        text = f"本文\n{DELIMITER}\nline one\nline two\n"
        assert extract_image_prompt(text) == "line one\nline two"

    def test_custom_delimiter(self):
        assert extract_image_prompt("a ### b ", delimiter="###") == "b"


class TestStripImagePrompt:

    def test_returns_text_before_delimiter(self):
        text = f"～3つの要素をかけ合わせると～\n方向性\n\n{DELIMITER}\nA student painting"
        assert strip_image_prompt(text) == "～3つの要素をかけ合わせると～\n方向性"

    def test_leading_analysis_marker_removed(self):
        text = f"===分析===\n本文です\n{DELIMITER}\nprompt"
        assert strip_image_prompt(text) == "本文です"

    def test_text_without_delimiter_is_returned_trimmed(self):
        assert strip_image_prompt("  本文だけ  \n") == "本文だけ"

    def test_empty_text(self):
        assert strip_image_prompt("") == ""

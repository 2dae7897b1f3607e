# services/report_builder.py
"""
保存用の記録テキストと、先生宛てメールの件名・本文を組み立てる。
分析が無いセクションは「未実施」、未入力の項目は「未入力」「未選択」で埋める。
"""
import html
from datetime import date
from typing import Optional

from utils import config_loader
from core.analysis_text import extract_image_prompt, strip_image_prompt
from core.type_definitions import AnalysisBundle

NOT_COMPLETED = "未実施"
NOT_ENTERED = "未入力"
NOT_SELECTED = "未選択"

HEAVY_RULE = "=" * 80
LIGHT_RULE = "-" * 80

# (ラベル, bundleのキー)
TRANSCRIPT_SECTIONS = (
    ("【価値観の分析】", "values"),
    ("【才能の分析】", "talents"),
    ("【情熱の分析】", "passion"),
    ("【総合分析・やりたいことの導出】", "final"),
)
IMAGE_PROMPT_LABEL = "【ビジョン画像のプロンプト】"
EMAIL_SECTIONS = (
    ("【V】価値観の分析", "values"),
    ("【T】才能の分析", "talents"),
    ("【P】情熱の分析", "passion"),
    ("【総合分析】やりたいこと（V × T × P）", "final"),
)


def format_display_date(day: date) -> str:
    """記録・メールに表示する日付 (例: 2026/4/1)。"""
    return f"{day.year}/{day.month}/{day.day}"


def main_final_analysis(final_text: Optional[str]) -> str:
    """総合分析から画像プロンプトを除いた、人が読む部分。"""
    return strip_image_prompt(
        final_text or "",
        delimiter=config_loader.get_image_prompt_delimiter(),
        analysis_marker=config_loader.get_analysis_marker(),
    )


def _section_texts(analysis: AnalysisBundle) -> dict:
    texts = {key: (analysis.get(key) or "").strip() for key in ("values", "talents", "passion")}
    texts["final"] = main_final_analysis(analysis.get("final"))
    return {key: value or NOT_COMPLETED for key, value in texts.items()}


def transcript_filename(day: date) -> str:
    return f"分析結果_{day.isoformat()}.txt"


def image_filename(day: date, extension: str = "png") -> str:
    return f"ビジョン画像_{day.isoformat()}.{extension}"


def build_transcript(student_name: str, analysis: AnalysisBundle, day: Optional[date] = None) -> str:
    """Google Drive に保存するプレーンテキストの記録。"""
    day = day or date.today()
    texts = _section_texts(analysis)

    lines = [
        HEAVY_RULE,
        f"自己分析結果 - {student_name}",
        f"実施日: {format_display_date(day)}",
        HEAVY_RULE,
        "",
    ]
    for index, (label, key) in enumerate(TRANSCRIPT_SECTIONS):
        if index > 0:
            lines.extend([LIGHT_RULE, ""])
        lines.extend([label, texts[key], ""])

    # 画像の生成に使ったプロンプトも記録に残す
    image_prompt = extract_image_prompt(analysis.get("final") or "", config_loader.get_image_prompt_delimiter())
    if image_prompt:
        lines.extend([LIGHT_RULE, "", IMAGE_PROMPT_LABEL, image_prompt, ""])
    lines.append(HEAVY_RULE)
    return "\n".join(lines) + "\n"


def build_email_subject(student_name: str, day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"【自己分析結果】{student_name} さん - {format_display_date(day)}"


def build_email_text(
        student_name: str,
        analysis: AnalysisBundle,
        first_action: Optional[str] = None,
        support_preference_label: Optional[str] = None,
        has_image: bool = False,
        day: Optional[date] = None
    ) -> str:
    """HTMLメールのプレーンテキスト代替。"""
    day = day or date.today()
    texts = _section_texts(analysis)

    lines = [
        f"{student_name} さんの自己分析結果",
        f"実施日: {format_display_date(day)}",
        "",
    ]
    for label, key in EMAIL_SECTIONS:
        lines.extend([label, texts[key], ""])
    if has_image:
        lines.extend(["ビジョン画像", "（HTML版のメールに添付しています）", ""])
    lines.extend(["今日のファーストアクション", (first_action or "").strip() or NOT_ENTERED, ""])
    lines.extend(["今後の関わり方についての意思表示", (support_preference_label or "").strip() or NOT_SELECTED])
    return "\n".join(lines) + "\n"


def _html_paragraph(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def build_email_html(
        student_name: str,
        analysis: AnalysisBundle,
        first_action: Optional[str] = None,
        support_preference_label: Optional[str] = None,
        image_cid: Optional[str] = None,
        day: Optional[date] = None
    ) -> str:
    """
    先生宛てメールのHTML本文。

    image_cid が指定された場合、ビジョン画像を cid: 参照で埋め込む
    (画像自体は mail_service 側でインライン添付する)。
    """
    day = day or date.today()
    texts = _section_texts(analysis)

    parts = [
        "<html><body style=\"font-family: sans-serif; line-height: 1.7; color: #333;\">",
        f"<h2>{html.escape(student_name)} さんの自己分析結果</h2>",
        f"<p>実施日: {format_display_date(day)}</p>",
    ]
    for label, key in EMAIL_SECTIONS:
        parts.append(f"<h3>{html.escape(label)}</h3>")
        parts.append(f"<p>{_html_paragraph(texts[key])}</p>")
    if image_cid:
        parts.append("<h3>ビジョン画像</h3>")
        parts.append(f"<p><img src=\"cid:{html.escape(image_cid)}\" alt=\"ビジョン画像\" style=\"max-width: 100%;\"></p>")
    parts.append("<h3>今日のファーストアクション</h3>")
    parts.append(f"<p>{_html_paragraph((first_action or '').strip() or NOT_ENTERED)}</p>")
    parts.append("<h3>今後の関わり方についての意思表示</h3>")
    parts.append(f"<p>{_html_paragraph((support_preference_label or '').strip() or NOT_SELECTED)}</p>")
    parts.append("</body></html>")
    return "\n".join(parts)

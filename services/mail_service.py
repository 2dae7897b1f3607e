# services/mail_service.py
import os
import smtplib
from email.header import Header
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from datetime import date
from typing import Dict, Optional

from utils import config_loader
from utils.image_utils import download_image_bytes, detect_image_format
from core.type_definitions import AnalysisBundle
from . import report_builder

MAIL_FAILED_PREFIX = "メール送信に失敗しました"
MAIL_SENT_MESSAGE = "結果を先生にメールで送信しました"


def _get_sender_credentials():
    return os.getenv("MAIL_SENDER_ADDRESS"), os.getenv("MAIL_SENDER_PASSWORD")


def build_result_message(
        sender_address: str,
        recipient: str,
        student_name: str,
        analysis: AnalysisBundle,
        image_bytes: Optional[bytes] = None,
        first_action: Optional[str] = None,
        support_preference_label: Optional[str] = None
    ) -> MIMEMultipart:
    """
    HTML + プレーンテキストのメールを組み立てる。
    画像がある場合は multipart/related にインライン添付し、HTMLから cid: で参照する。
    """
    image_cid = make_msgid(domain="vision.local")[1:-1] if image_bytes else None

    alternative = MIMEMultipart("alternative")
    alternative.attach(MIMEText(
        report_builder.build_email_text(
            student_name, analysis,
            first_action=first_action,
            support_preference_label=support_preference_label,
            has_image=image_bytes is not None,
        ),
        "plain", "utf-8",
    ))
    alternative.attach(MIMEText(
        report_builder.build_email_html(
            student_name, analysis,
            first_action=first_action,
            support_preference_label=support_preference_label,
            image_cid=image_cid,
        ),
        "html", "utf-8",
    ))

    msg = MIMEMultipart("related")
    sender_name = config_loader.get_config_value("mail.sender_name", "")
    msg["From"] = formataddr((sender_name, sender_address)) if sender_name else sender_address
    msg["To"] = recipient
    msg["Subject"] = Header(report_builder.build_email_subject(student_name), "utf-8")
    msg.attach(alternative)

    if image_bytes and image_cid:
        mime_type, extension = detect_image_format(image_bytes)
        image_part = MIMEImage(image_bytes, _subtype=mime_type.split("/", 1)[1])
        image_part.add_header("Content-ID", f"<{image_cid}>")
        image_part.add_header("Content-Disposition", "inline", filename=report_builder.image_filename(date.today(), extension))
        msg.attach(image_part)
    return msg


def send_result_email(
        student_name: str,
        analysis: AnalysisBundle,
        image_url: Optional[str] = None,
        first_action: Optional[str] = None,
        support_preference_label: Optional[str] = None
    ) -> Dict[str, object]:
    """
    分析結果を先生のアドレスにメールで送る。

    Returns:
        Dict: 成功時は {"success": True, "message": ...}、失敗時は {"error": ...}
    """
    sender_address, sender_password = _get_sender_credentials()
    if not sender_address or not sender_password:
        print("Mail Service: Error: MAIL_SENDER_ADDRESS or MAIL_SENDER_PASSWORD is not set.")
        return {"error": f"{MAIL_FAILED_PREFIX}: 送信元メールアドレスが設定されていません。"}

    recipient = config_loader.get_config_value("mail.recipient")
    if not recipient:
        print("Mail Service: Error: mail.recipient is not configured in config.yaml.")
        return {"error": f"{MAIL_FAILED_PREFIX}: 送信先が設定されていません。"}

    image_bytes = None
    if image_url:
        # 画像の取得に失敗してもメール本文は送る
        image_bytes = download_image_bytes(
            image_url, timeout=config_loader.get_config_value("mail.image_download_timeout", 10)
        )

    print(f"Mail Service: Sending results for: {student_name} (support preference: {support_preference_label})")
    msg = build_result_message(
        sender_address, recipient, student_name, analysis,
        image_bytes=image_bytes,
        first_action=first_action,
        support_preference_label=support_preference_label,
    )

    try:
        server = smtplib.SMTP(
            config_loader.get_config_value("mail.smtp_host", "smtp.gmail.com"),
            int(config_loader.get_config_value("mail.smtp_port", 587)),
            timeout=30,
        )
        try:
            server.starttls()
            server.login(sender_address, sender_password)
            server.sendmail(sender_address, [recipient], msg.as_string())
        finally:
            server.quit()
    except (smtplib.SMTPException, OSError) as e:
        print(f"Mail Service: Email send error: {e}")
        return {"error": f"{MAIL_FAILED_PREFIX}: {e}"}

    return {"success": True, "message": MAIL_SENT_MESSAGE}

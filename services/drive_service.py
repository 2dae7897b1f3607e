# services/drive_service.py
import io
import os
from datetime import date
from typing import Dict, List, Optional

from google.auth import default as google_auth_default
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from utils import config_loader
from utils.image_utils import download_image_bytes, detect_image_format
from core.type_definitions import AnalysisBundle
from . import report_builder

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
DEFAULT_SCOPES = ["https://www.googleapis.com/auth/drive"]
SAVE_FAILED_MESSAGE = "Failed to save to Drive"


def _get_scopes() -> List[str]:
    scopes = config_loader.get_config_value("drive.scopes", DEFAULT_SCOPES)
    return list(scopes) if scopes else DEFAULT_SCOPES


def _build_creds():
    """
    サービスアカウントの認証情報を作る。
    GOOGLE_SERVICE_ACCOUNT_EMAIL + GOOGLE_PRIVATE_KEY → GOOGLE_APPLICATION_CREDENTIALS のファイル
    → Application Default Credentials の順に試す。
    """
    scopes = _get_scopes()
    client_email = os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL")
    private_key = os.environ.get("GOOGLE_PRIVATE_KEY")
    if client_email and private_key:
        # .env では改行が "\n" の2文字で書かれていることが多い
        info = {
            "type": "service_account",
            "client_email": client_email,
            "private_key": private_key.replace("\\n", "\n"),
            "token_uri": "https://oauth2.googleapis.com/token",
        }
        return service_account.Credentials.from_service_account_info(info, scopes=scopes)

    key_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if key_path and os.path.exists(key_path):
        return service_account.Credentials.from_service_account_file(key_path, scopes=scopes)
    creds, _ = google_auth_default(scopes=scopes)
    return creds


def get_drive_client():
    return build("drive", "v3", credentials=_build_creds(), cache_discovery=False)


def _escape_query_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def find_or_create_folder(drive, folder_name: str, parent_folder_id: str) -> str:
    """親フォルダ直下から生徒名のフォルダを探し、無ければ作成してIDを返す。"""
    query = (
        f"name = '{_escape_query_value(folder_name)}'"
        f" and '{_escape_query_value(parent_folder_id)}' in parents"
        f" and mimeType = '{FOLDER_MIME_TYPE}' and trashed = false"
    )
    search_response = drive.files().list(q=query, fields="files(id, name)").execute()
    files = search_response.get("files", [])
    if files:
        print(f"Drive Service: Found existing student folder: {files[0].get('name')}")
        return files[0]["id"]

    created = drive.files().create(
        body={"name": folder_name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_folder_id]},
        fields="id",
    ).execute()
    print(f"Drive Service: Created new student folder: {folder_name}")
    return created["id"]


def upload_file(drive, folder_id: str, file_name: str, content: bytes, mime_type: str) -> str:
    """フォルダにファイルをアップロードし、webViewLink を返す。"""
    media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type, resumable=False)
    response = drive.files().create(
        body={"name": file_name, "parents": [folder_id]},
        media_body=media,
        fields="id, webViewLink",
    ).execute()
    return response.get("webViewLink", "")


def _upload_vision_image(drive, folder_id: str, image_url: str, day: date):
    """ビジョン画像を保存する。失敗してもログのみで続行する。"""
    image_bytes = download_image_bytes(
        image_url, timeout=config_loader.get_config_value("drive.image_download_timeout", 10)
    )
    if image_bytes is None:
        return
    mime_type, extension = detect_image_format(image_bytes)
    try:
        upload_file(drive, folder_id, report_builder.image_filename(day, extension), image_bytes, mime_type)
    except HttpError as e:
        print(f"Drive Service: Image upload error: {e}")


def save_analysis_to_student_folder(
        student_name: str,
        analysis: AnalysisBundle,
        image_url: Optional[str] = None,
        drive=None
    ) -> Dict[str, object]:
    """
    生徒名のフォルダに分析結果の記録 (と画像) を保存する。

    Returns:
        Dict: 成功時は {"success": True, "message": ...}、失敗時は {"error": ..., "details": ...}
    """
    parent_folder_id = config_loader.get_drive_parent_folder_id()
    if not parent_folder_id:
        print("Drive Service: Error: DRIVE_PARENT_FOLDER_ID / drive.parent_folder_id is not configured.")
        return {"error": SAVE_FAILED_MESSAGE, "details": "保存先フォルダが設定されていません。"}

    day = date.today()
    try:
        drive = drive or get_drive_client()
        folder_id = find_or_create_folder(drive, student_name, parent_folder_id)
        transcript = report_builder.build_transcript(student_name, analysis, day)
        upload_file(
            drive, folder_id, report_builder.transcript_filename(day),
            transcript.encode("utf-8"), "text/plain",
        )
    except (HttpError, GoogleAuthError, ValueError, OSError) as e:
        print(f"Drive Service: Drive save error: {e}")
        return {"error": SAVE_FAILED_MESSAGE, "details": str(e)}

    if image_url:
        _upload_vision_image(drive, folder_id, image_url, day)

    return {"success": True, "message": f"結果を「{student_name}」フォルダに保存しました"}

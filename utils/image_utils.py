# utils/image_utils.py
from io import BytesIO
from typing import Optional, Tuple

import requests
from PIL import Image, UnidentifiedImageError

# Pillowでフォーマットが判別できない場合の拡張子
DEFAULT_IMAGE_MIME = "image/png"
EXTENSIONS_BY_MIME = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}

def download_image_bytes(image_url: str, timeout: float = 10) -> Optional[bytes]:
    """生成画像のURLから画像データを取得する。失敗時はNoneを返す (呼び出し元で続行判断)。"""
    if not image_url:
        return None
    try:
        response = requests.get(image_url, timeout=timeout)
        if response.status_code != 200:
            print(f"[image_utils] Warning: Image download returned status {response.status_code}.")
            return None
        return response.content
    except requests.RequestException as e:
        print(f"[image_utils] Warning: Image download failed: {e}")
        return None

def detect_image_format(image_bytes: bytes) -> Tuple[str, str]:
    """
    画像データからMIMEタイプと拡張子を推定する。

    Returns:
        Tuple[str, str]: (mime_type, extension)。判別できない場合は PNG とみなす。
    """
    try:
        with Image.open(BytesIO(image_bytes)) as pil_img:
            mime_type = Image.MIME.get(pil_img.format or "")
    except (UnidentifiedImageError, OSError) as e:
        print(f"[image_utils] Warning: Could not identify image format: {e}")
        mime_type = None

    if not mime_type or mime_type not in EXTENSIONS_BY_MIME:
        mime_type = DEFAULT_IMAGE_MIME
    return mime_type, EXTENSIONS_BY_MIME[mime_type]

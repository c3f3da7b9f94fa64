# services/upload_service.py
import logging
import random
import time
from pathlib import Path

from fastapi import UploadFile

from community.core.config import settings

logger = logging.getLogger(__name__)


def make_filename(original: str | None) -> str:
    """毫秒时间戳 + 随机数，保留原扩展名"""
    ext = Path(original or "").suffix
    return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"


def public_url(name: str) -> str:
    return f"{settings.PUBLIC_BASE_URL}{settings.UPLOAD_URL_PREFIX}/{name}"


async def save_uploads(files: list[UploadFile]) -> list[str]:
    """把上传的文件写到公开目录，返回可访问的 url 列表"""
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    urls = []
    for file in files:
        name = make_filename(file.filename)
        file_path = upload_dir / name
        with file_path.open("wb") as f:
            f.write(await file.read())
        logger.info(f"[upload] saved {file_path}")
        urls.append(public_url(name))
    return urls

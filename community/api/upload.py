from typing import List, Optional

from fastapi import APIRouter, File, HTTPException, UploadFile

from community.schemas.common import UploadResponse
from community.services import upload_service

router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload_images(images: Optional[List[UploadFile]] = File(None)):
    """
    图片上传（支持多图）
    返回静态地址，文件名用 时间戳-随机数 防止冲突
    """
    if not images:
        raise HTTPException(400, detail="未上传文件")
    try:
        urls = await upload_service.save_uploads(images)
    except OSError as e:
        raise HTTPException(500, detail=f"保存文件失败: {e}")
    return UploadResponse(urls=urls)

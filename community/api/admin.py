# 管理员接口
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community.db.database import get_db
from community.core.dependencies import require_admin
from community.schemas.admin import StatsResponse, DeleteResponse
from community.schemas.post import PostResponse
from community.schemas.user import AdminLogin, AdminLoginResponse, CurrentUser
from community.services import admin_service, auth_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=AdminLoginResponse)
def admin_login(req: AdminLogin, db: Session = Depends(get_db)):
    """管理员登录，token 有效期较短"""
    return AdminLoginResponse(token=auth_service.admin_login(db, req))


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    db: Session = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
):
    try:
        return admin_service.get_stats(db)
    except SQLAlchemyError as e:
        logger.error(f"统计失败: {e}")
        raise HTTPException(500, detail="统计失败")


@router.get("/list", response_model=list[PostResponse])
def list_posts(
    db: Session = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
):
    """全部帖子，按时间倒序（不置顶）"""
    try:
        return admin_service.list_all_posts(db)
    except SQLAlchemyError as e:
        logger.error(f"获取帖子列表失败: {e}")
        raise HTTPException(500, detail="获取帖子列表失败")


@router.delete("/post/{post_id}", response_model=DeleteResponse)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    _admin: CurrentUser = Depends(require_admin),
):
    try:
        deleted = admin_service.delete_post(db, post_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"删除帖子失败: {e}")
        raise HTTPException(500, detail="删除帖子失败")
    return DeleteResponse(deleted=deleted)

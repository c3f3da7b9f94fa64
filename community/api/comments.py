import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community.db.database import get_db
from community.core.dependencies import get_current_user
from community.schemas.comment import CommentResponse
from community.schemas.common import SuccessResponse
from community.schemas.user import CurrentUser
from community.services import comment_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/{post_id}", response_model=list[CommentResponse])
def get_comments(post_id: int, db: Session = Depends(get_db)):
    """获取评论列表，最新的在前"""
    try:
        return comment_service.list_comments(db, post_id)
    except SQLAlchemyError as e:
        logger.error(f"获取评论失败: {e}")
        raise HTTPException(500, detail="获取评论失败")


@router.delete("/{comment_id}", response_model=SuccessResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    删除评论

    说明：
        仅评论作者或管理员可以删除
    """
    try:
        comment_service.delete_comment(db, current_user, comment_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"删除评论失败: {e}")
        raise HTTPException(500, detail="删除评论失败")
    return SuccessResponse()

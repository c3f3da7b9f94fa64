# services/comment_service.py
import logging

from fastapi import HTTPException
from sqlalchemy import select, update, desc, case
from sqlalchemy.orm import Session

from community.models.comment import Comment
from community.models.post import Post
from community.models.user import ROLE_ADMIN
from community.schemas.comment import CommentResponse
from community.schemas.user import CurrentUser
from community.services.post_service import get_author_avatar

logger = logging.getLogger(__name__)


def list_comments(db: Session, post_id: int) -> list[CommentResponse]:
    """某帖子下的评论，最新的在前"""
    comments = db.scalars(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
    ).all()
    return [CommentResponse.model_validate(c) for c in comments]


def add_comment(db: Session, current_user: CurrentUser, post_id: int, content: str) -> Comment:
    if db.get(Post, post_id) is None:
        raise HTTPException(404, detail="帖子不存在")

    comment = Comment(
        post_id=post_id,
        user_id=current_user.id,
        user_name=current_user.name,
        user_avatar=get_author_avatar(db, current_user.id),
        content=content,
    )
    db.add(comment)
    db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(comments_count=Post.comments_count + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, current_user: CurrentUser, comment_id: int) -> None:
    """评论作者本人或管理员可删除"""
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise HTTPException(404, detail="评论不存在")

    if comment.user_id != current_user.id and current_user.role != ROLE_ADMIN:
        raise HTTPException(403, detail="无权删除此评论")

    post_id = comment.post_id
    db.delete(comment)
    db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(comments_count=case((Post.comments_count > 0, Post.comments_count - 1), else_=0))
        .execution_options(synchronize_session=False)
    )
    db.commit()
    logger.info(f"评论 {comment_id} 已被用户 {current_user.id} 删除")

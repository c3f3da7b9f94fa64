# services/post_service.py
import json
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select, update, desc, case, or_
from sqlalchemy.orm import Session

from community.core.config import settings
from community.models.comment import Comment
from community.models.post import Post
from community.models.user import User, ROLE_ADMIN
from community.schemas.comment import CommentResponse
from community.schemas.post import PostCreate, PostResponse, PostDetailResponse
from community.schemas.user import CurrentUser

logger = logging.getLogger(__name__)


def _pinned_first():
    """置顶板块排在最前"""
    return case((Post.department == settings.PINNED_DEPARTMENT, 0), else_=1)


def get_author_avatar(db: Session, user_id: int) -> str:
    user = db.get(User, user_id)
    return user.avatar if user and user.avatar else ""


# --------------------------------------------------
# 发布动态
# --------------------------------------------------
def create_post(db: Session, current_user: CurrentUser, post_data: PostCreate) -> Post:
    if post_data.department == settings.RESERVED_DEPARTMENT and current_user.role != ROLE_ADMIN:
        raise HTTPException(403, detail=f"只有管理员可以发布到「{settings.RESERVED_DEPARTMENT}」")

    # 先查头像再插入，两步之间不加事务
    avatar = get_author_avatar(db, current_user.id)

    post = Post(
        user_id=current_user.id,
        user_name=current_user.name,
        user_avatar=avatar,
        title=post_data.title,
        description=post_data.description,
        department=post_data.department,
        images=json.dumps(post_data.images, ensure_ascii=False),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info(f"用户 {current_user.id} 发布帖子 {post.id} [{post.department}]")
    return post


# --------------------------------------------------
# 动态列表（Feed）
# --------------------------------------------------
def get_feed(
    db: Session,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    user_id: Optional[int] = None,
) -> list[PostResponse]:
    stmt = select(Post)

    if tag and tag != settings.ALL_DEPARTMENTS_TAG:
        stmt = stmt.where(Post.department == tag)
    if user_id is not None:
        stmt = stmt.where(Post.user_id == user_id)
    if search:
        stmt = stmt.where(
            or_(
                Post.title.icontains(search, autoescape=True),
                Post.description.icontains(search, autoescape=True),
                Post.user_name.icontains(search, autoescape=True),
            )
        )

    order_by = [desc(Post.created_at), desc(Post.id)]
    if settings.PINNED_DEPARTMENT:
        order_by.insert(0, _pinned_first())

    posts = db.scalars(stmt.order_by(*order_by)).all()
    return [PostResponse.model_validate(p) for p in posts]


# --------------------------------------------------
# 帖子详情（每次读取浏览量 +1）
# --------------------------------------------------
def get_post_detail(db: Session, post_id: int) -> PostDetailResponse:
    result = db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(views=Post.views + 1)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        raise HTTPException(404, detail="帖子不存在")

    post = db.get(Post, post_id)
    if post is None:
        # UPDATE 之后被管理员删除
        raise HTTPException(404, detail="帖子不存在")
    comments = db.scalars(
        select(Comment)
        .where(Comment.post_id == post_id)
        .order_by(desc(Comment.created_at), desc(Comment.id))
    ).all()

    detail = PostDetailResponse.model_validate(post)
    detail.comments = [CommentResponse.model_validate(c) for c in comments]
    return detail


# --------------------------------------------------
# 点赞 / 取消点赞
# --------------------------------------------------
def toggle_like(db: Session, post_id: int, is_liked: bool) -> int:
    """
    单条 UPDATE 完成加减，不做按用户去重
    取消点赞时不会减到负数
    """
    new_likes = Post.likes + 1 if is_liked else case((Post.likes > 0, Post.likes - 1), else_=0)
    result = db.execute(
        update(Post)
        .where(Post.id == post_id)
        .values(likes=new_likes)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount == 0:
        raise HTTPException(404, detail="帖子不存在")

    likes = db.scalar(select(Post.likes).where(Post.id == post_id))
    if likes is None:
        raise HTTPException(404, detail="帖子不存在")
    return likes

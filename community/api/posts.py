import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community.db.database import get_db
from community.core.dependencies import get_current_user
from community.schemas.comment import CommentCreate, CommentCreated
from community.schemas.post import (
    PostCreate, PostResponse, PostDetailResponse, SubmitResponse, LikeToggle, LikeResponse,
)
from community.schemas.user import CurrentUser
from community.services import post_service, comment_service

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/submit", response_model=SubmitResponse)
def submit_post(
    post_data: PostCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    """
    发布动态

    Body:
        - title / description / department
        - images: 先调用 /upload 拿到的 url 列表
    """
    try:
        post = post_service.create_post(db, current_user, post_data)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"发布失败: {e}")
        raise HTTPException(500, detail="发布失败")
    return SubmitResponse(postId=post.id)


@router.get("/feed", response_model=list[PostResponse])
def get_feed(
    tag: Optional[str] = Query(None, description="板块，“全部”或不传表示不过滤"),
    search: Optional[str] = Query(None, description="标题/内容/作者 模糊搜索"),
    user_id: Optional[int] = Query(None, description="只看某个用户的帖子"),
    db: Session = Depends(get_db),
):
    """置顶板块在前，其余按时间倒序"""
    try:
        return post_service.get_feed(db, tag, search, user_id)
    except SQLAlchemyError as e:
        logger.error(f"获取动态列表失败: {e}")
        raise HTTPException(500, detail="获取动态列表失败")


@router.get("/post/{post_id}", response_model=PostDetailResponse)
def get_post(post_id: int, db: Session = Depends(get_db)):
    """帖子详情（含评论），浏览量 +1"""
    try:
        return post_service.get_post_detail(db, post_id)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"获取帖子详情失败: {e}")
        raise HTTPException(500, detail="获取帖子详情失败")


@router.post("/post/{post_id}/comment", response_model=CommentCreated)
def comment_post(
    post_id: int,
    payload: CommentCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    try:
        comment = comment_service.add_comment(db, current_user, post_id, payload.content)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"发表评论失败: {e}")
        raise HTTPException(500, detail="发表评论失败")
    return CommentCreated(commentId=comment.id)


@router.post("/post/{post_id}/like", response_model=LikeResponse)
def like_post(post_id: int, payload: LikeToggle, db: Session = Depends(get_db)):
    """isLiked=true 点赞 +1，false 取消 -1"""
    try:
        likes = post_service.toggle_like(db, post_id, payload.isLiked)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"点赞失败: {e}")
        raise HTTPException(500, detail="点赞失败")
    return LikeResponse(likes=likes)

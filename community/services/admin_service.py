# services/admin_service.py
import logging
from datetime import datetime

from sqlalchemy import select, delete, desc, func
from sqlalchemy.orm import Session

from community.models.post import Post
from community.schemas.admin import StatsResponse, DepartmentCount
from community.schemas.post import PostResponse

logger = logging.getLogger(__name__)


def get_stats(db: Session, now: datetime | None = None) -> StatsResponse:
    """帖子总数、今日新增（本地时间零点起）、各板块数量"""
    now = now or datetime.now()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)

    total = db.scalar(select(func.count(Post.id))) or 0
    today = db.scalar(select(func.count(Post.id)).where(Post.created_at >= start_of_day)) or 0
    rows = db.execute(
        select(Post.department, func.count(Post.id).label("count"))
        .group_by(Post.department)
        .order_by(desc("count"))
    ).all()

    return StatsResponse(
        total=total,
        today=today,
        categories=[DepartmentCount(department=dept, count=cnt) for dept, cnt in rows],
    )


def list_all_posts(db: Session) -> list[PostResponse]:
    posts = db.scalars(select(Post).order_by(desc(Post.created_at), desc(Post.id))).all()
    return [PostResponse.model_validate(p) for p in posts]


def delete_post(db: Session, post_id: int) -> int:
    """删除帖子，返回受影响行数；评论保留（弱引用，不级联）"""
    result = db.execute(
        delete(Post).where(Post.id == post_id).execution_options(synchronize_session=False)
    )
    db.commit()
    if result.rowcount:
        logger.info(f"管理员删除帖子 {post_id}")
    return result.rowcount

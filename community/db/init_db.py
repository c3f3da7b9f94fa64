# 把模型先引进来，Base 才知道要建哪些表
from community.db.database import Base, engine, SessionLocal
from community.models import user, post, comment
from community.models.user import User, ROLE_ADMIN
from community.core.config import settings
from community.core.security import hash_password
from sqlalchemy import select
from sqlalchemy.orm import Session
import time
import logging

logger = logging.getLogger(__name__)


def ensure_admin(db: Session) -> User:
    """没有任何管理员时创建默认管理员账号"""
    admin = db.scalar(select(User).where(User.role == ROLE_ADMIN))
    if admin:
        logger.info("管理员账号已存在")
        return admin

    admin = User(
        username=settings.ADMIN_USERNAME,
        password=hash_password(settings.ADMIN_PASSWORD),
        avatar=settings.ADMIN_AVATAR,
        role=ROLE_ADMIN,
    )
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info(f"✅ 已创建默认管理员账号: {settings.ADMIN_USERNAME}")
    return admin


def init(bind=engine):
    """
    初始化数据库表并写入默认管理员
    使用重试机制处理并发DDL冲突
    """
    max_retries = 5
    retry_delay = 2  # 秒

    for attempt in range(max_retries):
        try:
            # 如果表已存在则跳过
            Base.metadata.create_all(bind=bind, checkfirst=True)
            logger.info("✅ 数据库表已创建/更新完成")
            break
        except Exception as e:
            error_msg = str(e)
            # 检查是否是并发DDL错误（MySQL 1684）
            if "1684" in error_msg or "concurrent DDL" in error_msg:
                if attempt < max_retries - 1:
                    wait_time = retry_delay * (attempt + 1)
                    logger.warning(f"⚠️ 检测到并发DDL操作，{wait_time}秒后重试... (尝试 {attempt + 1}/{max_retries})")
                    time.sleep(wait_time)
                else:
                    logger.error(f"❌ 数据库初始化失败，已达到最大重试次数: {error_msg}")
                    raise
            else:
                logger.error(f"❌ 数据库初始化失败: {error_msg}")
                raise

    db = SessionLocal(bind=bind)
    try:
        ensure_admin(db)
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init()

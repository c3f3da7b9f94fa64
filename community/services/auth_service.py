# services/auth_service.py
import logging
from datetime import timedelta

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from community.core.config import settings
from community.core.security import create_access_token, hash_password, verify_password
from community.models.user import User, ROLE_ADMIN, ROLE_VILLAGER
from community.schemas.user import UserLogin, AdminLogin

logger = logging.getLogger(__name__)


def _issue_token(user: User, minutes: int) -> str:
    return create_access_token(
        {"id": user.id, "role": user.role, "name": user.username},
        expires_delta=timedelta(minutes=minutes),
    )


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.scalar(select(User).where(User.username == username))


# ---- 注册（登录时自动调用）----
def register_user(db: Session, username: str, password: str | None = None) -> User:
    if username == settings.ADMIN_USERNAME:
        raise HTTPException(403, detail="该用户名为保留用户名")

    user = User(
        username=username,
        password=hash_password(password) if password else None,
        avatar=settings.AVATAR_URL_TEMPLATE.format(seed=username),
        role=ROLE_VILLAGER,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # 并发登录同一个新用户名，另一个请求已经插入
        db.rollback()
        existing = get_user_by_username(db, username)
        if existing is None:
            raise
        return existing
    db.refresh(user)
    logger.info(f"新用户自动注册: {username} (id={user.id})")
    return user


# ---- 登录 ----
def login(db: Session, req: UserLogin) -> tuple[User, str]:
    """
    用户名存在：设置过密码则校验，不匹配返回 401
    用户名不存在：自动注册为村民
    """
    user = get_user_by_username(db, req.username)
    if user is None:
        # 并发注册时拿到的可能是别的请求刚插入的账号，下面照样校验密码
        user = register_user(db, req.username, req.password)
    if user.password and not verify_password(req.password, user.password):
        logger.warning(f"登录失败，密码错误: {req.username}")
        raise HTTPException(401, detail="用户名或密码错误")

    return user, _issue_token(user, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


# ---- 管理员登录 ----
def admin_login(db: Session, req: AdminLogin) -> str:
    user = get_user_by_username(db, req.username)
    if (
        user is None
        or user.role != ROLE_ADMIN
        or not user.password
        or not verify_password(req.password, user.password)
    ):
        logger.warning(f"管理员认证失败: {req.username}")
        raise HTTPException(401, detail="认证失败")

    return _issue_token(user, settings.ADMIN_TOKEN_EXPIRE_MINUTES)

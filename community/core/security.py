from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from werkzeug.security import generate_password_hash, check_password_hash

from community.core.config import settings


# -------- 密码 --------
def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: Optional[str], hashed: str) -> bool:
    if not password:
        return False
    return check_password_hash(hashed, password)


# -------- 签发 --------
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


# -------- 验签 --------
def verify_token(token: str) -> dict:
    """
    成功返回 payload（含 id / role / name）
    失败抛 JWTError，由调用者捕获统一处理
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise JWTError("Token 无效或已过期")

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from community.core.security import verify_token
from community.models.user import ROLE_ADMIN
from community.schemas.user import CurrentUser

# 从请求头 Authorization: Bearer <token> 里提取 token
# auto_error=False：缺 token 时由我们自己返回 401，验签失败返回 403
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)


def get_current_user(token: str | None = Depends(oauth2_scheme)) -> CurrentUser:
    """
    缺 token → 401
    验签失败 / 过期 / 载荷不全 → 403
    成功 → token 中的身份（id / role / name）
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="未登录",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = verify_token(token)
        return CurrentUser(id=payload["id"], role=payload["role"], name=payload["name"])
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token 无效或已过期",
        )


def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if current_user.role != ROLE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="需要管理员权限")
    return current_user

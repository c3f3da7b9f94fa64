#登录部分专用的
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from community.db.database import get_db
from community.core.dependencies import get_current_user
from community.models.user import User
from community.schemas.user import UserLogin, UserResponse, LoginResponse, CurrentUser
from community.services import auth_service

router = APIRouter()
logger = logging.getLogger(__name__)


# 1. 登录（不存在则自动注册）
@router.post("/login", response_model=LoginResponse)
def login(req: UserLogin, db: Session = Depends(get_db)):
    try:
        user, token = auth_service.login(db, req)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"登录失败: {e}")
        raise HTTPException(500, detail="登录失败，请稍后重试")
    return LoginResponse(token=token, user=UserResponse.model_validate(user))


# 2. 当前用户
@router.get("/me", response_model=UserResponse)
def read_me(
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(get_current_user),
):
    user = db.get(User, current_user.id)
    if not user:
        raise HTTPException(404, detail="用户不存在")
    return user

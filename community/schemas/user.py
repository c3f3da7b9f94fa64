from datetime import datetime

from pydantic import BaseModel, Field


#登录（未注册的用户名自动注册）
class UserLogin(BaseModel):
    username: str = Field(min_length=1, max_length=32)
    password: str | None = Field(None, max_length=128)


#管理员登录
class AdminLogin(BaseModel):
    username: str = Field(min_length=1, max_length=32)
    password: str = Field(min_length=1, max_length=128)


#返回给前端展示用（不含密码）
class UserResponse(BaseModel):
    id: int
    username: str
    avatar: str | None = None
    role: str
    created_at: datetime

    class Config:
        from_attributes = True


#从 token 中解析出的当前身份
class CurrentUser(BaseModel):
    id: int
    role: str
    name: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserResponse


class AdminLoginResponse(BaseModel):
    success: bool = True
    token: str

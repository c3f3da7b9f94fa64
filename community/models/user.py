from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from community.db.database import Base

ROLE_VILLAGER = "villager"
ROLE_ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id         = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username   = Column(String(32), unique=True, nullable=False)
    password   = Column(String(256), nullable=True)     # werkzeug 哈希；自动注册且未设密码时为空
    avatar     = Column(String(512), nullable=True)     # 头像 url
    role       = Column(String(16), nullable=False, default=ROLE_VILLAGER)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime
from community.db.database import Base


#帖子/动态表
class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # 作者（弱引用，不做级联）
    user_id = Column(Integer, nullable=True, index=True)
    # 发帖时的作者快照，之后用户改名/换头像不影响
    user_name   = Column(String(32), nullable=True)
    user_avatar = Column(String(512), nullable=True)

    title       = Column(String(128), nullable=False)
    description = Column(Text, nullable=True)
    #板块
    department  = Column(String(32), nullable=True, index=True)
    # 图片 url 列表，JSON 字符串
    images      = Column(Text, nullable=False, default="[]")

    views          = Column(Integer, nullable=False, default=0)
    likes          = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, default=datetime.now, index=True)

from datetime import datetime

from sqlalchemy import Column, Integer, String, Text, DateTime
from community.db.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id      = Column(Integer, primary_key=True, index=True, autoincrement=True)
    post_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)

    user_name   = Column(String(32), nullable=True)
    user_avatar = Column(String(512), nullable=True)

    content    = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

import json
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field, field_validator

from community.schemas.comment import CommentResponse


class PostCreate(BaseModel):
    title: str = Field(min_length=1, max_length=128)
    description: str = ""
    department: str = Field(min_length=1, max_length=32)
    images: List[str] = []


class PostResponse(BaseModel):
    id: int
    user_id: int | None = None
    user_name: str | None = None
    user_avatar: str | None = None
    title: str
    description: str | None = None
    department: str | None = None
    images: List[str] = []
    views: int
    likes: int
    comments_count: int
    created_at: datetime

    @field_validator("images", mode="before")
    @classmethod
    def parse_images(cls, v):
        """库里存的是 JSON 字符串，解析成列表；坏数据当作空列表"""
        if v is None:
            return []
        if isinstance(v, str):
            try:
                parsed = json.loads(v or "[]")
            except ValueError:
                return []
            return parsed if isinstance(parsed, list) else []
        return v

    class Config:
        from_attributes = True


#详情：帖子 + 全部评论
class PostDetailResponse(PostResponse):
    comments: List[CommentResponse] = []


class SubmitResponse(BaseModel):
    success: bool = True
    postId: int


class LikeToggle(BaseModel):
    isLiked: bool


class LikeResponse(BaseModel):
    success: bool = True
    likes: int

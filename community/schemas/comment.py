from datetime import datetime

from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    user_name: str | None = None
    user_avatar: str | None = None
    content: str
    created_at: datetime

    class Config:
        from_attributes = True


class CommentCreated(BaseModel):
    success: bool = True
    commentId: int

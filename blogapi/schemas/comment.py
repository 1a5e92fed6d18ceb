from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class CreateComment(BaseModel):
    post_id: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class UpdateComment(BaseModel):
    text: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class CommentOut(BaseModel):
    id: str
    post_id: str
    user_id: str
    username: Optional[str] = None
    text: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

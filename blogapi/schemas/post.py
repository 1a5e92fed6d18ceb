from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional

from blogapi.schemas.comment import CommentOut
from blogapi.schemas.image import ImageOut


class CreatePost(BaseModel):
    title: str = Field(..., min_length=2, max_length=200)
    description: str = Field(..., min_length=10)
    category: str = Field(..., min_length=1)

    class Config:
        str_strip_whitespace = True


class UpdatePost(BaseModel):
    title: Optional[str] = Field(None, min_length=2, max_length=200)
    description: Optional[str] = Field(None, min_length=10)
    category: Optional[str] = Field(None, min_length=1)

    class Config:
        str_strip_whitespace = True


class PostAuthor(BaseModel):
    id: str
    username: str
    profile_photo: ImageOut

    class Config:
        from_attributes = True


class PostOut(BaseModel):
    id: str
    title: str
    description: str
    category: str
    image: ImageOut
    user: PostAuthor
    likes: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class PostDetailOut(PostOut):
    comments: List[CommentOut] = []

    class Config:
        from_attributes = True

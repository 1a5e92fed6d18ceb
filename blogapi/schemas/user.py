from pydantic import AfterValidator, BaseModel, EmailStr, Field
from datetime import datetime
from typing import Annotated, List, Optional

from blogapi.schemas.image import ImageOut
from blogapi.schemas.post import PostOut


def _check_email_length(value: str) -> str:
    if not 5 <= len(value) <= 100:
        raise ValueError("length must be between 5 and 100 characters")
    return value


Email = Annotated[EmailStr, AfterValidator(_check_email_length)]


class RegisterUser(BaseModel):
    username: str = Field(..., min_length=2, max_length=100)
    email: Email
    password: str = Field(..., min_length=8)

    class Config:
        str_strip_whitespace = True


class LoginUser(BaseModel):
    email: Email
    password: str = Field(..., min_length=8)

    class Config:
        str_strip_whitespace = True


class UpdateUser(BaseModel):
    username: Optional[str] = Field(None, min_length=2, max_length=100)
    password: Optional[str] = Field(None, min_length=8)
    bio: Optional[str] = None

    class Config:
        str_strip_whitespace = True


class UserOut(BaseModel):
    id: str
    username: str
    email: str
    is_admin: bool
    bio: Optional[str] = None
    profile_photo: ImageOut
    created_at: datetime

    class Config:
        from_attributes = True


class UserDetailOut(UserOut):
    posts: List[PostOut] = []

    class Config:
        from_attributes = True


class ProfilePhotoOut(BaseModel):
    message: str
    profile_photo: ImageOut

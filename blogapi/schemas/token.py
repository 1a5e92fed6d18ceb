from pydantic import BaseModel
from typing import Optional

from blogapi.schemas.image import ImageOut


class LoginResponse(BaseModel):
    id: str
    username: str
    is_admin: bool
    profile_photo: ImageOut
    token: str
    token_type: str = "bearer"


class TokenData(BaseModel):
    user_id: Optional[str] = None
    is_admin: bool = False

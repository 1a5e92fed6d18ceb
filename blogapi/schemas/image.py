from pydantic import BaseModel
from typing import Optional


class ImageOut(BaseModel):
    url: str
    public_id: Optional[str] = None

    class Config:
        from_attributes = True

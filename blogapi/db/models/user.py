import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, Boolean, DateTime
from sqlalchemy.orm import relationship

from blogapi.db.base import Base
from blogapi.db.models.image import ImageRef

DEFAULT_PROFILE_PHOTO_URL = "https://cdn.pixabay.com/photo/2015/10/05/22/37/blank-profile-picture-973460_960_720.png"


def _new_id():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    bio = Column(Text, nullable=True)
    profile_photo_url = Column(String, nullable=False, default=DEFAULT_PROFILE_PHOTO_URL)
    profile_photo_public_id = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    posts = relationship("Post", back_populates="user", order_by="Post.created_at.desc()")
    comments = relationship("Comment", back_populates="user")

    @property
    def profile_photo(self) -> ImageRef:
        return ImageRef(
            url=self.profile_photo_url or DEFAULT_PROFILE_PHOTO_URL,
            public_id=self.profile_photo_public_id,
        )

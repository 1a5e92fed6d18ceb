from sqlalchemy import Column, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship

from blogapi.db.base import Base
from blogapi.db.models.image import ImageRef
from blogapi.db.models.user import _new_id, _utcnow


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    image_url = Column(String, nullable=False)
    image_public_id = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    user = relationship("User", back_populates="posts")
    like_entries = relationship("Like", back_populates="post")
    comments = relationship("Comment", back_populates="post", order_by="Comment.created_at.desc()")

    @property
    def image(self) -> ImageRef:
        return ImageRef(url=self.image_url, public_id=self.image_public_id)

    @property
    def likes(self):
        return [like.user_id for like in self.like_entries]

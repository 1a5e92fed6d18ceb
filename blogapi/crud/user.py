from typing import List

from sqlalchemy.orm import Session, selectinload

from blogapi.core.security import hash_password
from blogapi.crud.common import get_or_404
from blogapi.db.models.comment import Comment
from blogapi.db.models.image import ImageRef
from blogapi.db.models.like import Like
from blogapi.db.models.post import Post
from blogapi.db.models.user import User


def get_user(db: Session, user_id: str) -> User:
    return get_or_404(db, User, user_id, "user")


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_users(db: Session):
    return (
        db.query(User)
        .options(selectinload(User.posts))
        .order_by(User.created_at.desc())
        .all()
    )


def count_users(db: Session) -> int:
    return db.query(User).count()


def create_user(db: Session, username: str, email: str, password: str) -> User:
    user = User(username=username, email=email, password=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, changes: dict) -> User:
    if changes.get("password"):
        changes["password"] = hash_password(changes["password"])
    for key, value in changes.items():
        if value is None and key != "bio":
            continue
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def set_profile_photo(db: Session, user: User, photo: ImageRef) -> User:
    user.profile_photo_url = photo.url
    user.profile_photo_public_id = photo.public_id
    db.commit()
    db.refresh(user)
    return user


def get_post_image_ids(db: Session, user_id: str) -> List[str]:
    rows = db.query(Post.image_public_id).filter(Post.user_id == user_id).all()
    return [public_id for (public_id,) in rows if public_id]


def delete_user_records(db: Session, user_id: str) -> None:
    """Delete a user, their posts (with every comment and like on them), their own comments and likes."""
    post_ids = [post_id for (post_id,) in db.query(Post.id).filter(Post.user_id == user_id).all()]
    db.query(Comment).filter(Comment.post_id.in_(post_ids)).delete(synchronize_session=False)
    db.query(Like).filter(Like.post_id.in_(post_ids)).delete(synchronize_session=False)
    db.query(Post).filter(Post.user_id == user_id).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.user_id == user_id).delete(synchronize_session=False)
    db.query(Like).filter(Like.user_id == user_id).delete(synchronize_session=False)
    db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
    db.commit()

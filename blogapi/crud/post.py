import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload, selectinload

from blogapi.crud.common import get_or_404
from blogapi.db.models.comment import Comment
from blogapi.db.models.image import ImageRef
from blogapi.db.models.like import Like
from blogapi.db.models.post import Post

logger = logging.getLogger(__name__)


def get_post(db: Session, post_id: str) -> Post:
    return get_or_404(db, Post, post_id, "post")


def get_posts(db: Session, page_number: Optional[int] = None, category: Optional[str] = None, per_page: int = 3):
    query = db.query(Post).options(joinedload(Post.user), selectinload(Post.like_entries))
    if category:
        query = query.filter(Post.category == category)
    query = query.order_by(Post.created_at.desc())
    if page_number:
        query = query.offset((page_number - 1) * per_page).limit(per_page)
    return query.all()


def count_posts(db: Session) -> int:
    return db.query(Post).count()


def create_post(db: Session, user_id: str, title: str, description: str, category: str, image: ImageRef) -> Post:
    post = Post(
        user_id=user_id,
        title=title,
        description=description,
        category=category,
        image_url=image.url,
        image_public_id=image.public_id,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def update_post(db: Session, post: Post, changes: dict) -> Post:
    for key, value in changes.items():
        setattr(post, key, value)
    db.commit()
    db.refresh(post)
    return post


def set_post_image(db: Session, post: Post, image: ImageRef) -> Post:
    post.image_url = image.url
    post.image_public_id = image.public_id
    db.commit()
    db.refresh(post)
    return post


def toggle_like(db: Session, post_id: str, user_id: str) -> bool:
    """Flip ``user_id``'s membership in the post's like set.

    The removal is a single conditional delete and the insert is guarded by
    the unique (user, post) constraint, so the set never holds a user twice.
    Returns True when the post ends up liked by the user.
    """
    removed = (
        db.query(Like)
        .filter(Like.post_id == post_id, Like.user_id == user_id)
        .delete(synchronize_session=False)
    )
    if removed:
        db.commit()
        return False

    db.add(Like(post_id=post_id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent toggle inserted the same like first
        db.rollback()
        logger.info(f"Like by {user_id} on {post_id} already present")
    return True


def delete_post_records(db: Session, post_id: str) -> None:
    """Delete a post with its comments and likes in one transaction."""
    db.query(Comment).filter(Comment.post_id == post_id).delete(synchronize_session=False)
    db.query(Like).filter(Like.post_id == post_id).delete(synchronize_session=False)
    db.query(Post).filter(Post.id == post_id).delete(synchronize_session=False)
    db.commit()

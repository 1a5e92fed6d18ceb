from sqlalchemy.orm import Session, joinedload

from blogapi.crud.common import get_or_404
from blogapi.db.models.comment import Comment


def get_comment(db: Session, comment_id: str) -> Comment:
    return get_or_404(db, Comment, comment_id, "comment")


def get_comments(db: Session):
    return (
        db.query(Comment)
        .options(joinedload(Comment.user))
        .order_by(Comment.created_at.desc())
        .all()
    )


def create_comment(db: Session, post_id: str, user_id: str, text: str) -> Comment:
    comment = Comment(post_id=post_id, user_id=user_id, text=text)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


def update_comment(db: Session, comment: Comment, text: str) -> Comment:
    comment.text = text
    db.commit()
    db.refresh(comment)
    return comment


def delete_comment(db: Session, comment_id: str) -> None:
    db.query(Comment).filter(Comment.id == comment_id).delete(synchronize_session=False)
    db.commit()

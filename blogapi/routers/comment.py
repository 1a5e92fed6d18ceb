from fastapi import APIRouter, Depends, status
from typing import List
from sqlalchemy.orm import Session

from blogapi.core.policy import Action, authorize
from blogapi.core.security import get_current_user
from blogapi.crud import comment as crud
from blogapi.crud import post as post_crud
from blogapi.db.models.user import User
from blogapi.db.session import get_db
from blogapi.schemas.comment import CommentOut, CreateComment, UpdateComment
from blogapi.schemas.message import CommentDeleted

router = APIRouter()


@router.post("", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(
    comment_in: CreateComment,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # a comment may only point at a post that exists
    post = post_crud.get_post(db, comment_in.post_id)
    return crud.create_comment(db, post_id=post.id, user_id=current_user.id, text=comment_in.text)


@router.get("", response_model=List[CommentOut])
def get_all_comments(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    authorize(Action.READ_ALL_COMMENTS, current_user)
    return crud.get_comments(db)


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: str,
    comment_in: UpdateComment,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = crud.get_comment(db, comment_id)
    authorize(Action.UPDATE_COMMENT, current_user, comment.user_id)
    return crud.update_comment(db, comment, comment_in.text)


@router.delete("/{comment_id}", response_model=CommentDeleted)
def delete_comment(
    comment_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    comment = crud.get_comment(db, comment_id)
    authorize(Action.DELETE_COMMENT, current_user, comment.user_id)
    deleted_id = comment.id
    crud.delete_comment(db, deleted_id)
    return {"message": "comment has been deleted", "comment_id": deleted_id}

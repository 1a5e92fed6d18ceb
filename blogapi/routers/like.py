from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from blogapi.core.security import get_current_user
from blogapi.crud import post as crud
from blogapi.db.models.user import User
from blogapi.db.session import get_db
from blogapi.schemas.post import PostOut

router = APIRouter()


@router.put("/like/{post_id}", response_model=PostOut)
def toggle_like(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    post = crud.get_post(db, post_id)
    crud.toggle_like(db, post.id, current_user.id)
    db.refresh(post)
    return post

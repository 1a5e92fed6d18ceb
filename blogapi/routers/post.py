from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from typing import List, Optional
from sqlalchemy.orm import Session

from blogapi.core.config import Settings
from blogapi.core.dependencies import get_asset_gateway, get_settings
from blogapi.core.errors import ValidationError
from blogapi.core.policy import Action, authorize
from blogapi.core.security import get_current_user
from blogapi.core.validation import validate_payload
from blogapi.crud import post as crud
from blogapi.db.models.user import User
from blogapi.db.session import get_db
from blogapi.schemas.message import PostDeleted
from blogapi.schemas.post import CreatePost, PostDetailOut, PostOut, UpdatePost
from blogapi.services import deletion, images
from blogapi.services.uploads import staged_upload

router = APIRouter()


@router.post("", response_model=PostOut, status_code=status.HTTP_201_CREATED)
def create_post(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    gateway=Depends(get_asset_gateway),
):
    if image is None or not image.filename:
        raise ValidationError("no image provided")
    fields = validate_payload(
        CreatePost,
        {"title": title, "description": description, "category": category},
    )

    with staged_upload(image, settings) as path:
        return images.create_post(db, gateway, path, current_user, fields.model_dump())


@router.get("", response_model=List[PostOut])
def get_posts(
    page_number: Optional[int] = Query(None, ge=1),
    category: Optional[str] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    authorize(Action.LIST_RESOURCES, None)
    return crud.get_posts(db, page_number=page_number, category=category, per_page=settings.posts_per_page)


@router.get("/count", response_model=int)
def get_posts_count(db: Session = Depends(get_db)):
    return crud.count_posts(db)


@router.get("/{post_id}", response_model=PostDetailOut)
def get_post_by_id(post_id: str, db: Session = Depends(get_db)):
    authorize(Action.READ_RESOURCE, None)
    return crud.get_post(db, post_id)


@router.put("/update-image/{post_id}", response_model=PostOut)
def update_post_image(
    post_id: str,
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    gateway=Depends(get_asset_gateway),
):
    post = crud.get_post(db, post_id)
    with staged_upload(image, settings) as path:
        return images.replace_post_image(db, gateway, post, current_user, path)


@router.put("/{post_id}", response_model=PostOut)
def update_post(
    post_id: str,
    post_in: UpdatePost,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    post = crud.get_post(db, post_id)
    authorize(Action.UPDATE_POST, current_user, post.user_id)
    return crud.update_post(db, post, post_in.model_dump(exclude_unset=True, exclude_none=True))


@router.delete("/{post_id}", response_model=PostDeleted)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway=Depends(get_asset_gateway),
):
    post = crud.get_post(db, post_id)
    deleted_id = deletion.delete_post(db, gateway, post, current_user)
    return {"message": "post has been deleted successfully", "post_id": deleted_id}

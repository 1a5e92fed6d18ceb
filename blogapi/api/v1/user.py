from fastapi import APIRouter, Depends, File, UploadFile
from typing import List, Optional
from sqlalchemy.orm import Session

from blogapi.core.config import Settings
from blogapi.core.dependencies import get_asset_gateway, get_settings
from blogapi.core.policy import Action, authorize
from blogapi.core.security import get_current_user
from blogapi.crud import user as crud
from blogapi.db.models.user import User
from blogapi.db.session import get_db
from blogapi.schemas.message import MessageOut
from blogapi.schemas.user import ProfilePhotoOut, UpdateUser, UserDetailOut, UserOut
from blogapi.services import deletion, images
from blogapi.services.uploads import staged_upload

router = APIRouter()


@router.get("", response_model=List[UserDetailOut])
def get_all_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    authorize(Action.READ_ALL_USERS, current_user)
    return crud.get_users(db)


@router.get("/count", response_model=int)
def get_users_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    authorize(Action.READ_USER_COUNT, current_user)
    return crud.count_users(db)


@router.post("/profile-photo-upload", response_model=ProfilePhotoOut)
def upload_profile_photo(
    image: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    gateway=Depends(get_asset_gateway),
):
    with staged_upload(image, settings) as path:
        user = images.replace_profile_photo(db, gateway, current_user, path)

    return {
        "message": "your profile photo uploaded successfully",
        "profile_photo": user.profile_photo,
    }


@router.get("/{user_id}", response_model=UserDetailOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return crud.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    user_in: UpdateUser,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    changes = user_in.model_dump(exclude_unset=True)
    user = crud.get_user(db, user_id)
    authorize(Action.UPDATE_USER, current_user, user.id)

    return crud.update_user(db, user, changes)


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway=Depends(get_asset_gateway),
):
    user = crud.get_user(db, user_id)
    caller_id = current_user.id
    deleted_id = deletion.delete_user(db, gateway, user, current_user)
    if deleted_id == caller_id:
        return {"message": "your profile has been deleted"}
    return {"message": "user has been deleted"}

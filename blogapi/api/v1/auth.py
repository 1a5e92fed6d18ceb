import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from blogapi.core.config import Settings
from blogapi.core.dependencies import get_settings
from blogapi.core.errors import ConflictError, ValidationError
from blogapi.core.security import create_access_token, verify_password
from blogapi.crud import user as crud
from blogapi.db.session import get_db
from blogapi.schemas.message import MessageOut
from blogapi.schemas.token import LoginResponse
from blogapi.schemas.user import LoginUser, RegisterUser

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def register(user_in: RegisterUser, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, user_in.email):
        raise ConflictError("user already exist")

    user = crud.create_user(db, username=user_in.username, email=user_in.email, password=user_in.password)
    logger.info(f"Registered user {user.id}")
    return {"message": "you registered successfully, please log in"}


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginUser,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = crud.get_user_by_email(db, credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        raise ValidationError("invalid email or password")

    return {
        "id": user.id,
        "username": user.username,
        "is_admin": user.is_admin,
        "profile_photo": user.profile_photo,
        "token": create_access_token(user, settings),
    }

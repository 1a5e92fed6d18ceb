from passlib.context import CryptContext
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from blogapi.core.config import Settings
from blogapi.core.dependencies import get_settings
from blogapi.core.errors import UnauthenticatedError
from blogapi.db.session import get_db
from blogapi.db.models.user import User
from blogapi.schemas.token import TokenData

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user: User, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.access_token_expire_days))
    to_encode = {"sub": user.id, "is_admin": bool(user.is_admin), "exp": expire}
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: Settings) -> TokenData:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise UnauthenticatedError("invalid token, access denied")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise UnauthenticatedError("invalid token, access denied")
    return TokenData(user_id=user_id, is_admin=bool(payload.get("is_admin", False)))


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Resolve the bearer token to the calling ``User`` or reject the request with 401."""
    if not token:
        raise UnauthenticatedError("no token provided, access denied")

    token_data = verify_token(token, settings)
    user = db.query(User).filter(User.id == token_data.user_id).first()
    if user is None:
        raise UnauthenticatedError("invalid token, access denied")
    return user

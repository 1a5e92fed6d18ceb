import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blogapi.core.errors import AssetGatewayError, AssetUploadError
from blogapi.core.policy import Action, authorize
from blogapi.crud import post as post_crud
from blogapi.crud import user as user_crud
from blogapi.db.models.image import ImageRef
from blogapi.db.models.post import Post
from blogapi.db.models.user import User
from blogapi.services.deletion import remove_asset_quietly

logger = logging.getLogger(__name__)

POST_FOLDER = "post_images"
PROFILE_FOLDER = "profile_pics"


def upload_image(gateway, path: str, folder: str) -> ImageRef:
    try:
        return gateway.upload(path, folder)
    except AssetGatewayError as e:
        logger.error(f"Image upload failed: {e}")
        raise AssetUploadError() from e


def _commit_or_discard(db: Session, gateway, image: ImageRef, write):
    """Run ``write``; if the store rejects it, drop the freshly uploaded image."""
    try:
        return write()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error, discarding uploaded image {image.public_id}: {e}")
        remove_asset_quietly(gateway, image.public_id)
        raise


def create_post(db: Session, gateway, path: str, owner: User, fields: dict) -> Post:
    image = upload_image(gateway, path, POST_FOLDER)
    return _commit_or_discard(
        db, gateway, image,
        lambda: post_crud.create_post(db, user_id=owner.id, image=image, **fields),
    )


def replace_post_image(db: Session, gateway, post: Post, caller: User, path: str) -> Post:
    authorize(Action.REPLACE_POST_IMAGE, caller, post.user_id)

    old_public_id = post.image_public_id
    image = upload_image(gateway, path, POST_FOLDER)
    post = _commit_or_discard(db, gateway, image, lambda: post_crud.set_post_image(db, post, image))

    remove_asset_quietly(gateway, old_public_id)
    return post


def replace_profile_photo(db: Session, gateway, user: User, path: str) -> User:
    old_public_id = user.profile_photo_public_id
    photo = upload_image(gateway, path, PROFILE_FOLDER)
    user = _commit_or_discard(db, gateway, photo, lambda: user_crud.set_profile_photo(db, user, photo))

    if old_public_id:
        remove_asset_quietly(gateway, old_public_id)
    return user

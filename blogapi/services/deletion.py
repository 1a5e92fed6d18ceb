"""
Cascading deletes across the data store and the external image store.

There is no transaction spanning both stores. Record deletes always go
through once authorized; image removals that fail are logged and left as
orphaned assets rather than failing a delete the caller can already observe.
"""
import logging

from sqlalchemy.orm import Session

from blogapi.core.errors import AssetGatewayError
from blogapi.core.policy import Action, authorize
from blogapi.crud import post as post_crud
from blogapi.crud import user as user_crud
from blogapi.db.models.post import Post
from blogapi.db.models.user import User

logger = logging.getLogger(__name__)


def remove_asset_quietly(gateway, public_id) -> bool:
    if not public_id:
        return False
    try:
        gateway.remove(public_id)
        return True
    except AssetGatewayError as e:
        logger.error(f"Failed to remove image {public_id}, leaving it orphaned: {e}")
        return False


def remove_assets_quietly(gateway, public_ids) -> bool:
    public_ids = [public_id for public_id in public_ids if public_id]
    if not public_ids:
        return False
    try:
        gateway.remove_many(public_ids)
        return True
    except AssetGatewayError as e:
        logger.error(f"Failed to remove images {public_ids}, leaving them orphaned: {e}")
        return False


def delete_post(db: Session, gateway, post: Post, caller: User) -> str:
    authorize(Action.DELETE_POST, caller, post.user_id)

    post_id, public_id, caller_id = post.id, post.image_public_id, caller.id
    post_crud.delete_post_records(db, post_id)
    logger.info(f"Post {post_id} deleted by {caller_id}")

    remove_asset_quietly(gateway, public_id)
    return post_id


def delete_user(db: Session, gateway, user: User, caller: User) -> str:
    authorize(Action.DELETE_USER, caller, user.id)

    user_id, caller_id = user.id, caller.id
    # images go first so no surviving record points at a removed asset
    remove_assets_quietly(gateway, user_crud.get_post_image_ids(db, user_id))
    remove_asset_quietly(gateway, user.profile_photo_public_id)

    user_crud.delete_user_records(db, user_id)
    logger.info(f"User {user_id} deleted by {caller_id}")
    return user_id

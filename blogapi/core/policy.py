"""
Authorization policy for resource mutations.

Every handler that touches someone else's data asks ``decide`` (or its raising
twin ``authorize``) before changing anything. The rules are a closed table
keyed by ``Action``; identities are opaque strings compared for exact equality.
"""
import enum
from typing import Optional

from blogapi.core.errors import ForbiddenError


class Action(str, enum.Enum):
    DELETE_POST = "delete-post"
    UPDATE_POST = "update-post"
    REPLACE_POST_IMAGE = "replace-post-image"
    UPDATE_COMMENT = "update-comment"
    DELETE_COMMENT = "delete-comment"
    UPDATE_USER = "update-user"
    DELETE_USER = "delete-user"
    READ_ALL_USERS = "read-all-users"
    READ_USER_COUNT = "read-user-count"
    READ_ALL_COMMENTS = "read-all-comments"
    READ_RESOURCE = "read-resource"
    LIST_RESOURCES = "list-resources"


class Decision(str, enum.Enum):
    ALLOW = "allow"
    DENY = "deny"


OWNER_OR_ADMIN = frozenset({Action.DELETE_POST, Action.DELETE_USER})
OWNER_ONLY = frozenset({
    Action.UPDATE_POST,
    Action.REPLACE_POST_IMAGE,
    Action.UPDATE_COMMENT,
    Action.DELETE_COMMENT,
    Action.UPDATE_USER,
})
ADMIN_ONLY = frozenset({Action.READ_ALL_USERS, Action.READ_USER_COUNT, Action.READ_ALL_COMMENTS})
PUBLIC = frozenset({Action.READ_RESOURCE, Action.LIST_RESOURCES})


def is_same_identity(caller_id: Optional[str], owner_id: Optional[str]) -> bool:
    if caller_id is None or owner_id is None:
        return False
    if not isinstance(caller_id, str) or not isinstance(owner_id, str):
        return False
    return caller_id == owner_id


def decide(
    action: Action,
    caller_id: Optional[str],
    caller_is_admin: bool,
    owner_id: Optional[str] = None,
) -> Decision:
    """Pure ALLOW/DENY decision for ``caller_id`` acting on a resource owned by ``owner_id``.

    For user actions the owner is the target user itself.
    """
    if action in PUBLIC:
        return Decision.ALLOW
    if action in ADMIN_ONLY:
        return Decision.ALLOW if caller_is_admin is True else Decision.DENY
    if action in OWNER_OR_ADMIN:
        if caller_is_admin is True or is_same_identity(caller_id, owner_id):
            return Decision.ALLOW
        return Decision.DENY
    if action in OWNER_ONLY:
        return Decision.ALLOW if is_same_identity(caller_id, owner_id) else Decision.DENY
    return Decision.DENY


def authorize(action: Action, caller, owner_id: Optional[str] = None) -> None:
    """Raise ``ForbiddenError`` unless ``caller`` (a ``User``) may perform ``action``."""
    caller_id = caller.id if caller is not None else None
    caller_is_admin = bool(caller.is_admin) if caller is not None else False
    if decide(action, caller_id, caller_is_admin, owner_id) is Decision.DENY:
        raise ForbiddenError()

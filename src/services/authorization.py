"""Ownership-based access decisions for resources owned by a user.

Items may be changed by their owner or by anyone holding the matching
elevated permission. Orders are stricter: viewing one requires being the
owner and holding ADMIN at the same time.
"""

import logging
from typing import Any

from src.models.enums import Permission
from src.services.errors import Forbidden
from src.services.permissions import holds_any

logger = logging.getLogger(__name__)

# Elevated permission that lets a non-owner delete a resource, by table
DELETE_PERMISSIONS: dict[str, Permission] = {
    "items": Permission.ITEMDELETE,
}

UPDATE_PERMISSIONS: dict[str, Permission] = {
    "items": Permission.ITEMUPDATE,
}


def owns(actor: Any, resource: Any) -> bool:
    """Check whether ``actor`` created/owns ``resource``."""
    actor_id = getattr(actor, "id", None)
    return actor_id is not None and getattr(resource, "user_id", None) == actor_id


def _elevated(resource: Any, table: dict[str, Permission]) -> set[Permission]:
    required = {Permission.ADMIN}
    permission = table.get(getattr(resource, "__tablename__", ""))
    if permission is not None:
        required.add(permission)
    return required


def can_delete(actor: Any, resource: Any) -> bool:
    """Owner OR holder of ADMIN / the resource's delete permission."""
    return owns(actor, resource) or holds_any(actor, _elevated(resource, DELETE_PERMISSIONS))


def can_update(actor: Any, resource: Any) -> bool:
    """Owner OR holder of ADMIN / the resource's update permission."""
    return owns(actor, resource) or holds_any(actor, _elevated(resource, UPDATE_PERMISSIONS))


def can_view_order(order: Any, actor: Any) -> bool:
    """Owner AND holder of ADMIN."""
    return owns(actor, order) and holds_any(actor, {Permission.ADMIN})


def ensure_can_delete(actor: Any, resource: Any) -> None:
    if not can_delete(actor, resource):
        logger.info(f"User {getattr(actor, 'id', None)} denied delete")
        raise Forbidden("You don't have permission to delete that")


def ensure_can_update(actor: Any, resource: Any) -> None:
    if not can_update(actor, resource):
        logger.info(f"User {getattr(actor, 'id', None)} denied update")
        raise Forbidden("You don't have permission to update that")


def ensure_can_view_order(order: Any, actor: Any) -> None:
    if not can_view_order(order, actor):
        logger.info(f"User {getattr(actor, 'id', None)} denied order view")
        raise Forbidden("You can't see this order")

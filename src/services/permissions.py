"""Permission checks against a user's granted permission labels."""

import logging
from collections.abc import Iterable
from typing import Any

from src.models.enums import Permission
from src.services.errors import Forbidden

logger = logging.getLogger(__name__)


def user_permissions(user: Any) -> frozenset[Permission]:
    """Return the known permissions granted to ``user``.

    A missing user, a missing permission list and unknown labels all count as
    nothing granted.
    """
    granted = getattr(user, "permissions", None) if user is not None else None
    if not granted or isinstance(granted, str):
        return frozenset()
    try:
        labels = list(granted)
    except TypeError:
        return frozenset()
    return frozenset(p for p in (Permission.parse(label) for label in labels) if p is not None)


def _required_labels(required: Any) -> list:
    # A single label, Permission included, is one requirement, not its characters
    if required is None:
        return []
    if isinstance(required, str):
        return [required]
    try:
        return list(required)
    except TypeError:
        return []


def holds_any(user: Any, required: Iterable[Permission | str]) -> bool:
    """Check whether ``user`` holds at least one of ``required``."""
    wanted = {p for p in (Permission.parse(r) for r in _required_labels(required)) if p}
    return bool(user_permissions(user) & wanted)


def has_permission(user: Any, required: Iterable[Permission | str]) -> None:
    """Raise Forbidden unless ``user`` holds at least one of ``required``."""
    required = _required_labels(required)
    if holds_any(user, required):
        return
    logger.info(
        f"Permission denied for user {getattr(user, 'id', None)}: "
        f"needs one of {sorted(str(p) for p in required)}"
    )
    raise Forbidden(required=required)

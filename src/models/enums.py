"""Enums for model fields."""

from enum import StrEnum


class Permission(StrEnum):
    """Permission labels that can be granted to a user."""

    ADMIN = "ADMIN"
    USER = "USER"
    ITEMCREATE = "ITEMCREATE"
    ITEMUPDATE = "ITEMUPDATE"
    ITEMDELETE = "ITEMDELETE"
    PERMISSIONUPDATE = "PERMISSIONUPDATE"

    @classmethod
    def parse(cls, value: object) -> "Permission | None":
        """Return the matching permission, or None for unknown labels."""
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None


DEFAULT_PERMISSIONS = [Permission.USER.value]

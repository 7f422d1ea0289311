"""User management schemas."""

from pydantic import BaseModel, Field

from src.models.enums import Permission


class PermissionsUpdate(BaseModel):
    """Replacement permission list for a user."""

    permissions: list[Permission] = Field(..., min_length=1)

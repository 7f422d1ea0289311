"""User management API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import SessionUser, get_credential_manager, require_permissions
from src.schemas.auth import UserResponse
from src.schemas.user import PermissionsUpdate
from src.services.auth import ADMIN_PERMISSIONS, CredentialManager

router = APIRouter(prefix="/api/v1/users", tags=["users"])

require_permission_admin = require_permissions(*ADMIN_PERMISSIONS)


@router.get("", response_model=list[UserResponse])
def get_users(
    current_user: Annotated[SessionUser, Depends(require_permission_admin)],
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
):
    """Get all users (ADMIN or PERMISSIONUPDATE)."""
    return credentials.list_users(current_user)


@router.put("/{user_id}/permissions", response_model=UserResponse)
def update_permissions(
    user_id: int,
    update_data: PermissionsUpdate,
    current_user: Annotated[SessionUser, Depends(require_permission_admin)],
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
):
    """Replace a user's permissions (ADMIN or PERMISSIONUPDATE)."""
    return credentials.update_permissions(current_user, user_id, update_data.permissions)

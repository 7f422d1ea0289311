"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from src.api.dependencies import (
    RequestContext,
    get_credential_manager,
    get_request_context,
)
from src.config import Settings, get_settings
from src.database import get_db
from src.models.user import User
from src.schemas.auth import (
    MessageResponse,
    PasswordReset,
    ResetRequest,
    UserResponse,
    UserSignin,
    UserSignup,
)
from src.services.auth import CredentialManager

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Write the session token as an httpOnly cookie lasting one year."""
    response.set_cookie(
        settings.session_cookie_name,
        value=token,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
        max_age=settings.session_cookie_max_age_seconds,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Expire the session cookie on the client."""
    response.delete_cookie(
        settings.session_cookie_name,
        httponly=True,
        samesite="lax",
        secure=settings.secure_cookies,
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    user_data: UserSignup,
    response: Response,
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Create an account and sign it in."""
    user, token = await credentials.signup(user_data.email, user_data.password, user_data.name)
    set_session_cookie(response, token, settings)
    return user


@router.post("/signin", response_model=UserResponse)
async def signin(
    user_data: UserSignin,
    response: Response,
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Sign in with email and password."""
    user, token = await credentials.signin(user_data.email, user_data.password)
    set_session_cookie(response, token, settings)
    return user


@router.post("/signout", response_model=MessageResponse)
async def signout(
    response: Response,
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Sign out by clearing the session cookie."""
    credentials.signout(ctx.user_id)
    clear_session_cookie(response, settings)
    return MessageResponse(message="Goodbye!")


@router.post("/request-reset", response_model=MessageResponse)
def request_reset(
    reset_data: ResetRequest,
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
):
    """Email a password reset link."""
    credentials.request_password_reset(reset_data.email)
    return MessageResponse(message="Thanks! Check your email for a reset link.")


@router.post("/reset", response_model=UserResponse)
async def reset_password(
    reset_data: PasswordReset,
    response: Response,
    credentials: Annotated[CredentialManager, Depends(get_credential_manager)],
    settings: Annotated[Settings, Depends(get_settings)],
):
    """Set a new password with a reset token and sign in."""
    user, token = await credentials.reset_password(
        reset_data.reset_token, reset_data.password, reset_data.confirm_password
    )
    set_session_cookie(response, token, settings)
    return user


@router.get("/me", response_model=UserResponse | None)
async def get_me(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the signed-in user, or null when anonymous."""
    if not ctx.is_authenticated:
        return None
    return db.query(User).filter(User.id == ctx.user_id).first()

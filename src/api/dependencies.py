"""FastAPI dependencies for the request context, authentication and services.

``get_request_context`` is installed as an application-wide dependency, so it
runs once for every request before any route handler. FastAPI caches its
result per request, and handlers that ask for it receive the same immutable
``RequestContext``.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from src.config import Settings, get_settings
from src.database import get_db
from src.models.enums import Permission
from src.models.user import User
from src.services.auth import CredentialManager
from src.services.cart_service import CartService
from src.services.errors import Unauthenticated
from src.services.mailer import Mailer, get_mailer
from src.services.permissions import has_permission, user_permissions
from src.services.tokens import TokenService


@dataclass(frozen=True)
class SessionUser:
    """Snapshot of the signed-in user taken when the request started."""

    id: int
    email: str
    name: str | None
    permissions: frozenset[Permission] = field(default_factory=frozenset)

    @classmethod
    def from_model(cls, user: User) -> "SessionUser":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            permissions=user_permissions(user),
        )


@dataclass(frozen=True)
class RequestContext:
    """Identity attached to a request."""

    user_id: int | None = None
    user: SessionUser | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


ANONYMOUS = RequestContext()


def get_token_service(settings: Annotated[Settings, Depends(get_settings)]) -> TokenService:
    """Get token service bound to the configured secret."""
    return TokenService(settings)


def get_request_context(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> RequestContext:
    """Resolve the session cookie into a request context.

    No cookie means an anonymous request. A cookie that fails verification
    fails the whole request with InvalidToken, and the error handler expires
    the cookie. A valid token whose user no longer exists is treated as
    anonymous.
    """
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return ANONYMOUS

    user_id = tokens.verify(token)

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        return ANONYMOUS

    return RequestContext(user_id=user_id, user=SessionUser.from_model(user))


def get_current_user(
    ctx: Annotated[RequestContext, Depends(get_request_context)],
) -> SessionUser:
    """Require a signed-in user."""
    if ctx.user is None:
        raise Unauthenticated()
    return ctx.user


def require_permissions(*permissions: Permission) -> Callable[..., SessionUser]:
    """Build a dependency that requires one of ``permissions``."""

    def dependency(
        current_user: Annotated[SessionUser, Depends(get_current_user)],
    ) -> SessionUser:
        has_permission(current_user, permissions)
        return current_user

    return dependency


def get_credential_manager(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    mailer: Annotated[Mailer, Depends(get_mailer)],
) -> CredentialManager:
    """Get credential manager with dependencies."""
    return CredentialManager(db, settings, tokens, mailer)


def get_cart_service(
    db: Annotated[Session, Depends(get_db)],
) -> CartService:
    """Get cart service with dependencies."""
    return CartService(db)

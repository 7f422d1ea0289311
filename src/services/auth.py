"""Account credentials: signup, signin, password reset and permission updates."""

import logging
import secrets
from collections.abc import Callable, Iterable
from datetime import UTC, datetime, timedelta
from functools import lru_cache

from fastapi.concurrency import run_in_threadpool
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import Settings
from src.models.enums import DEFAULT_PERMISSIONS, Permission
from src.models.user import User
from src.services.errors import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    InvalidOrExpiredToken,
    NotFound,
    PasswordMismatch,
)
from src.services.mailer import Mailer, make_reset_email
from src.services.permissions import has_permission
from src.services.tokens import TokenService

logger = logging.getLogger(__name__)

ADMIN_PERMISSIONS = (Permission.ADMIN, Permission.PERMISSIONUPDATE)


@lru_cache
def get_pwd_context(rounds: int) -> CryptContext:
    """Password hashing context for the given bcrypt cost factor."""
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lowercase."""
    return email.strip().lower()


def utcnow() -> datetime:
    return datetime.now(UTC)


def _as_aware(value: datetime) -> datetime:
    # SQLite hands timezone-aware columns back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class CredentialManager:
    """Manages the credential lifecycle of user accounts.

    Password hashing and verification are CPU bound and run on the thread
    pool so they don't block the event loop. Every successful signup, signin
    and password reset returns a fresh session token alongside the user.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        tokens: TokenService,
        mailer: Mailer,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.db = db
        self.settings = settings
        self.tokens = tokens
        self.mailer = mailer
        self.clock = clock
        self.pwd_context = get_pwd_context(settings.bcrypt_rounds)

    def hash_password(self, password: str) -> str:
        """Hash a password."""
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return self.pwd_context.verify(plain_password, hashed_password)

    def get_user_by_email(self, email: str) -> User | None:
        """Get a user by email, ignoring case."""
        return self.db.query(User).filter(User.email == normalize_email(email)).first()

    async def signup(self, email: str, password: str, name: str | None = None) -> tuple[User, str]:
        """Create an account with the default permissions and sign it in."""
        email = normalize_email(email)
        if self.get_user_by_email(email):
            raise EmailAlreadyRegistered()

        password_hash = await run_in_threadpool(self.hash_password, password)
        user = User(
            email=email,
            password_hash=password_hash,
            name=name,
            permissions=list(DEFAULT_PERMISSIONS),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # Another signup for the same email committed first
            self.db.rollback()
            raise EmailAlreadyRegistered() from None
        self.db.refresh(user)

        logger.info(f"Signed up user {user.id}")
        return user, self.tokens.issue(user.id)

    async def signin(self, email: str, password: str) -> tuple[User, str]:
        """Check credentials and issue a session token."""
        user = self.get_user_by_email(email)
        if not user:
            logger.info("Signin failed: no account for email")
            raise NotFound(f"No such user found for email {normalize_email(email)}")

        valid = await run_in_threadpool(self.verify_password, password, user.password_hash)
        if not valid:
            logger.info(f"Signin failed: bad password for user {user.id}")
            raise InvalidCredentials()

        logger.info(f"Signed in user {user.id}")
        return user, self.tokens.issue(user.id)

    def signout(self, user_id: int | None = None) -> None:
        """Sessions are stateless; the caller clears the session cookie."""
        logger.info(f"Signed out user {user_id}")

    def request_password_reset(self, email: str) -> bool:
        """Store a fresh reset token on the account and mail a reset link.

        Returns whether the notification was handed off. A failed hand-off
        leaves the stored token valid.
        """
        user = self.get_user_by_email(email)
        if not user:
            raise NotFound(f"No such user found for email {normalize_email(email)}")

        user.reset_token = secrets.token_hex(self.settings.reset_token_bytes)
        user.reset_token_expiry = self.clock() + timedelta(
            seconds=self.settings.reset_token_ttl_seconds
        )
        self.db.commit()
        logger.info(f"Password reset requested for user {user.id}")

        reset_link = f"{self.settings.frontend_url}/reset?resetToken={user.reset_token}"
        try:
            sent = self.mailer.send_mail(
                user.email, "Your Password Reset Token", make_reset_email(reset_link)
            )
        except Exception as e:
            logger.warning(f"Reset mail for user {user.id} raised: {e}")
            sent = False

        if not sent:
            logger.warning(f"Reset mail for user {user.id} was not delivered")
        return sent

    async def reset_password(
        self, reset_token: str, password: str, confirm_password: str
    ) -> tuple[User, str]:
        """Set a new password using a reset token issued within the last hour."""
        if password != confirm_password:
            raise PasswordMismatch()

        user = None
        if reset_token:
            user = self.db.query(User).filter(User.reset_token == reset_token).first()
        if not user or not user.reset_token_expiry:
            raise InvalidOrExpiredToken()
        if _as_aware(user.reset_token_expiry) < self.clock():
            raise InvalidOrExpiredToken()

        user.password_hash = await run_in_threadpool(self.hash_password, password)
        user.reset_token = None
        user.reset_token_expiry = None
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"Password reset for user {user.id}")
        return user, self.tokens.issue(user.id)

    def list_users(self, actor) -> list[User]:
        """All accounts, for actors allowed to manage permissions."""
        has_permission(actor, ADMIN_PERMISSIONS)
        return self.db.query(User).order_by(User.id).all()

    def update_permissions(
        self, actor, user_id: int, permissions: Iterable[Permission]
    ) -> User:
        """Replace a user's permission list."""
        has_permission(actor, ADMIN_PERMISSIONS)

        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("User not found")

        # Deduplicate, keep order
        user.permissions = list(dict.fromkeys(Permission(p).value for p in permissions))
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User {getattr(actor, 'id', None)} set permissions of user {user.id}")
        return user

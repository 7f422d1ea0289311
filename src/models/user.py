"""User model."""

from sqlalchemy import JSON, Column, DateTime, Integer, String

from src.database import Base
from src.models.enums import DEFAULT_PERMISSIONS
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication, permissions and ownership."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)  # always lowercase
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    # ["USER", "ADMIN", ...] - values of Permission
    permissions = Column(JSON, nullable=False, default=lambda: list(DEFAULT_PERMISSIONS))
    reset_token = Column(String(128), nullable=True, index=True)
    reset_token_expiry = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"

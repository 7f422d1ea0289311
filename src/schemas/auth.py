"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from src.models.enums import Permission


class UserSignup(BaseModel):
    """User signup request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=8, max_length=72)
    name: str | None = Field(None, max_length=255)


class UserSignin(BaseModel):
    """User signin request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class ResetRequest(BaseModel):
    """Password reset request."""

    email: EmailStr = Field(..., max_length=255)


class PasswordReset(BaseModel):
    """New password submitted with a reset token."""

    reset_token: str = Field(..., min_length=1, max_length=128)
    password: str = Field(..., min_length=8, max_length=72)
    confirm_password: str = Field(..., min_length=8, max_length=72)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    permissions: list[Permission]


class MessageResponse(BaseModel):
    message: str

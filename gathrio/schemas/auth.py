"""Authentication schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from gathrio.core.security import MIN_PASSWORD_LENGTH

# bcrypt only hashes the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


def _check_password_length(v: str) -> str:
    if len(v) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return v


class UserRegister(BaseModel):
    """User registration request schema."""

    email: EmailStr
    password: str
    first_name: str
    last_name: str
    phone: str | None = None
    role: Literal["attendee", "organizer"] | None = None

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password length."""
        return _check_password_length(v)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize names by stripping whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("first_name")
    @classmethod
    def require_first_name(cls, v: str) -> str:
        if not v:
            raise ValueError("First name is required")
        return v

    @field_validator("last_name")
    @classmethod
    def require_last_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Last name is required")
        return v

    @field_validator("phone", mode="before")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        """Treat blank phone numbers as absent."""
        if isinstance(v, str):
            return v.strip() or None
        return v


class UserLogin(BaseModel):
    """User login request schema."""

    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def require_password(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Password is required")
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
        return v


class ForgotPasswordRequest(BaseModel):
    """Password reset request schema."""

    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Password reset redemption schema."""

    token: str
    password: str

    @field_validator("token")
    @classmethod
    def require_token(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Token is required")
        return v

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        """Validate password length."""
        return _check_password_length(v)


class UserResponse(BaseModel):
    """User response schema. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    last_name: str
    phone: str | None
    role: str
    is_verified: bool
    created_at: str
    updated_at: str


class AuthResponse(BaseModel):
    """Register/login response schema with access token and user info."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserResponse
    access_token: str = Field(alias="accessToken")


class MessageResponse(BaseModel):
    """Plain message response schema."""

    message: str


class ForgotPasswordResponse(BaseModel):
    """Forgot-password response schema.

    ``resetToken`` is only populated when the deployment has no out-of-band
    delivery channel for reset secrets.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str
    reset_token: str | None = Field(default=None, alias="resetToken")

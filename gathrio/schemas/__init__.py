"""Pydantic schemas package."""

from gathrio.schemas.auth import (
    AuthResponse,
    ForgotPasswordRequest,
    ForgotPasswordResponse,
    MessageResponse,
    ResetPasswordRequest,
    UserLogin,
    UserRegister,
    UserResponse,
)
from gathrio.schemas.event import (
    EventCreate,
    EventListResponse,
    EventResponse,
    EventUpdate,
    TicketTypeCreate,
    TicketTypeResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "ForgotPasswordRequest",
    "ForgotPasswordResponse",
    "ResetPasswordRequest",
    "MessageResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventListResponse",
    "TicketTypeCreate",
    "TicketTypeResponse",
]

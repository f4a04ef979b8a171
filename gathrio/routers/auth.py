"""Authentication router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from gathrio.config import Settings, get_settings
from gathrio.core.auth_service import AuthResult, AuthService
from gathrio.core.dependencies import get_auth_service
from gathrio.models.user import User
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
from gathrio.schemas.event import isoformat_utc

REFRESH_TOKEN_COOKIE = "refreshToken"

router = APIRouter(prefix="/api/auth", tags=["auth"])


def user_response(user: User) -> UserResponse:
    """Serialize a user without its credential fields."""
    return UserResponse(
        id=str(user.id),
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        phone=user.phone,
        role=user.role,
        is_verified=user.is_verified,
        created_at=isoformat_utc(user.created_at),
        updated_at=isoformat_utc(user.updated_at),
    )


def set_refresh_cookie(response: Response, refresh_token: str, settings: Settings) -> None:
    """Attach the refresh token as an httpOnly, strict same-site cookie."""
    response.set_cookie(
        key=REFRESH_TOKEN_COOKIE,
        value=refresh_token,
        max_age=settings.refresh_token_expire_days * 24 * 60 * 60,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
        path="/",
    )


def _auth_response(result: AuthResult, response: Response, settings: Settings) -> AuthResponse:
    set_refresh_cookie(response, result.refresh_token, settings)
    return AuthResponse(user=user_response(result.user), access_token=result.access_token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Create a new user account.

    Args:
        user_data: Registration data (email, password, names, optional phone and role)
        response: Outgoing response, receives the refresh token cookie
        auth_service: Authentication service
        settings: Application settings

    Returns:
        AuthResponse: Created user and access token

    Raises:
        DuplicateEmail: If email already exists
    """
    result = auth_service.register(
        email=user_data.email,
        password=user_data.password,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        phone=user_data.phone,
        role=user_data.role,
    )
    return _auth_response(result, response, settings)


@router.post("/login", response_model=AuthResponse, status_code=status.HTTP_200_OK)
async def login(
    user_data: UserLogin,
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthResponse:
    """Authenticate user and return access token.

    Args:
        user_data: User login data (email, password)
        response: Outgoing response, receives the refresh token cookie
        auth_service: Authentication service
        settings: Application settings

    Returns:
        AuthResponse: Access token and user information

    Raises:
        InvalidCredentials: If email or password is invalid
    """
    result = auth_service.login(email=user_data.email, password=user_data.password)
    return _auth_response(result, response, settings)


@router.post("/logout", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def logout(
    response: Response,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Clear the refresh token cookie.

    Already issued tokens are not revoked and stay valid until they expire.
    """
    response.delete_cookie(key=REFRESH_TOKEN_COOKIE, path="/")
    return MessageResponse(message=auth_service.logout())


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
)
async def forgot_password(
    request_data: ForgotPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ForgotPasswordResponse:
    """Issue a password reset token.

    There is no mail transport, so outside production the plaintext token is
    returned in the body. In production it is withheld unless
    ``EXPOSE_RESET_TOKEN`` is set.

    Raises:
        UserNotFound: If no user has this email
    """
    result = auth_service.forgot_password(request_data.email)
    return ForgotPasswordResponse(
        message=result.message,
        reset_token=result.reset_token if settings.reset_token_in_response else None,
    )


@router.post("/reset-password", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def reset_password(
    request_data: ResetPasswordRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> MessageResponse:
    """Set a new password using a reset token.

    Raises:
        InvalidOrExpiredToken: If the token is unknown, already used, or expired
    """
    message = auth_service.reset_password(request_data.token, request_data.password)
    return MessageResponse(message=message)

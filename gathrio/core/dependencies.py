"""FastAPI dependencies for services and request authentication."""

import logging
from typing import Annotated, Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from gathrio.config import Settings, get_settings
from gathrio.core.auth_service import AuthService
from gathrio.core.events import EventService
from gathrio.core.exceptions import InvalidToken
from gathrio.core.tokens import TokenIdentity, TokenService
from gathrio.database import get_db

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_service(settings: Annotated[Settings, Depends(get_settings)]) -> TokenService:
    """Build the token service from the process settings."""
    return TokenService(settings)


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    """Build the authentication service for the current request."""
    return AuthService(db=db, tokens=tokens, settings=settings)


def get_event_service(db: Annotated[Session, Depends(get_db)]) -> EventService:
    """Build the event service for the current request."""
    return EventService(db)


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenIdentity:
    """Resolve the caller from an ``Authorization: Bearer`` access token.

    The identity comes from the token alone; the user store is not read.

    Raises:
        HTTPException: 401 if the header is missing or the token does not verify
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return tokens.verify_access_token(credentials.credentials)
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_optional_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> TokenIdentity | None:
    """Resolve the caller if a valid token is present, otherwise treat them as anonymous."""
    if credentials is None:
        return None

    try:
        return tokens.verify_access_token(credentials.credentials)
    except InvalidToken:
        logger.debug("Ignoring invalid bearer token on optionally authenticated route")
        return None


def require_role(*allowed_roles: str) -> Callable[..., TokenIdentity]:
    """Build a dependency that admits only callers holding one of ``allowed_roles``.

    Example:
        ```python
        @router.post("")
        async def create_event(
            current_user: Annotated[TokenIdentity, Depends(require_role("organizer", "admin"))],
        ): ...
        ```
    """

    def _require_role(
        current_user: Annotated[TokenIdentity, Depends(get_current_user)],
    ) -> TokenIdentity:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: You do not have permission to access this resource",
            )
        return current_user

    return _require_role

"""Authentication and credential lifecycle.

Registration, login, logout, and the password reset flow. Users move
between three states:

- anonymous -> authenticated via ``register`` or ``login``
- authenticated -> anonymous via ``logout`` (the client drops its refresh
  cookie; nothing is revoked server-side, so an issued refresh token stays
  valid until it expires)
- anonymous -> reset-pending via ``forgot_password``
- reset-pending -> anonymous via ``reset_password``, or silently once the
  reset token expires
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gathrio.config import Settings
from gathrio.core.exceptions import (
    DuplicateEmail,
    InvalidCredentials,
    InvalidOrExpiredToken,
    UserNotFound,
    ValidationError,
)
from gathrio.core.security import (
    MIN_PASSWORD_LENGTH,
    hash_password,
    hash_reset_secret,
    issue_reset_secret,
    verify_password,
)
from gathrio.core.tokens import TokenIdentity, TokenService
from gathrio.models.user import User, UserRole

logger = logging.getLogger(__name__)

REGISTRABLE_ROLES = (UserRole.ATTENDEE.value, UserRole.ORGANIZER.value)


@dataclass
class AuthResult:
    """Outcome of a successful register or login."""

    user: User
    access_token: str
    refresh_token: str


@dataclass
class ForgotPasswordResult:
    """Outcome of a password reset request.

    ``reset_token`` is the plaintext secret. It has to reach the user
    through a separate channel; only its hash is stored.
    """

    message: str
    reset_token: str


class AuthService:
    """Authentication operations against the user store."""

    def __init__(self, db: Session, tokens: TokenService, settings: Settings):
        self.db = db
        self.tokens = tokens
        self.settings = settings

    def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone: str | None = None,
        role: str | None = None,
    ) -> AuthResult:
        """Create a user account and sign it in.

        Args:
            email: Login email, must not be registered yet
            password: Plain text password
            first_name: First name
            last_name: Last name
            phone: Optional phone number
            role: Optional role, defaults to attendee

        Returns:
            AuthResult: Created user with fresh access and refresh tokens

        Raises:
            DuplicateEmail: If the email is already registered, including when a
                concurrent registration wins the race on the unique index
            ValidationError: If the password is too short or the role is not allowed
        """
        self._check_password(password)
        role = role or UserRole.ATTENDEE.value
        if role not in REGISTRABLE_ROLES:
            raise ValidationError([f"Role must be one of: {', '.join(REGISTRABLE_ROLES)}"])

        existing_user = self.db.query(User).filter(User.email == email).first()
        if existing_user:
            raise DuplicateEmail()

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid4(),
            email=email,
            password_hash=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            role=role,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Only a concurrent insert of the same email maps to DuplicateEmail
            if self.db.query(User).filter(User.email == email).first() is None:
                raise
            logger.info("Registration rejected by unique email constraint")
            raise DuplicateEmail()
        self.db.refresh(user)

        logger.info(f"Registered user {user.id} with role {user.role}")
        return self._issue_tokens(user)

    def login(self, email: str, password: str) -> AuthResult:
        """Verify credentials and issue fresh tokens.

        Raises:
            InvalidCredentials: If the email is unknown or the password is wrong.
                Both cases raise the same error with the same message.
        """
        user = self.db.query(User).filter(User.email == email).first()
        if user is None or not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()

        logger.info(f"User {user.id} logged in")
        return self._issue_tokens(user)

    def logout(self) -> str:
        """Sign out. The caller is responsible for clearing the refresh cookie."""
        return "Logout successful"

    def forgot_password(self, email: str) -> ForgotPasswordResult:
        """Start a password reset for the user with this email.

        Any earlier pending reset for the user is replaced.

        Raises:
            UserNotFound: If no user has this email
        """
        user = self.db.query(User).filter(User.email == email).first()
        if user is None:
            raise UserNotFound()

        plaintext, secret_hash = issue_reset_secret()
        user.reset_token_hash = secret_hash
        user.reset_token_expiry = datetime.now(timezone.utc) + timedelta(
            minutes=self.settings.reset_token_expire_minutes
        )
        self.db.commit()

        logger.info(f"Password reset token issued for user {user.id}")
        return ForgotPasswordResult(
            message="Password reset token generated",
            reset_token=plaintext,
        )

    def reset_password(self, token: str, new_password: str) -> str:
        """Redeem a reset token and set a new password.

        Matching the token and clearing it happen in one conditional UPDATE,
        so a token can be redeemed at most once even under concurrent requests.

        Args:
            token: Plaintext reset token
            new_password: New plain text password

        Returns:
            Confirmation message

        Raises:
            ValidationError: If the new password is too short
            InvalidOrExpiredToken: If no pending reset matches the token or it has
                expired. Both cases raise the same error.
        """
        self._check_password(new_password)

        now = datetime.now(timezone.utc)
        result = self.db.execute(
            update(User)
            .where(
                User.reset_token_hash == hash_reset_secret(token),
                User.reset_token_expiry > now,
            )
            .values(
                password_hash=hash_password(new_password),
                reset_token_hash=None,
                reset_token_expiry=None,
                updated_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            logger.warning("Password reset attempted with invalid or expired token")
            raise InvalidOrExpiredToken()

        self.db.commit()
        logger.info("Password reset completed")
        return "Password reset successful"

    def _issue_tokens(self, user: User) -> AuthResult:
        identity = TokenIdentity(user_id=str(user.id), email=user.email, role=user.role)
        return AuthResult(
            user=user,
            access_token=self.tokens.issue_access_token(identity),
            refresh_token=self.tokens.issue_refresh_token(identity),
        )

    @staticmethod
    def _check_password(password: str) -> None:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError([f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"])
